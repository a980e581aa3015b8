"""
Core types for the plyrlink extraction pipeline.

Two stages:
  - landing page → player link (static markup parse)
  - player page → manifest URLs (sandboxed script execution)
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Union

DEFAULT_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# ──────────────────────────────
#  Errors
# ──────────────────────────────
class ExtractionError(Exception):
    pass


class NetworkError(ExtractionError):
    """Transport-level failure fetching a page."""

    def __init__(self, url: str, cause: BaseException | None = None):
        self.url = url
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"GET {url} failed{detail}")


class SandboxExecutionError(ExtractionError):
    """Running or parsing a page inside the sandbox failed."""


class InputError(ExtractionError):
    """Missing or wrong-typed request parameter."""


# ──────────────────────────────
#  Configuration
# ──────────────────────────────
@dataclass(frozen=True)
class ExtractionConfig:
    timeout: float = 5.0              # seconds, per fetch
    user_agent: str = DEFAULT_UA
    max_retries: int = 2              # total attempts = max_retries + 1
    settle_wait: float = 1.0          # seconds scripts may run before harvesting


# ──────────────────────────────
#  Sandbox output
# ──────────────────────────────
@dataclass
class RenderedDocument:
    html: str                         # serialized markup after scripts ran
    scripts: list[str] = field(default_factory=list)  # <script> text, document order


@dataclass
class Harvested:
    urls: list[str] = field(default_factory=list)  # harvest order, unfiltered


@dataclass
class HarvestOutcome:
    harvested: Optional[Harvested] = None
    error: Optional[Union[NetworkError, SandboxExecutionError]] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, urls: list[str]) -> "HarvestOutcome":
        return cls(harvested=Harvested(urls=list(urls)))

    @classmethod
    def failure(cls, error: Union[NetworkError, SandboxExecutionError]) -> "HarvestOutcome":
        return cls(error=error)


# ──────────────────────────────
#  Final output
# ──────────────────────────────
@dataclass(frozen=True)
class ExtractionResult:
    master_link: Optional[str] = None
    plyr_link: Optional[str] = None

    def to_dict(self):
        return {"masterLink": self.master_link, "plyrLink": self.plyr_link}
