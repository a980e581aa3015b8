"""
Extraction engine: landing page → player link → sandboxed player page → manifest URL.

Usage:
    extractor = VideoLinkExtractor()
    result = await extractor.extract("https://example.com/watch/123")
    print(result.to_dict())    # {"masterLink": ..., "plyrLink": ...}
"""
from __future__ import annotations
import logging
from typing import Optional

from .base import (
    ExtractionConfig, ExtractionResult, HarvestOutcome,
    NetworkError, SandboxExecutionError,
)
from .candidates import CandidateSet, scan_markup, scan_scripts, select_master
from .fetcher import Fetcher
from .player_link import find_player_link
from .sandbox import DocumentSandbox, get_sandbox

log = logging.getLogger("plyrlink.providers")


async def harvest_manifests(
    plyr_link: str,
    fetcher: Fetcher,
    sandbox: DocumentSandbox,
    config: ExtractionConfig,
) -> HarvestOutcome:
    """Fetch the player page, render it in the sandbox and collect every
    manifest-shaped URL: the first one in the rendered markup, then all of
    them in script text."""
    try:
        markup = await fetcher.get(plyr_link)
    except NetworkError as e:
        return HarvestOutcome.failure(e)

    try:
        doc = await sandbox.render(markup, plyr_link, config)
    except SandboxExecutionError as e:
        return HarvestOutcome.failure(e)
    except Exception as e:
        return HarvestOutcome.failure(SandboxExecutionError(f"[{sandbox.id}] {e}"))

    urls = []
    first = scan_markup(doc.html)
    if first:
        urls.append(first)
    urls.extend(scan_scripts(doc.scripts))
    return HarvestOutcome.success(urls)


# ──────────────────────────────
#  Engine
# ──────────────────────────────
class VideoLinkExtractor:
    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        *,
        sandbox: DocumentSandbox | str = "playwright",
        fetcher: Optional[Fetcher] = None,
    ):
        self.config = config or ExtractionConfig()
        self.sandbox = get_sandbox(sandbox) if isinstance(sandbox, str) else sandbox
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or Fetcher(
            timeout=self.config.timeout, user_agent=self.config.user_agent)

    async def close(self):
        if self._owns_fetcher:
            await self.fetcher.close()

    async def extract(self, url: str) -> ExtractionResult:
        """Never raises: every failure ends up as a null field."""
        try:
            return await self._extract(url)
        finally:
            await self.close()

    async def _extract(self, url: str) -> ExtractionResult:
        attempts = self.config.max_retries + 1
        for attempt in range(attempts):
            log.info(f"[{attempt + 1}/{attempts}] Extracting {url}")
            try:
                return await self._attempt(url, CandidateSet())
            except NetworkError as e:
                log.warning(f"[{attempt + 1}/{attempts}] Landing page failed: {e}")
            except Exception as e:
                log.warning(f"[{attempt + 1}/{attempts}] Attempt failed: {e!r}")

        log.warning(f"All {attempts} attempts exhausted for {url}")
        return ExtractionResult()

    async def _attempt(self, url: str, candidates: CandidateSet) -> ExtractionResult:
        html = await self.fetcher.get(url)
        plyr_link = find_player_link(html)
        if not plyr_link:
            return ExtractionResult(master_link=None, plyr_link=None)

        log.info(f"Player link: {plyr_link}")
        outcome = await harvest_manifests(plyr_link, self.fetcher, self.sandbox, self.config)
        if outcome.ok:
            added = candidates.update(outcome.harvested.urls)
            log.info(f"[{self.sandbox.id}] {added} manifest candidate(s)")
        else:
            log.debug(f"[{self.sandbox.id}] Player page yielded nothing: {outcome.error}")

        return ExtractionResult(master_link=select_master(candidates), plyr_link=plyr_link)
