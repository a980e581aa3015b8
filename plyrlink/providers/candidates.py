"""Manifest URL patterns, the per-attempt candidate set and master selection."""
from __future__ import annotations
import re
from typing import Iterable, Iterator, Optional

MANIFEST_MARK = ".m3u8"
MASTER_MARK = "master.m3u8"

MANIFEST_RE = re.compile(r'https?://[^\s"\'<>]+\.m3u8[^\s"\'<>]*')
MANIFEST_RE_I = re.compile(MANIFEST_RE.pattern, re.IGNORECASE)


class CandidateSet:
    """Deduplicated manifest URLs in the order they were harvested."""

    def __init__(self, urls: Iterable[str] = ()):
        self._urls: dict[str, None] = {}
        self.update(urls)

    def add(self, url: str) -> bool:
        if not url or MANIFEST_MARK not in url:
            return False
        if url in self._urls:
            return False
        self._urls[url] = None
        return True

    def update(self, urls: Iterable[str]) -> int:
        return sum(1 for u in urls if self.add(u))

    def __iter__(self) -> Iterator[str]:
        return iter(self._urls)

    def __len__(self) -> int:
        return len(self._urls)

    def __contains__(self, url) -> bool:
        return url in self._urls

    def __repr__(self):
        return f"CandidateSet({list(self._urls)!r})"


def scan_markup(html: str) -> Optional[str]:
    match = MANIFEST_RE.search(html or "")
    return match.group(0) if match else None


def scan_scripts(scripts: Iterable[str]) -> list[str]:
    found = []
    for text in scripts:
        found.extend(MANIFEST_RE_I.findall(text or ""))
    return found


def select_master(candidates: Iterable[str]) -> Optional[str]:
    # Fallback is the first-harvested candidate
    urls = list(candidates)
    for url in urls:
        if MASTER_MARK in url:
            return url
    return urls[0] if urls else None
