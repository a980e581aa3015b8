"""
Player-link parser: finds the intermediate player page on a landing page.

The landing page lists servers as <li onclick="player_iframe.location.href='...'">.
Only the first such element is consulted; its handler is matched as text,
never executed.
"""
from __future__ import annotations
import logging
import re
from typing import Optional

from bs4 import BeautifulSoup

log = logging.getLogger("plyrlink.providers.player_link")

HREF_ASSIGN_RE = re.compile(r"player_iframe\.location\.href\s*=\s*'(.*?)'")


def find_player_link(markup: str) -> Optional[str]:
    soup = BeautifulSoup(markup or "", "html.parser")
    item = soup.select_one("li[onclick]")
    if item is None:
        log.info("No onclick server entry on landing page")
        return None

    match = HREF_ASSIGN_RE.search(item.get("onclick") or "")
    if not match or not match.group(1):
        log.info("First onclick entry has no player_iframe assignment")
        return None
    return match.group(1)
