import asyncio

import pytest

from playwright.async_api import async_playwright, Error as PlaywrightError

from plyrlink.providers import sandbox as sandbox_module
from plyrlink.providers.base import ExtractionConfig, SandboxExecutionError
from plyrlink.providers.runner import VideoLinkExtractor
from plyrlink.providers.sandbox import (
    MarkupSandbox, PlaywrightSandbox, get_sandbox, list_sandboxes,
)

from fakes import LANDING, PLAYER, FakeFetcher, landing_page

PLAYER_PAGE = """<!doctype html>
<html>
<head><script src="/js/jwplayer.js"></script></head>
<body>
  <div id="player" data-fallback="https://cdn.test/master.m3u8?t=1"></div>
  <script>
    var sources = ["https://cdn.test/hls/720.m3u8", 'https://cdn.test/hls/480.M3U8'];
    jwplayer("player").setup({file: sources[0]});
  </script>
</body>
</html>
"""


def test_registry_lists_builtin_sandboxes():
    ids = {s["id"] for s in list_sandboxes()}
    assert {"playwright", "markup"} <= ids
    assert isinstance(get_sandbox("playwright"), PlaywrightSandbox)
    assert isinstance(get_sandbox("markup"), MarkupSandbox)


def test_unknown_sandbox():
    with pytest.raises(ValueError, match="Unknown sandbox 'rhino'"):
        get_sandbox("rhino")


def test_markup_sandbox_reads_back_document():
    doc = asyncio.run(MarkupSandbox().render(PLAYER_PAGE, PLAYER, ExtractionConfig()))

    assert "https://cdn.test/master.m3u8?t=1" in doc.html
    assert not doc.html.lstrip().startswith("<html")
    assert len(doc.scripts) == 2
    assert doc.scripts[0] == ""
    assert "jwplayer" in doc.scripts[1]


def test_markup_sandbox_end_to_end():
    fetcher = FakeFetcher({LANDING: landing_page(), PLAYER: PLAYER_PAGE})
    extractor = VideoLinkExtractor(ExtractionConfig(settle_wait=0), sandbox="markup", fetcher=fetcher)

    result = asyncio.run(extractor.extract(LANDING))

    assert result.master_link == "https://cdn.test/master.m3u8?t=1"
    assert result.plyr_link == PLAYER


# ──────────────────────────────
#  Headless Chromium
# ──────────────────────────────
SCRIPTED_PAGE = """<!doctype html>
<html>
<body>
  <div id="p"></div>
  <script>
    console.log("player booting");
    console.error("noisy");
    jwplayer("p").setup({file: "/hls/index.m3u8"}).on("ready", function () {});
    setTimeout(function () {
      var node = document.createElement("div");
      node.id = "injected";
      node.setAttribute("data-src", "https://cdn.test/master.m3u8?t=1");
      node.setAttribute("data-console-native", String(/native code/.test(console.log.toString())));
      document.body.appendChild(node);
    }, 50);
  </script>
</body>
</html>
"""


@pytest.fixture(scope="module")
def chromium():
    async def launch():
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=True)
            await browser.close()

    try:
        asyncio.run(launch())
    except PlaywrightError as e:
        pytest.skip(f"Chromium not available: {e}")


def test_playwright_runs_player_scripts(chromium):
    config = ExtractionConfig(settle_wait=0.5)
    doc = asyncio.run(PlaywrightSandbox().render(SCRIPTED_PAGE, "https://player.test/embed/1", config))

    assert 'id="injected"' in doc.html
    assert 'data-console-native="false"' in doc.html
    assert "https://cdn.test/master.m3u8?t=1" in doc.html
    assert any("jwplayer" in s for s in doc.scripts)


def test_playwright_navigation_failure(chromium):
    with pytest.raises(SandboxExecutionError):
        asyncio.run(PlaywrightSandbox().render(SCRIPTED_PAGE, "not a url", ExtractionConfig(settle_wait=0)))


class _FailingBrowser:
    def __init__(self):
        self.closed = False

    async def new_context(self, **kwargs):
        raise PlaywrightError("Target page, context or browser has been closed")

    async def close(self):
        self.closed = True


class _FakePlaywright:
    def __init__(self, browser):
        self.browser = browser
        self.chromium = self

    async def launch(self, **kwargs):
        return self.browser

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


def test_playwright_closes_browser_on_failure(monkeypatch):
    browser = _FailingBrowser()
    monkeypatch.setattr(sandbox_module, "async_playwright", lambda: _FakePlaywright(browser))

    with pytest.raises(SandboxExecutionError):
        asyncio.run(PlaywrightSandbox().render(SCRIPTED_PAGE, PLAYER, ExtractionConfig(settle_wait=0)))
    assert browser.closed
