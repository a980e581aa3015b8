"""
Document sandboxes: load player markup, let its scripts run, read back the
rendered DOM and script text.

Every sandbox raises SandboxExecutionError on any failure and releases its
document whatever the outcome.

The browser sandbox (playwright) also:
  - keeps page console output away from the host
  - stubs the jwplayer global so player setup calls are no-ops
  - waits config.settle_wait seconds before reading back (best-effort sync point)

The markup sandbox is parse-only: no scripts run, no wait.
"""
from __future__ import annotations
import asyncio
import logging

from bs4 import BeautifulSoup
from playwright.async_api import async_playwright, Error as PlaywrightError

from .base import ExtractionConfig, RenderedDocument, SandboxExecutionError

log = logging.getLogger("plyrlink.providers.sandbox")

# Injected before any page script runs
CONSOLE_SILENCER = """
(() => {
  const noop = () => {};
  for (const level of ['log', 'info', 'warn', 'error', 'debug', 'trace']) {
    try { console[level] = noop; } catch (e) {}
  }
})();
"""

PLAYER_STUB = """
(() => {
  window.jwplayer = function () {
    const player = {};
    player.setup = () => player;
    player.on = () => player;
    return player;
  };
})();
"""


class DocumentSandbox:
    id: str
    name: str

    async def render(self, markup: str, url: str, config: ExtractionConfig) -> RenderedDocument:
        raise NotImplementedError


_SANDBOXES: dict[str, DocumentSandbox] = {}


def register_sandbox(sandbox):
    """Decorator to register a sandbox class."""
    inst = sandbox()
    _SANDBOXES[inst.id] = inst
    return sandbox


def get_sandbox(sandbox_id: str) -> DocumentSandbox:
    try:
        return _SANDBOXES[sandbox_id]
    except KeyError:
        raise ValueError(f"Unknown sandbox '{sandbox_id}' (available: {', '.join(sorted(_SANDBOXES))})") from None


def list_sandboxes():
    return [{"id": s.id, "name": s.name} for s in _SANDBOXES.values()]


@register_sandbox
class PlaywrightSandbox(DocumentSandbox):
    """Headless Chromium. The fetched markup is served for the player URL so
    relative scripts and resources resolve against it."""
    id = "playwright"
    name = "Playwright (Chromium)"

    async def render(self, markup: str, url: str, config: ExtractionConfig) -> RenderedDocument:
        log.debug(f"[{self.id}] Rendering {url} (settle {config.settle_wait}s)")
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=True)
                try:
                    context = await browser.new_context(user_agent=config.user_agent)
                    await context.add_init_script(script=CONSOLE_SILENCER + PLAYER_STUB)
                    page = await context.new_page()
                    served = False

                    async def serve_markup(route, request):
                        nonlocal served
                        if not served and request.is_navigation_request() and request.frame == page.main_frame:
                            served = True
                            await route.fulfill(status=200, content_type="text/html; charset=utf-8", body=markup)
                        else:
                            await route.continue_()

                    await page.route("**/*", serve_markup)
                    await page.goto(url, wait_until="domcontentloaded", timeout=config.timeout * 1000)
                    await asyncio.sleep(config.settle_wait)

                    html = await page.evaluate("() => document.documentElement.innerHTML")
                    scripts = await page.eval_on_selector_all(
                        "script", "els => els.map(el => el.textContent || '')")
                finally:
                    await browser.close()
        except PlaywrightError as e:
            raise SandboxExecutionError(f"Playwright render of {url} failed: {e}") from e

        return RenderedDocument(html=html, scripts=list(scripts))


@register_sandbox
class MarkupSandbox(DocumentSandbox):
    """Parse-only rendition for hosts without a browser. Scripts are never run,
    so the document is read back exactly as served."""
    id = "markup"
    name = "Markup only (BeautifulSoup)"

    async def render(self, markup: str, url: str, config: ExtractionConfig) -> RenderedDocument:
        try:
            soup = BeautifulSoup(markup, "html.parser")
        except Exception as e:
            raise SandboxExecutionError(f"Could not parse {url}: {e}") from e

        try:
            root = soup.find("html")
            html = root.decode_contents() if root else str(soup)
            scripts = [s.get_text() for s in soup.find_all("script")]
        finally:
            soup.decompose()
        return RenderedDocument(html=html, scripts=scripts)
