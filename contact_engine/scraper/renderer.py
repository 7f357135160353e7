"""Headless-browser rendering fallback for script-driven pages.

Only used when :func:`contact_engine.scraper.classifier.needs_rendering`
flags static markup as too thin; a plain HTTP fetch is always tried first.

Browser lifecycle
-----------------
* Lazy: Chromium is launched on the first render, not at import.
* Shared: one browser per :class:`PlaywrightRenderer`, reused across pages
  and across businesses within a process.
* Thread-affine: Playwright's sync API must be driven from the thread that
  started it, so every browser call runs on one dedicated worker thread.
  This also means renders are serialised, one page context at a time.
* Owned: the process that uses the renderer calls :meth:`shutdown` once on
  exit (the CLI in a ``finally``, the API in its lifespan).  Shutdown is
  idempotent.

Playwright is imported lazily so the rest of the package (and the test
suite) never needs a browser installed.
"""

from __future__ import annotations

import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Optional, Protocol

from contact_engine.config import settings

_LAUNCH_ARGS = [
    "--disable-gpu",
    "--disable-dev-shm-usage",
    "--no-sandbox",
    "--disable-setuid-sandbox",
]
_BLOCKED_RESOURCES = ("image", "media", "font")
_SETTLE_MS = 1000
# Headroom on top of the navigation timeout for launch + settle time.
_GRACE_S = 5.0


class RenderBackend(Protocol):
    """Anything that can turn a URL into fully rendered markup."""

    def render(self, url: str, timeout: Optional[float] = None) -> Optional[str]:
        """Return rendered HTML, or ``None`` on any failure within *timeout*."""


def _block_heavy_resources(route: Any) -> None:
    if route.request.resource_type in _BLOCKED_RESOURCES:
        route.abort()
    else:
        route.continue_()


class PlaywrightRenderer:
    """A :class:`RenderBackend` backed by one shared headless Chromium."""

    def __init__(self, headless: bool = True) -> None:
        self.headless = headless
        self._lock = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None
        # Touched only from the worker thread.
        self._playwright: Any = None
        self._browser: Any = None

    # ------------------------------------------------------------------
    # Worker-thread helpers
    # ------------------------------------------------------------------

    def _worker(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="renderer"
                )
            return self._executor

    def _launch(self) -> Any:
        if self._browser is None:
            from playwright.sync_api import sync_playwright  # noqa: PLC0415

            print("[RENDER] Launching headless Chromium", file=sys.stderr)
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(
                headless=self.headless, args=_LAUNCH_ARGS
            )
        return self._browser

    def acquire(self) -> tuple[Any, Any]:
        """Open a fresh browser context and page.  Worker thread only."""
        browser = self._launch()
        context = browser.new_context(
            extra_http_headers={"Accept-Language": "en-GB,en;q=0.9"}
        )
        return context, context.new_page()

    def release(self, context: Any) -> None:
        """Close a context opened by :meth:`acquire`.  Worker thread only."""
        try:
            context.close()
        except Exception as exc:
            print(f"[RENDER] Could not close page context: {exc}", file=sys.stderr)

    def _render_on_worker(self, url: str, timeout: float) -> str:
        context, page = self.acquire()
        try:
            page.route("**/*", _block_heavy_resources)
            page.goto(url, wait_until="networkidle", timeout=int(timeout * 1000))
            # Small extra wait for late client-side rendering.
            page.wait_for_timeout(_SETTLE_MS)
            return page.content()
        finally:
            self.release(context)

    def _close_on_worker(self) -> None:
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        if browser is not None:
            browser.close()
        if playwright is not None:
            playwright.stop()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, url: str, timeout: Optional[float] = None) -> Optional[str]:
        """Render *url* and return its markup, or ``None`` on failure.

        A render that outlives ``timeout`` (plus launch headroom) is
        cancelled: a render still queued behind another never starts, and
        one already running is aborted by Playwright's navigation timeout.
        """
        timeout = timeout or settings.render_timeout
        print(f"[RENDER] Rendering {url}", file=sys.stderr)
        future = self._worker().submit(self._render_on_worker, url, timeout)
        try:
            html = future.result(timeout=timeout + _GRACE_S)
        except FutureTimeoutError:
            future.cancel()
            print(f"[RENDER] Timed out after {timeout:.0f}s: {url}", file=sys.stderr)
            return None
        except Exception as exc:
            print(f"[RENDER] Playwright rendering failed for {url}: {exc}", file=sys.stderr)
            return None

        print(f"[RENDER] Rendered {url} ({len(html)} chars)", file=sys.stderr)
        return html

    @property
    def running(self) -> bool:
        return self._executor is not None

    def shutdown(self) -> None:
        """Close the browser and stop the worker thread.

        Safe to call before any render and safe to call repeatedly.
        """
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is None:
            return

        try:
            executor.submit(self._close_on_worker).result(timeout=_GRACE_S * 2)
            print("[RENDER] Browser closed", file=sys.stderr)
        except Exception as exc:
            print(f"[RENDER] Browser shutdown failed: {exc}", file=sys.stderr)
        finally:
            executor.shutdown(wait=False)


# Process-wide shared instance:
#   from contact_engine.scraper.renderer import renderer
renderer = PlaywrightRenderer()
