from __future__ import annotations

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright


class PdfRenderError(RuntimeError):
    """Headless browser could not turn the HTML into a PDF."""


def html_to_pdf(html: str, page_format: str = "A4", timeout_ms: int = 30000) -> bytes:
    """Render ``html`` to PDF bytes with headless Chromium.

    Backgrounds are printed. The browser is closed on every path, including
    failures, so no Chromium process outlives the request.
    """
    try:
        with sync_playwright() as p:
            browser = p.chromium.launch(headless=True, args=["--no-sandbox"])
            try:
                page = browser.new_page()
                page.set_content(html, wait_until="networkidle", timeout=timeout_ms)
                return page.pdf(format=page_format, print_background=True)
            finally:
                browser.close()
    except PlaywrightError as exc:
        raise PdfRenderError(str(exc)) from exc
