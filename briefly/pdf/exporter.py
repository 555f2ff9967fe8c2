"""
PDF Exporter - prints an HTML document to PDF with headless Chromium.

The browser is a separate OS process: it is closed in a ``finally`` on every
exit path, success or failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from playwright.sync_api import sync_playwright

from briefly.config import PDF_DEFAULT_FORMAT, PDF_DEFAULT_MARGIN, PDF_RENDER_TIMEOUT_MS
from briefly.errors import PdfRenderError
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter, log_event, time_block

logger = get_logger(__name__)

CHROMIUM_ARGS = ["--disable-dev-shm-usage", "--no-sandbox"]


def _default_margin() -> dict[str, str]:
    return {side: PDF_DEFAULT_MARGIN for side in ("top", "right", "bottom", "left")}


@dataclass
class PdfOptions:
    format: str = PDF_DEFAULT_FORMAT
    landscape: bool = False
    margin: dict[str, str] = field(default_factory=_default_margin)
    display_header_footer: bool = False
    print_background: bool = True
    timeout_ms: int = PDF_RENDER_TIMEOUT_MS


class PdfExporter:
    """HTML in, PDF bytes out."""

    def export(self, html: str, options: PdfOptions | None = None) -> bytes:
        """
        Render ``html`` to PDF.

        Waits for network idle and for web fonts to finish loading before
        printing.

        Raises:
            PdfRenderError: Browser launch, load or print failure (including timeouts)

        Side Effects:
            - Launches and closes a Chromium process
        """
        options = options or PdfOptions()
        try:
            with time_block("notegen.pdf.export") as timing:
                with sync_playwright() as p:
                    browser = p.chromium.launch(headless=True, args=CHROMIUM_ARGS)
                    try:
                        page = browser.new_page()
                        page.set_content(html, wait_until="networkidle", timeout=options.timeout_ms)
                        page.evaluate("document.fonts.ready.then(() => true)")
                        pdf_bytes = page.pdf(
                            format=options.format,
                            landscape=options.landscape,
                            margin=options.margin,
                            display_header_footer=options.display_header_footer,
                            print_background=options.print_background,
                        )
                    finally:
                        browser.close()
        except Exception as e:
            counter("notegen.pdf.error")
            logger.error("PDF rendering failed: %s", e)
            raise PdfRenderError(f"PDF rendering failed: {e}") from e

        counter("notegen.pdf.success")
        log_event(
            "notegen.pdf.rendered",
            bytes=len(pdf_bytes),
            elapsed_ms=round(timing["elapsed_ms"]),
        )
        return pdf_bytes
