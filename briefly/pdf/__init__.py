"""
Briefly PDF module - HTML to PDF through headless Chromium.
"""

from briefly.pdf.exporter import PdfExporter, PdfOptions

__all__ = ["PdfExporter", "PdfOptions"]
