"""Shipping Label Processor.

Reads order and tracking numbers from scanned shipping label PDFs
with Tesseract OCR and marks the matching orders as shipped.
"""

__version__ = "1.0.0"
