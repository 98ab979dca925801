"""Linen inventory OCR.

Turns photographs of paper linen/uniform inventory sheets into structured
records: adaptive JPEG compression, OCR (OCR.space or Tesseract), and a
keyword-driven parser for the recognised text.
"""

__version__ = "1.0.0"
