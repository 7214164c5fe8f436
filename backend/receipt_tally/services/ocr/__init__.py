"""
OCR clients.
"""
from .tesseract_client import OcrFailure, recognize, preprocess_image, enhance_contrast

__all__ = ["OcrFailure", "recognize", "preprocess_image", "enhance_contrast"]
