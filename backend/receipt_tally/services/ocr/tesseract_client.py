"""
Tesseract OCR client for receipt images.

Loads an image with Pillow, converts it to grayscale, stretches contrast
around mid-gray and runs pytesseract with a language hint (e.g. "deu+eng").
Returns plain text, one receipt line per text line.
"""
from pathlib import Path
from typing import Optional, Union
import logging

import pytesseract
from PIL import Image, ImageOps, UnidentifiedImageError

from ...config import settings

logger = logging.getLogger(__name__)


class OcrFailure(RuntimeError):
    """Raised when an image cannot be loaded or recognized."""

    def __init__(self, image_path: Union[str, Path], reason: str):
        super().__init__(f"OCR failed for {image_path}: {reason}")
        self.image_path = str(image_path)
        self.reason = reason


def _configure_tesseract() -> None:
    """Point pytesseract at TESSERACT_CMD if configured."""
    if settings.tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = settings.tesseract_cmd


def enhance_contrast(image: Image.Image, factor: Optional[float] = None) -> Image.Image:
    """
    Stretch contrast of a grayscale image around mid-gray.

    Each pixel becomes clamp((v - 128) * factor + 128, 0, 255).
    """
    factor = settings.contrast_factor if factor is None else factor
    lut = [max(0, min(255, int((v - 128.0) * factor + 128.0))) for v in range(256)]
    return image.point(lut)


def preprocess_image(image: Image.Image, contrast_factor: Optional[float] = None) -> Image.Image:
    """Convert to 8-bit grayscale and enhance contrast for better OCR."""
    gray = ImageOps.grayscale(image)
    return enhance_contrast(gray, contrast_factor)


def recognize(image_path: Union[str, Path], language: Optional[str] = None) -> str:
    """
    Run OCR on one receipt image.

    Args:
        image_path: Path to the image file
        language: Tesseract language hint; defaults to settings.ocr_language

    Returns:
        Best-effort plain-text transcription

    Raises:
        OcrFailure: If the image cannot be opened or Tesseract fails
    """
    language = language or settings.ocr_language
    _configure_tesseract()

    try:
        with Image.open(image_path) as img:
            processed = preprocess_image(img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise OcrFailure(image_path, f"cannot load image: {e}") from e
    except ValueError as e:
        raise OcrFailure(image_path, f"cannot preprocess image: {e}") from e

    try:
        text = pytesseract.image_to_string(processed, lang=language)
    except pytesseract.TesseractNotFoundError as e:
        raise OcrFailure(image_path, "tesseract is not installed or not in PATH") from e
    except (pytesseract.TesseractError, RuntimeError) as e:
        raise OcrFailure(image_path, str(e)) from e

    if settings.log_ocr_text:
        logger.debug(f"OCR text for {image_path}:\n{text}\n---")
    return text
