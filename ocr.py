"""Tesseract text extraction via ``pytesseract``.

The only module that talks to the OCR engine. Callers hand in encoded image
bytes (usually from ``imaging.preprocess``) and get raw text back; all
interpretation of that text lives in the parser modules.
"""

import logging

import pytesseract

from config import OCR_LANGUAGE, OCR_PAGE_SEGMENTATION_MODE
from exceptions import OCREngineError
from imaging import decode_image

logger = logging.getLogger(__name__)


def build_config(whitelist: str | None = None) -> str:
    """Build the Tesseract command-line config string.

    >>> build_config("0123456789")
    '--oem 3 --psm 6 -c tessedit_char_whitelist=0123456789'
    """
    config = f"--oem 3 --psm {OCR_PAGE_SEGMENTATION_MODE}"
    if whitelist:
        config += f" -c tessedit_char_whitelist={whitelist}"
    return config


def recognize(data: bytes, whitelist: str | None = None) -> str:
    """Run Tesseract on an encoded image and return the recognized text.

    Args:
        data: Encoded image bytes.
        whitelist: Characters Tesseract may output, e.g. digits only for
            stat blocks. ``None`` allows everything.

    Returns:
        The raw recognized text, possibly empty.

    Raises:
        ImageDecodeError: If *data* is not a readable image.
        OCREngineError: If Tesseract is not installed or fails.
    """
    image = decode_image(data, "ocr")
    try:
        text = pytesseract.image_to_string(
            image, lang=OCR_LANGUAGE, config=build_config(whitelist)
        )
    except pytesseract.TesseractNotFoundError as exc:
        raise OCREngineError("tesseract executable not found", whitelist) from exc
    except pytesseract.TesseractError as exc:
        raise OCREngineError(str(exc), whitelist) from exc

    logger.debug("OCR text (%d chars): %r", len(text), text[:100])
    return text
