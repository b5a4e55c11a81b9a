"""Custom exception classes for the race-screenshot OCR extractor.

Only the image and OCR collaborators raise these. The parsers and matchers
never do — a shortfall there is an empty or partial result, not an error.
"""


class ImageDecodeError(Exception):
    """Raised when image bytes cannot be decoded or re-encoded.

    This indicates the upload is not an image OpenCV can read, so no
    preprocessing strategy can run on it.

    Args:
        strategy: The preprocessing strategy being applied.
        reason: Human-readable explanation of the failure.
    """

    def __init__(self, strategy: str, reason: str) -> None:
        self.strategy = strategy
        self.reason = reason
        super().__init__(
            f"Could not preprocess image with strategy '{strategy}': {reason}"
        )


class OCREngineError(Exception):
    """Raised when the Tesseract engine is missing or fails on an image.

    Args:
        reason: Human-readable explanation of the failure.
        whitelist: The character whitelist in effect, if any.
    """

    def __init__(self, reason: str, whitelist: str | None = None) -> None:
        self.reason = reason
        self.whitelist = whitelist
        super().__init__(
            f"OCR failed (whitelist={whitelist!r}): {reason}"
        )
