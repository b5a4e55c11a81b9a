"""Image preprocessing applied before OCR.

Each named strategy turns encoded screenshot bytes into encoded bytes that
are easier for Tesseract to read. All image decoding and encoding goes
through this module — no other module should import ``cv2`` directly.

Strategies, from lightest to heaviest:

* ``light`` — grayscale, resize, contrast normalize.
* ``sharpen`` — ``light`` plus a sharpening kernel.
* ``binarize`` — ``sharpen`` plus a fixed threshold.
"""

import logging
from collections.abc import Callable

import cv2
import numpy as np

from config import (
    BINARIZE_THRESHOLD,
    PREPROCESS_BINARIZE,
    PREPROCESS_LIGHT,
    PREPROCESS_OUTPUT_EXT,
    PREPROCESS_SHARPEN,
    SHARPEN_KERNEL,
    TARGET_WIDTH,
)
from exceptions import ImageDecodeError

logger = logging.getLogger(__name__)


def decode_image(data: bytes, strategy: str = "decode") -> np.ndarray:
    """Decode encoded image bytes into a BGR (or grayscale) numpy array.

    Raises:
        ImageDecodeError: If *data* is empty or not a readable image.
    """
    if not data:
        raise ImageDecodeError(strategy, "no image data")
    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if image is None:
        raise ImageDecodeError(strategy, "data is not a supported image format")
    return image


def encode_image(image: np.ndarray, strategy: str = "encode") -> bytes:
    """Encode a numpy image as PNG bytes.

    Raises:
        ImageDecodeError: If OpenCV cannot encode the array.
    """
    ok, encoded = cv2.imencode(PREPROCESS_OUTPUT_EXT, image)
    if not ok:
        raise ImageDecodeError(strategy, f"could not encode as {PREPROCESS_OUTPUT_EXT}")
    return encoded.tobytes()


def _to_gray(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return image
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


def _resize_to_target(gray: np.ndarray) -> np.ndarray:
    # Upscale small screenshots; never enlarge past TARGET_WIDTH.
    height, width = gray.shape[:2]
    if width >= TARGET_WIDTH:
        return gray
    scale = TARGET_WIDTH / width
    return cv2.resize(
        gray,
        (TARGET_WIDTH, max(1, round(height * scale))),
        interpolation=cv2.INTER_CUBIC,
    )


def _light(image: np.ndarray) -> np.ndarray:
    gray = _resize_to_target(_to_gray(image))
    return cv2.normalize(gray, None, 0, 255, cv2.NORM_MINMAX)


def _sharpen(image: np.ndarray) -> np.ndarray:
    return cv2.filter2D(_light(image), -1, SHARPEN_KERNEL)


def _binarize(image: np.ndarray) -> np.ndarray:
    _, binary = cv2.threshold(
        _sharpen(image), BINARIZE_THRESHOLD, 255, cv2.THRESH_BINARY
    )
    return binary


STRATEGY_TRANSFORMS: dict[str, Callable[[np.ndarray], np.ndarray]] = {
    PREPROCESS_LIGHT: _light,
    PREPROCESS_SHARPEN: _sharpen,
    PREPROCESS_BINARIZE: _binarize,
}


def preprocess_array(image: np.ndarray, strategy: str) -> np.ndarray:
    """Apply a named preprocessing strategy to a decoded image.

    Args:
        image: A BGR or grayscale numpy array.
        strategy: One of ``config.PREPROCESS_STRATEGIES``.

    Returns:
        A single-channel ``uint8`` array.

    Raises:
        ValueError: If *strategy* is not a known strategy name.
    """
    try:
        transform = STRATEGY_TRANSFORMS[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown preprocessing strategy '{strategy}'. "
            f"Choose from: {', '.join(STRATEGY_TRANSFORMS)}"
        ) from None
    return transform(image)


def preprocess(data: bytes, strategy: str) -> bytes:
    """Decode, transform and re-encode a screenshot for OCR.

    Deterministic for a given input and strategy.

    Args:
        data: Encoded image bytes (PNG, JPEG, ...).
        strategy: One of ``config.PREPROCESS_STRATEGIES``.

    Returns:
        PNG-encoded bytes of the processed single-channel image.

    Raises:
        ImageDecodeError: If *data* cannot be decoded.
        ValueError: If *strategy* is not a known strategy name.
    """
    image = decode_image(data, strategy)
    processed = preprocess_array(image, strategy)
    logger.debug(
        "Preprocessed image with '%s': %s -> %s",
        strategy, image.shape, processed.shape,
    )
    return encode_image(processed, strategy)
