"""
Image intake for lottery receipt photos.
"""

import io
from typing import Tuple

from loguru import logger
from PIL import Image, ImageOps, UnidentifiedImageError

from conferidor.exceptions import InvalidImageError

MAX_IMAGE_SIDE = 2048


def _resize_for_ocr(image: Image.Image) -> Image.Image:
    """Downscale so the longest side is at most MAX_IMAGE_SIDE, keeping aspect ratio."""
    width, height = image.size
    longest = max(width, height)
    if longest <= MAX_IMAGE_SIDE:
        return image

    scale = MAX_IMAGE_SIDE / longest
    target = (max(1, int(width * scale)), max(1, int(height * scale)))
    logger.debug(f"Resized from {width}x{height} to {target[0]}x{target[1]}")
    return image.resize(target, Image.Resampling.LANCZOS)


def _pil_to_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=95, optimize=True)
    return buffer.getvalue()


def load_receipt_image(image_data: bytes) -> Tuple[bytes, str]:
    """
    Validate an uploaded receipt photo and normalise it for OCR.

    EXIF orientation is applied, very large photos are downscaled and the
    result is re-encoded as RGB JPEG.

    Args:
        image_data: Raw uploaded bytes

    Returns:
        (jpeg_bytes, "image/jpeg")

    Raises:
        InvalidImageError: If the data is empty, not a decodable image or too many pixels
    """
    if not image_data:
        raise InvalidImageError("O arquivo enviado está vazio.")

    try:
        with Image.open(io.BytesIO(image_data)) as candidate:
            candidate.verify()
        image = Image.open(io.BytesIO(image_data))
        image.load()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.warning(f"Rejected upload that is not a valid image: {e}")
        raise InvalidImageError("O arquivo enviado não é uma imagem válida.") from e
    except Image.DecompressionBombError as e:
        logger.warning(f"Rejected upload with too many pixels: {e}")
        raise InvalidImageError("A imagem enviada é grande demais para ser processada.") from e

    logger.info(f"Receipt image size: {image.size}, mode: {image.mode}, format: {image.format}")

    image = ImageOps.exif_transpose(image)
    if image.mode != "RGB":
        image = image.convert("RGB")
    image = _resize_for_ocr(image)

    return _pil_to_bytes(image), "image/jpeg"
