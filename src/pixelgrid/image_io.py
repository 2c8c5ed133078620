"""
Bitmap sources: decode image files or encoded bytes into RGBA bitmaps.

Fetching images from the network is left to the caller; anything that can
hand over encoded bytes can be wrapped in a BytesBitmapSource.
"""

import io
import os
import logging
from typing import Protocol, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from .bitmap import Bitmap
from .errors import BitmapDecodeError

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class BitmapSource(Protocol):
    """Anything that can produce a decoded bitmap."""

    def load(self) -> Bitmap:
        ...


def _decode(image: Image.Image) -> Bitmap:
    # Auto-orient based on EXIF before flattening to RGBA
    image = ImageOps.exif_transpose(image)
    return Bitmap.from_pil(image)


class FileBitmapSource:
    """Decodes a bitmap from an image file on disk."""

    def __init__(self, path: PathLike):
        self.path = os.fspath(path)

    def load(self) -> Bitmap:
        if not os.path.exists(self.path):
            raise BitmapDecodeError(f"Image not found: {self.path}")

        try:
            with Image.open(self.path) as pil_image:
                pil_image.load()
                bitmap = _decode(pil_image)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise BitmapDecodeError(f"Failed to decode image {self.path}: {e}") from e

        logger.info("Loaded %s: %dx%d", self.path, bitmap.width, bitmap.height)
        return bitmap


class BytesBitmapSource:
    """Decodes a bitmap from encoded image bytes, e.g. a fetched download."""

    def __init__(self, data: bytes, name: str = "<bytes>"):
        self.data = data
        self.name = name

    def load(self) -> Bitmap:
        try:
            with Image.open(io.BytesIO(self.data)) as pil_image:
                pil_image.load()
                bitmap = _decode(pil_image)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise BitmapDecodeError(f"Failed to decode image {self.name}: {e}") from e

        logger.info("Decoded %s: %dx%d", self.name, bitmap.width, bitmap.height)
        return bitmap


class ImageLoader:
    """Loads bitmaps and reports on whether an image file is usable."""

    def load_image(self, image_path: PathLike) -> Bitmap:
        """
        Load an image file as an RGBA bitmap.

        Args:
            image_path: Path to input image

        Returns:
            Decoded bitmap

        Raises:
            BitmapDecodeError: if the file is missing or cannot be decoded
        """
        return FileBitmapSource(image_path).load()

    def validate_image(self, image_path: PathLike) -> dict:
        """
        Validate input image for processing.

        Args:
            image_path: Path to image file

        Returns:
            Dictionary with validation results
        """
        image_path = os.fspath(image_path)
        result = {
            'valid': False,
            'errors': [],
            'warnings': [],
            'info': {}
        }

        if not os.path.exists(image_path):
            result['errors'].append(f"File not found: {image_path}")
            return result

        file_size = os.path.getsize(image_path)
        if file_size > 50 * 1024 * 1024:  # 50MB limit
            result['errors'].append(f"File too large: {file_size / (1024*1024):.1f}MB (max 50MB)")
            return result

        try:
            with Image.open(image_path) as img:
                result['info']['size'] = img.size
                result['info']['mode'] = img.mode
                result['info']['format'] = img.format

                w, h = img.size
                if w > 8000 or h > 8000:
                    result['warnings'].append(f"Image very large: {w}×{h} (processing may be slow)")
                if w != h:
                    result['warnings'].append(
                        f"Image is not square ({w}×{h}); it will be cropped or letterboxed"
                    )
                if img.mode not in ('RGB', 'RGBA', 'L', 'P', 'LA'):
                    result['warnings'].append(f"Unusual image mode: {img.mode}")
        except (UnidentifiedImageError, OSError) as e:
            result['errors'].append(f"Failed to load image: {e}")
            return result

        result['valid'] = True
        return result
