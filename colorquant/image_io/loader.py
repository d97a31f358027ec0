"""
Image file reading and writing.

Images are handled as numpy arrays of shape (H, W, 3) with uint8 values
in [0, 255], RGB channel order.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..errors import ImageFormatError

logger = logging.getLogger(__name__)


def load_image(path: Union[str, Path]) -> np.ndarray:
    """
    Load an image file as an RGB array.

    Palette, grayscale and RGBA images are converted to RGB; the alpha
    channel is dropped.

    Args:
        path: Path to any raster format Pillow can read

    Returns:
        numpy array with shape (H, W, 3) and dtype uint8

    Raises:
        FileNotFoundError: If the file does not exist
        ImageFormatError: If Pillow cannot decode the file

    Example:
        >>> img = load_image('photo.png')
        >>> print(img.shape, img.dtype)  # (321, 481, 3) uint8
    """
    image_path = Path(path)

    if not image_path.exists():
        raise FileNotFoundError(f"Image not found: {image_path}")

    logger.info("Reading %s...", image_path)
    try:
        with Image.open(image_path) as img:
            img_array = np.array(img.convert('RGB'))
    except (UnidentifiedImageError, OSError) as e:
        raise ImageFormatError(f"Cannot decode image {image_path}: {e}") from e

    return img_array


def save_image(image: np.ndarray, path: Union[str, Path]) -> Path:
    """
    Write an RGB array to disk.

    Float arrays are rounded and clipped to [0, 255]. The output format
    follows the file extension. Missing parent directories are created.

    Args:
        image: Array of shape (H, W, 3)
        path: Destination file

    Returns:
        Path that was written

    Raises:
        ImageFormatError: If image is not (H, W, 3), the extension is unknown,
            or the destination cannot be written
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ImageFormatError(f"Image must be (H, W, 3), got shape {image.shape}")

    out_path = Path(path)

    if image.dtype != np.uint8:
        image = np.clip(np.rint(image), 0, 255).astype(np.uint8)

    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(image).save(out_path)
    except (KeyError, ValueError, OSError) as e:
        # KeyError/ValueError: unknown extension; OSError: unwritable destination
        raise ImageFormatError(f"Cannot write image to {out_path}: {e}") from e

    logger.info("Saved result to: %s", out_path)
    return out_path
