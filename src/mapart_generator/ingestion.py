"""
Image Ingestion Module

This module handles:
- Loading map art images as RGBA arrays (no resampling, no color changes)
- Enforcing the fixed 128x128 map size
- Binary opacity: only alpha == 0 counts as transparent
"""

from pathlib import Path
from typing import Optional, Union
import numpy as np
from PIL import Image

from .classifier import ValidationError
from .structure import MAP_SIZE


def check_map_size(width: int, height: int):
    """Raise ValidationError unless the image is exactly one map."""
    if width != MAP_SIZE or height != MAP_SIZE:
        raise ValidationError(
            f"Image must be {MAP_SIZE}x{MAP_SIZE} pixels (got {width}x{height})"
        )


class ImageLoader:
    """
    Map art image loader.

    Pixels are kept exactly as stored in the file: the palette matching
    downstream needs exact RGB values, so no color management, scaling
    or premultiplication is applied.
    """

    def __init__(self):
        self._color_image: Optional[np.ndarray] = None
        self._source: Optional[Path] = None

    def load(self, image_path: Union[str, Path]) -> "ImageLoader":
        """
        Load a map art image.

        Args:
            image_path: Path to the image (PNG recommended)

        Returns:
            self for method chaining
        """
        image_path = Path(image_path)
        if not image_path.exists():
            raise FileNotFoundError(f"Image not found: {image_path}")

        with Image.open(image_path) as img:
            check_map_size(*img.size)

            # Ensure RGBA format
            if img.mode != "RGBA":
                img = img.convert("RGBA")

            self._color_image = np.array(img, dtype=np.uint8)

        self._source = image_path
        return self

    def load_from_array(self, rgba_array: np.ndarray) -> "ImageLoader":
        """
        Load from a numpy array instead of a file.

        Args:
            rgba_array: RGBA image array of shape (128, 128, 4)

        Returns:
            self for method chaining
        """
        if rgba_array.ndim != 3 or rgba_array.shape[2] != 4:
            raise ValueError("Color array must have shape (H, W, 4)")

        check_map_size(rgba_array.shape[1], rgba_array.shape[0])

        self._color_image = rgba_array.astype(np.uint8, copy=True)
        self._source = None
        return self

    @property
    def color_image(self) -> np.ndarray:
        """Get the RGBA color image array."""
        if self._color_image is None:
            raise RuntimeError("No image loaded")
        return self._color_image

    @property
    def source(self) -> Optional[Path]:
        """Path the image was loaded from, if any."""
        return self._source

    @property
    def base_name(self) -> str:
        """File name without extension, used to name outputs."""
        if self.source is None:
            return "mapart"
        return self.source.stem
