"""Image file output through Pillow."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import PIL.Image


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def write_image(pixels: np.ndarray, output_path: Path, image_format: str = "png") -> None:
    """Write an ``(height, width, 3)`` ``uint8`` array to ``output_path``."""

    image = PIL.Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=_pil_format_name(image_format))
