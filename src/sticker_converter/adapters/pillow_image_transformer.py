"""Pillow-backed image decoding, resizing and PNG encoding."""

import asyncio
import io
from dataclasses import dataclass

from PIL import Image

from sticker_converter.domain.errors import ConversionError, ErrorKind
from sticker_converter.domain.stickers import (
    FitMode,
    ImageDimensions,
    Placement,
    ResizeSpec,
)
from sticker_converter.services.conversion import ImageTransformer

_IMAGE_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


@dataclass
class PillowImageTransformer(ImageTransformer):
    """Image transformer using Pillow in a worker thread."""

    resample: int = Image.LANCZOS

    async def read_dimensions(self, source: bytes) -> ImageDimensions:
        """Return the pixel size of the encoded image."""
        return await asyncio.to_thread(_read_dimensions, source)

    async def transform(self, source: bytes, spec: ResizeSpec) -> bytes:
        """Resize the image per spec and return PNG bytes."""
        return await asyncio.to_thread(_render, source, spec, self.resample)


def _read_dimensions(source: bytes) -> ImageDimensions:
    try:
        with Image.open(io.BytesIO(source)) as img:
            width, height = img.size
    except _IMAGE_ERRORS as exc:
        raise ConversionError(ErrorKind.TRANSFORM_FAILURE, str(exc)) from exc
    return ImageDimensions(width=width, height=height)


def _render(source: bytes, spec: ResizeSpec, resample: int) -> bytes:
    try:
        with Image.open(io.BytesIO(source)) as img:
            rgba = img.convert("RGBA")
        if spec.fit_mode is FitMode.INSIDE:
            output = _inside(rgba, spec, resample)
        else:
            output = _contain(rgba, spec, resample)
        buffer = io.BytesIO()
        output.save(buffer, format="PNG")
    except _IMAGE_ERRORS as exc:
        raise ConversionError(ErrorKind.TRANSFORM_FAILURE, str(exc)) from exc
    return buffer.getvalue()


def _scaled_size(
    img: Image.Image, width: int, height: int, scale: float
) -> tuple[int, int]:
    return (
        max(1, min(width, round(img.width * scale))),
        max(1, min(height, round(img.height * scale))),
    )


def _inside(img: Image.Image, spec: ResizeSpec, resample: int) -> Image.Image:
    # Never enlarges.
    scale = min(1.0, spec.target_width / img.width, spec.target_height / img.height)
    if scale >= 1.0:
        return img
    size = _scaled_size(img, spec.target_width, spec.target_height, scale)
    return img.resize(size, resample)


def _contain(img: Image.Image, spec: ResizeSpec, resample: int) -> Image.Image:
    scale = min(spec.target_width / img.width, spec.target_height / img.height)
    new_w, new_h = _scaled_size(img, spec.target_width, spec.target_height, scale)
    resized = img.resize((new_w, new_h), resample)
    canvas = Image.new(
        "RGBA", (spec.target_width, spec.target_height), spec.background
    )
    if spec.anchor is Placement.LEFT:
        left = 0
    else:
        left = (spec.target_width - new_w) // 2
    top = (spec.target_height - new_h) // 2
    canvas.paste(resized, (left, top))
    return canvas
