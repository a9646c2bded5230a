"""Fit uploaded PDS images under a byte budget.

Photos, signatures and thumbmarks are stored on disk and embedded in
listings as data URLs, so every upload is shrunk step by step until the
encoded file fits its budget.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from PIL import Image, ImageOps

from ..core.enums import ImageFormat

logger = logging.getLogger(__name__)

MAX_BYTES = 100 * 1024
MAX_PHOTO_BYTES = 150 * 1024
MAX_SIGNATURE_BYTES = 150 * 1024

MAX_ATTEMPTS = 25
QUALITY_STEP_SCALE = 0.95


@dataclass(frozen=True)
class FitOptions:
    max_width: int = 600
    max_height: int = 600
    min_width: int = 32
    min_height: int = 32
    step_scale: float = 0.8
    normalize_colors: bool = False
    maintain_quality: bool = False
    output: ImageFormat = ImageFormat.BMP
    max_bytes: int = MAX_BYTES

    @property
    def scale(self) -> float:
        return QUALITY_STEP_SCALE if self.maintain_quality else self.step_scale


@dataclass(frozen=True)
class FittedImage:
    data: bytes
    width: int
    height: int
    format: ImageFormat
    placeholder: bool = False

    @property
    def size(self) -> int:
        return len(self.data)


def normalize_signature_colors(image: Image.Image) -> Image.Image:
    """Turn a scanned signature into pure black ink on white, keeping alpha."""

    rgba = np.asarray(image.convert("RGBA"), dtype=np.float64)
    rgb = rgba[..., :3]
    alpha = rgba[..., 3]

    opaque = alpha > 128
    if opaque.any():
        average = float(rgb[opaque].mean(axis=1).mean())
    else:
        average = 128.0
    threshold = max(100.0, min(180.0, average))

    luminance = rgb[..., 0] * 0.299 + rgb[..., 1] * 0.587 + rgb[..., 2] * 0.114
    ink = np.where(luminance < threshold, 0, 255).astype(np.uint8)

    out = np.empty(rgba.shape, dtype=np.uint8)
    out[..., 0] = ink
    out[..., 1] = ink
    out[..., 2] = ink
    out[..., 3] = alpha.astype(np.uint8)
    logger.debug("signature threshold=%.1f (average brightness %.1f)", threshold, average)
    return Image.fromarray(out, mode="RGBA")


def _resized(source: Image.Image, width: int, height: int, options: FitOptions) -> Image.Image:
    box_w = min(width, source.width)
    box_h = min(height, source.height)
    resample = Image.Resampling.LANCZOS if options.maintain_quality else Image.Resampling.BICUBIC
    img = source.copy()
    img.thumbnail((max(box_w, 1), max(box_h, 1)), resample=resample)
    if options.normalize_colors:
        img = normalize_signature_colors(img)
    return img


def _encode(img: Image.Image, options: FitOptions) -> bytes:
    buf = io.BytesIO()
    if options.output is ImageFormat.JPEG:
        quality = 90 if options.maintain_quality else 80
        img.convert("RGB").save(buf, format="JPEG", quality=quality, progressive=True, optimize=True)
    elif options.output is ImageFormat.PNG:
        img.save(buf, format="PNG", compress_level=6)
    else:
        # BMP has no usable alpha in most viewers; flatten onto white.
        if img.mode in ("RGBA", "LA", "P"):
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(img.convert("RGBA"), mask=img.convert("RGBA").split()[3])
            img = background
        img.convert("RGB").save(buf, format="BMP")
    return buf.getvalue()


def placeholder_image() -> FittedImage:
    buf = io.BytesIO()
    Image.new("RGB", (1, 1), (255, 255, 255)).save(buf, format="BMP")
    return FittedImage(data=buf.getvalue(), width=1, height=1, format=ImageFormat.BMP, placeholder=True)


def fit_image_under_bytes(data: bytes, options: Optional[FitOptions] = None) -> FittedImage:
    """Shrink ``data`` until its encoding fits ``options.max_bytes``.

    Returns the smallest attempt when the minimum box is reached and the
    encoding is still over budget. Never raises: undecodable input yields a
    1x1 white BMP.
    """

    options = options or FitOptions()
    try:
        source = Image.open(io.BytesIO(data))
        source = ImageOps.exif_transpose(source)
        source.load()

        width = min(source.width or options.max_width, options.max_width)
        height = min(source.height or options.max_height, options.max_height)

        for attempt in range(1, MAX_ATTEMPTS + 1):
            img = _resized(source, width, height, options)
            encoded = _encode(img, options)
            logger.debug("attempt %d: %dx%d = %d bytes", attempt, img.width, img.height, len(encoded))

            if len(encoded) <= options.max_bytes:
                return FittedImage(data=encoded, width=img.width, height=img.height, format=options.output)

            width = max(round(width * options.scale), options.min_width)
            height = max(round(height * options.scale), options.min_height)
            if width <= options.min_width and height <= options.min_height:
                logger.warning(
                    "image still %d bytes at minimum size %dx%d (limit %d)",
                    len(encoded), img.width, img.height, options.max_bytes,
                )
                return FittedImage(data=encoded, width=img.width, height=img.height, format=options.output)

        img = _resized(source, options.min_width, options.min_height, options)
        encoded = _encode(img, options)
        return FittedImage(data=encoded, width=img.width, height=img.height, format=options.output)
    except Exception:
        logger.exception("image processing failed; using placeholder")
        return placeholder_image()
