"""
VariantEncoder - Decodes source images, resizes them and encodes WebP variants.
"""

import io
import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from .errors import DecodeFailure, EncodeFailure, SourceNotFound
from .variant_catalog import DEFAULT_QUALITY, VariantSpec


@dataclass(frozen=True)
class DecodedImage:
    """
    A fully decoded source image.

    Attributes:
        image: Loaded Pillow image in RGB or RGBA, orientation already applied
        source_format: Format detected from the file content (e.g., 'JPEG')
        source_path: Path the image was read from
    """
    image: Image.Image
    source_format: str
    source_path: str

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    @property
    def width(self) -> int:
        return self.image.size[0]

    @property
    def height(self) -> int:
        return self.image.size[1]


def target_size(source_size: Tuple[int, int], spec: VariantSpec) -> Tuple[int, int]:
    """
    Compute output dimensions for a variant.

    Width is bounded by the spec and the source. With a max height, height is
    bounded independently; otherwise it follows the source aspect ratio.
    Never larger than the source in either axis.
    """
    src_w, src_h = source_size
    width = min(spec.max_width, src_w)

    if spec.max_height:
        height = min(spec.max_height, src_h)
    else:
        # round(width * src_h / src_w), half up, in integer arithmetic
        height = (2 * width * src_h + src_w) // (2 * src_w)
        height = max(1, min(height, src_h))

    return width, height


class VariantEncoder:
    """
    Turns source files into encoded variants using Pillow.

    Decoding happens once per source; render() reads the decoded
    image without modifying it, so one DecodedImage serves every variant.
    """

    # Formats Pillow may detect that we accept as sources
    SOURCE_FORMATS = {'JPEG', 'MPO', 'PNG', 'GIF', 'TIFF', 'BMP'}

    SOURCE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif', '.tif', '.tiff', '.bmp'}

    OUTPUT_FORMAT = 'WEBP'

    def __init__(
        self,
        quality: int = DEFAULT_QUALITY,
        method: int = 4,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize variant encoder.

        Args:
            quality: WebP quality 0-100 (default: 80)
            method: WebP encoder effort 0-6 (default: 4)
            logger: Optional logger instance
        """
        self.quality = quality
        self.method = method
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def is_source_extension(cls, extension: str) -> bool:
        """True if files with this extension are treated as sources."""
        if extension and not extension.startswith('.'):
            extension = f".{extension}"
        return extension.lower() in cls.SOURCE_EXTENSIONS

    def decode(self, path: str) -> DecodedImage:
        """
        Decode a source image.

        Pillow identifies the format from the file content, so a PNG
        named .jpg still decodes correctly.

        Raises:
            SourceNotFound: The file does not exist
            DecodeFailure: The content is corrupt or not a supported format
        """
        if not os.path.isfile(path):
            raise SourceNotFound(f"Source not found: {path}", path=path)

        try:
            with Image.open(path) as img:
                source_format = img.format
                if source_format not in self.SOURCE_FORMATS:
                    raise DecodeFailure(
                        f"Unsupported source format {source_format} for {path}",
                        path=path,
                    )
                img.load()
                image = ImageOps.exif_transpose(img)
                # Palette and 1-bit images would resize with NEAREST
                image = self._convert_color_mode(image)
                # Both steps above return the source object when they are no-ops
                if image is img:
                    image = img.copy()
        except DecodeFailure:
            raise
        except FileNotFoundError as e:
            raise SourceNotFound(f"Source not found: {path}", path=path) from e
        except (UnidentifiedImageError, Image.DecompressionBombError,
                OSError, ValueError, SyntaxError) as e:
            raise DecodeFailure(f"Cannot decode {path}: {e}", path=path) from e

        self.logger.debug(
            f"Decoded {path}: {source_format} {image.size[0]}x{image.size[1]} {image.mode}"
        )
        return DecodedImage(image=image, source_format=source_format, source_path=path)

    def resample(self, decoded: DecodedImage, spec: VariantSpec) -> Image.Image:
        """
        Resize the decoded image for a variant.

        Returns the decoded buffer itself when no resize is needed.
        """
        size = target_size(decoded.size, spec)
        if size == decoded.size:
            return decoded.image
        return decoded.image.resize(size, Image.Resampling.LANCZOS)

    def encode(self, img: Image.Image, path: Optional[str] = None) -> bytes:
        """
        Encode an image as lossy WebP at the configured quality.

        Raises:
            EncodeFailure: Pillow could not encode the image
        """
        try:
            img = self._convert_color_mode(img)
            output = io.BytesIO()
            img.save(
                output,
                format=self.OUTPUT_FORMAT,
                quality=self.quality,
                method=self.method,
                lossless=False,
            )
            return output.getvalue()
        except (OSError, ValueError, KeyError) as e:
            raise EncodeFailure(f"Cannot encode variant of {path}: {e}", path=path) from e

    def render(self, decoded: DecodedImage, spec: VariantSpec) -> bytes:
        """Resample and encode one variant of a decoded image."""
        img = self.resample(decoded, spec)
        data = self.encode(img, decoded.source_path)
        self.logger.debug(
            f"Rendered {spec.name} of {decoded.source_path}: "
            f"{img.size[0]}x{img.size[1]} ({len(data)} bytes)"
        )
        return data

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Convert image to RGB, or RGBA when it carries transparency."""
        if img.mode in ('RGB', 'RGBA'):
            return img
        elif img.mode in ('LA', 'PA'):
            return img.convert('RGBA')
        elif img.mode == 'P' and 'transparency' in img.info:
            return img.convert('RGBA')
        return img.convert('RGB')
