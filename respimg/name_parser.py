"""
NameConventionParser - Classifies source files by the suffix tokens in their names.

A source named ``photo.L.M.jpg`` asks for the variants whose tokens are
``L`` and ``M``; its base name is ``photo``. Files without a recognized
token are not eligible and are left alone.
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from .variant_catalog import DELIMITER, VariantCatalog, VariantSpec

DELIVERY_EXTENSION = '.webp'


@dataclass(frozen=True)
class SourceImageRequest:
    """
    A source file and the variants it asks for.

    Attributes:
        source_path: Path to the source image
        base_name: Name portion preceding the first recognized token
        variants: Requested variants in catalog order (never empty)
    """
    source_path: str
    base_name: str
    variants: Tuple[VariantSpec, ...]

    @property
    def variant_names(self) -> Tuple[str, ...]:
        return tuple(v.name for v in self.variants)


def output_filename(base_name: str, variant: VariantSpec) -> str:
    """File name of a variant output, e.g. ``photo.L.webp``."""
    return f"{base_name}{DELIMITER}{variant.suffix_token}{DELIVERY_EXTENSION}"


class NameConventionParser:
    """
    Extracts base name and requested variants from file names.
    """

    def __init__(self, catalog: VariantCatalog):
        self.catalog = catalog

    def split(self, filename: str) -> Optional[Tuple[str, Tuple[VariantSpec, ...]]]:
        """
        Split a file name into base name and requested variants.

        Args:
            filename: File name or path; only the final component is used

        Returns:
            Tuple of (base_name, variants), or None if no token is recognized
            or the base name is empty
        """
        stem = os.path.splitext(os.path.basename(filename))[0]
        parts = stem.split(DELIMITER)

        # The first segment always belongs to the base name
        first_token_at = None
        found = set()
        for i, part in enumerate(parts[1:], start=1):
            spec = self.catalog.by_token(part)
            if spec is None:
                continue
            if first_token_at is None:
                first_token_at = i
            found.add(spec)

        if first_token_at is None:
            return None

        base_name = DELIMITER.join(parts[:first_token_at])
        # A dot-prefixed name like .L.jpg has no base name
        if not base_name:
            return None
        variants = tuple(v for v in self.catalog if v in found)
        return base_name, variants

    def parse(self, source_path: str) -> Optional[SourceImageRequest]:
        """
        Classify a source file.

        Returns:
            SourceImageRequest, or None if the file is not eligible
        """
        result = self.split(source_path)
        if result is None:
            return None
        base_name, variants = result
        return SourceImageRequest(
            source_path=source_path,
            base_name=base_name,
            variants=variants,
        )

    def is_eligible(self, filename: str) -> bool:
        """True if the file name carries at least one recognized token."""
        return self.split(filename) is not None
