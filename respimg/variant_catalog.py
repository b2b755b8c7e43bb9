"""
VariantCatalog - The set of named variants every source may opt into.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import ConfigurationInvalid

# Separates the base name from suffix tokens, and tokens from each other
DELIMITER = '.'

DEFAULT_QUALITY = 80


def _is_int(value) -> bool:
    # bool is an int subclass but never a valid size or quality
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class VariantSpec:
    """
    A single named variant.

    Attributes:
        name: Human-readable variant name (e.g., 'Large')
        suffix_token: Token used in source and output file names (e.g., 'L')
        max_width: Maximum output width in pixels
        max_height: Maximum output height in pixels (0 = derive from aspect ratio)
    """
    name: str
    suffix_token: str
    max_width: int
    max_height: int = 0

    def problems(self) -> List[str]:
        """Return a list of problems with this spec (empty if valid)."""
        problems = []
        label = self.name or self.suffix_token or '<unnamed>'

        if not self.name:
            problems.append("Variant name must not be empty")
        if not self.suffix_token:
            problems.append(f"Variant {label}: suffix token must not be empty")
        elif DELIMITER in self.suffix_token:
            problems.append(
                f"Variant {label}: suffix token {self.suffix_token!r} "
                f"must not contain {DELIMITER!r}"
            )
        if not _is_int(self.max_width) or self.max_width <= 0:
            problems.append(f"Variant {label}: max_width must be a positive integer")
        if not _is_int(self.max_height) or self.max_height < 0:
            problems.append(f"Variant {label}: max_height must be a non-negative integer")

        return problems

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'suffix': self.suffix_token,
            'max_width': self.max_width,
            'max_height': self.max_height,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'VariantSpec':
        # Accept either 'suffix' or 'suffix_token'
        token = data.get('suffix', data.get('suffix_token', ''))
        return cls(
            name=data.get('name', ''),
            suffix_token=token,
            max_width=data.get('max_width', 0),
            max_height=data.get('max_height', 0) or 0,
        )


@dataclass(frozen=True)
class VariantCatalog:
    """
    Ordered, validated set of variants plus the encode quality.

    Construction raises ConfigurationInvalid if any spec is invalid,
    names or suffix tokens repeat, or quality is outside 0-100.
    """
    variants: Tuple[VariantSpec, ...]
    quality: int = DEFAULT_QUALITY
    _by_token: Dict[str, VariantSpec] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self):
        # Normalize lists to tuples so the catalog stays hashable and immutable
        object.__setattr__(self, 'variants', tuple(self.variants))

        problems = self.problems()
        if problems:
            raise ConfigurationInvalid(problems)

        self._by_token.update({v.suffix_token: v for v in self.variants})

    def problems(self) -> List[str]:
        """Return a list of configuration problems (empty if valid)."""
        problems = []

        if not self.variants:
            problems.append("Catalog must define at least one variant")

        seen_names = set()
        seen_tokens = set()
        for spec in self.variants:
            problems.extend(spec.problems())
            if spec.name in seen_names:
                problems.append(f"Duplicate variant name: {spec.name}")
            if spec.suffix_token in seen_tokens:
                problems.append(f"Duplicate suffix token: {spec.suffix_token}")
            seen_names.add(spec.name)
            seen_tokens.add(spec.suffix_token)

        if not _is_int(self.quality) or not 0 <= self.quality <= 100:
            problems.append(f"Quality must be an integer from 0 to 100, got {self.quality!r}")

        return problems

    def __iter__(self) -> Iterator[VariantSpec]:
        return iter(self.variants)

    def __len__(self) -> int:
        return len(self.variants)

    @property
    def tokens(self) -> Tuple[str, ...]:
        """Suffix tokens in catalog order."""
        return tuple(v.suffix_token for v in self.variants)

    def by_token(self, token: str) -> Optional[VariantSpec]:
        """Look up a variant by its suffix token (exact, case-sensitive)."""
        return self._by_token.get(token)

    def by_name(self, name: str) -> Optional[VariantSpec]:
        """Look up a variant by name."""
        for spec in self.variants:
            if spec.name == name:
                return spec
        return None

    def with_quality(self, quality: int) -> 'VariantCatalog':
        """Return a copy of this catalog with a different quality."""
        return replace(self, quality=quality)

    def to_dict(self) -> dict:
        return {
            'quality': self.quality,
            'variants': [v.to_dict() for v in self.variants],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'VariantCatalog':
        """
        Build a catalog from configuration data.

        Falls back to the default variants when 'variants' is absent.
        """
        quality = data.get('quality', DEFAULT_QUALITY)
        variants_data = data.get('variants')
        if variants_data is None:
            return default_catalog(quality)
        if not isinstance(variants_data, list):
            raise ConfigurationInvalid("'variants' must be a list")
        if not all(isinstance(v, dict) for v in variants_data):
            raise ConfigurationInvalid("Each entry in 'variants' must be an object")
        return cls(
            variants=tuple(VariantSpec.from_dict(v) for v in variants_data),
            quality=quality,
        )


DEFAULT_VARIANTS = (
    VariantSpec(name='Large', suffix_token='L', max_width=1920),
    VariantSpec(name='Medium', suffix_token='M', max_width=1024),
    VariantSpec(name='Small', suffix_token='S', max_width=640),
)


def default_catalog(quality: int = DEFAULT_QUALITY) -> VariantCatalog:
    """The built-in Large/Medium/Small catalog."""
    return VariantCatalog(variants=DEFAULT_VARIANTS, quality=quality)
