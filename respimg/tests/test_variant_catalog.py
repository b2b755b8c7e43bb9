"""Tests for VariantSpec and VariantCatalog."""

import pytest

from respimg.errors import ConfigurationInvalid
from respimg.variant_catalog import VariantCatalog, VariantSpec, default_catalog


class TestVariantSpec:
    """Tests for VariantSpec class."""

    def test_valid_spec_has_no_problems(self):
        """Test a well-formed spec."""
        spec = VariantSpec(name='Large', suffix_token='L', max_width=1920)

        assert spec.problems() == []
        assert spec.max_height == 0

    def test_non_positive_width(self):
        """Test zero and negative widths are rejected."""
        assert VariantSpec('Large', 'L', 0).problems()
        assert VariantSpec('Large', 'L', -10).problems()

    def test_negative_height(self):
        """Test negative heights are rejected."""
        assert VariantSpec('Large', 'L', 100, -1).problems()

    def test_bool_dimensions_rejected(self):
        """Test booleans are not accepted as pixel sizes."""
        assert VariantSpec('Large', 'L', True).problems()
        assert VariantSpec('Large', 'L', 100, True).problems()

        with pytest.raises(ConfigurationInvalid):
            VariantCatalog(variants=(VariantSpec('Large', 'L', True),))

    def test_token_with_delimiter(self):
        """Test tokens cannot contain the filename delimiter."""
        problems = VariantSpec('Large', 'L.x', 100).problems()

        assert any('must not contain' in p for p in problems)

    def test_from_dict(self):
        """Test creation from configuration data."""
        spec = VariantSpec.from_dict({'name': 'Hero', 'suffix': 'hero', 'max_width': 2400, 'max_height': 800})

        assert spec == VariantSpec('Hero', 'hero', 2400, 800)
        assert VariantSpec.from_dict(spec.to_dict()) == spec


class TestVariantCatalog:
    """Tests for VariantCatalog class."""

    def test_default_catalog(self):
        """Test the built-in catalog."""
        catalog = default_catalog()

        assert catalog.quality == 80
        assert [v.name for v in catalog] == ['Large', 'Medium', 'Small']
        assert [v.max_width for v in catalog] == [1920, 1024, 640]
        assert catalog.tokens == ('L', 'M', 'S')

    def test_lookup(self, catalog):
        """Test lookup by token and name."""
        assert catalog.by_token('M').name == 'Medium'
        assert catalog.by_token('m') is None
        assert catalog.by_name('Small').suffix_token == 'S'
        assert catalog.by_name('Huge') is None

    def test_duplicate_tokens_rejected(self):
        """Test suffix tokens must be unique."""
        with pytest.raises(ConfigurationInvalid) as exc_info:
            VariantCatalog(variants=(
                VariantSpec('Large', 'L', 1920),
                VariantSpec('Larger', 'L', 2560),
            ))

        assert 'Duplicate suffix token: L' in exc_info.value.problems

    def test_invalid_width_rejected(self):
        """Test a non-positive width fails construction."""
        with pytest.raises(ConfigurationInvalid):
            VariantCatalog(variants=(VariantSpec('Large', 'L', 0),))

    @pytest.mark.parametrize('quality', [-1, 101, 80.5, True])
    def test_quality_out_of_range(self, quality):
        """Test quality must be an integer from 0 to 100."""
        with pytest.raises(ConfigurationInvalid):
            default_catalog(quality)

    @pytest.mark.parametrize('quality', [0, 100])
    def test_quality_bounds_inclusive(self, quality):
        """Test 0 and 100 are both accepted."""
        assert default_catalog(quality).quality == quality

    def test_empty_catalog_rejected(self):
        """Test a catalog needs at least one variant."""
        with pytest.raises(ConfigurationInvalid):
            VariantCatalog(variants=())

    def test_with_quality(self, catalog):
        """Test with_quality returns a new catalog."""
        lower = catalog.with_quality(50)

        assert lower.quality == 50
        assert catalog.quality == 80
        assert lower.variants == catalog.variants
        assert lower.by_token('L').name == 'Large'

    def test_is_immutable(self, catalog):
        """Test the catalog cannot be modified."""
        with pytest.raises(AttributeError):
            catalog.quality = 10

    def test_from_dict_without_variants(self):
        """Test missing variants fall back to the default catalog."""
        catalog = VariantCatalog.from_dict({'quality': 70})

        assert catalog.quality == 70
        assert catalog.tokens == ('L', 'M', 'S')

    def test_from_dict_with_variants(self):
        """Test custom variants keep their configured order."""
        catalog = VariantCatalog.from_dict({
            'quality': 60,
            'variants': [
                {'name': 'Thumb', 'suffix': 't', 'max_width': 200, 'max_height': 200},
                {'name': 'Full', 'suffix': 'f', 'max_width': 2000},
            ],
        })

        assert catalog.tokens == ('t', 'f')
        assert catalog.by_token('t').max_height == 200
        assert VariantCatalog.from_dict(catalog.to_dict()) == catalog

    def test_from_dict_variants_not_list(self):
        """Test variants must be a list."""
        with pytest.raises(ConfigurationInvalid):
            VariantCatalog.from_dict({'variants': {'name': 'Large'}})

    def test_from_dict_variant_entry_not_object(self):
        """Test variant entries must be objects."""
        with pytest.raises(ConfigurationInvalid) as exc_info:
            VariantCatalog.from_dict({'variants': ['L']})

        assert "'variants'" in exc_info.value.problems[0]
