"""Tests for Reporter class."""

import io
import json

from respimg.pipeline_stats import PipelineStats
from respimg.reporter import Reporter


class TestReporter:
    """Tests for Reporter class."""

    def test_init_default_output(self):
        """Test default output is stdout."""
        import sys
        reporter = Reporter()
        assert reporter.output == sys.stdout

    def test_format_bytes(self):
        """Test byte formatting."""
        reporter = Reporter()

        assert reporter._format_bytes(500) == '500.0 B'
        assert reporter._format_bytes(1024) == '1.0 KB'
        assert reporter._format_bytes(1024 * 1024) == '1.0 MB'

    def test_format_duration(self):
        """Test duration formatting."""
        reporter = Reporter()

        assert reporter._format_duration(30) == '30.0 seconds'
        assert reporter._format_duration(90) == '1.5 minutes'
        assert reporter._format_duration(3600) == '1.0 hours'

    def test_report_catalog(self, catalog):
        """Test catalog report lists every variant."""
        output = io.StringIO()

        Reporter(output=output).report_catalog(catalog)

        result = output.getvalue()
        assert 'VARIANT CATALOG' in result
        assert 'Quality: 80' in result
        assert 'Medium' in result
        assert '1024' in result
        assert 'auto' in result

    def test_report_run(self):
        """Test run summary includes errors."""
        output = io.StringIO()
        stats = PipelineStats(total_to_process=3, processed=1, skipped=1, errors=1)
        stats.error_details.append('Cannot decode broken.L.jpg')

        Reporter(output=output).report_run(stats)

        result = output.getvalue()
        assert 'RUN SUMMARY' in result
        assert 'Errors:            1' in result
        assert 'Cannot decode broken.L.jpg' in result

    def test_report_discovery(self, catalog):
        """Test discovery report lists files in catalog order."""
        output = io.StringIO()

        Reporter(output=output).report_discovery(
            {'photo': {'Medium', 'Large'}}, catalog, '/out'
        )

        result = output.getvalue()
        assert 'DISCOVERED VARIANTS' in result
        assert result.index('photo.L.webp') < result.index('photo.M.webp')

    def test_report_discovery_empty(self, catalog):
        """Test discovery report with nothing found."""
        output = io.StringIO()

        Reporter(output=output).report_discovery({}, catalog)

        assert 'No variants found.' in output.getvalue()

    def test_report_discovery_json(self, catalog):
        """Test JSON discovery maps variant names to file names."""
        output = io.StringIO()

        Reporter(output=output).report_discovery_json(
            {'photo': {'Small', 'Large'}, 'logo': {'Small'}}, catalog
        )

        data = json.loads(output.getvalue())
        assert data == {
            'logo': {'Small': 'logo.S.webp'},
            'photo': {'Large': 'photo.L.webp', 'Small': 'photo.S.webp'},
        }
        assert list(data['photo']) == ['Large', 'Small']
