"""
Reporter - Human-readable reports of the catalog, runs and produced variants.
"""

import json
import logging
import sys
from typing import Dict, Optional, Set, TextIO

from .name_parser import output_filename
from .pipeline_stats import PipelineStats
from .variant_catalog import VariantCatalog


class Reporter:
    """
    Generates human-readable reports.
    """

    def __init__(
        self,
        output: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reporter.

        Args:
            output: Output stream (default: stdout)
            logger: Optional logger instance
        """
        self.output = output or sys.stdout
        self.logger = logger or logging.getLogger(__name__)

    def _print(self, text: str = "") -> None:
        """Print to output stream."""
        print(text, file=self.output)

    def _format_bytes(self, bytes_val: int) -> str:
        """Format bytes as human-readable string."""
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} PB"

    def _format_duration(self, seconds: float) -> str:
        """Format duration as human-readable string."""
        if seconds < 60:
            return f"{seconds:.1f} seconds"
        elif seconds < 3600:
            return f"{seconds / 60:.1f} minutes"
        else:
            return f"{seconds / 3600:.1f} hours"

    def report_catalog(self, catalog: VariantCatalog) -> None:
        """Print the active variant catalog."""
        self._print("=" * 60)
        self._print("VARIANT CATALOG")
        self._print("=" * 60)
        self._print(f"  Quality: {catalog.quality}")
        self._print()
        self._print(f"  {'Name':<16} {'Token':<8} {'Max width':>10} {'Max height':>11}")
        self._print(f"  {'-' * 16} {'-' * 8} {'-' * 10} {'-' * 11}")
        for spec in catalog:
            height = str(spec.max_height) if spec.max_height else 'auto'
            self._print(
                f"  {spec.name:<16} {spec.suffix_token:<8} {spec.max_width:>10} {height:>11}"
            )
        self._print()

    def report_run(self, stats: PipelineStats) -> None:
        """Print a summary of a processing run."""
        self._print("=" * 60)
        self._print("RUN SUMMARY")
        self._print("=" * 60)
        self._print(f"  Files found:       {stats.total_to_process:,}")
        self._print(f"  Processed:         {stats.processed:,}")
        self._print(f"  Skipped:           {stats.skipped:,}")
        self._print(f"  Errors:            {stats.errors:,}")
        self._print(f"  Variants written:  {stats.variants_written:,}")
        if stats.variants_up_to_date:
            self._print(f"  Already current:   {stats.variants_up_to_date:,}")
        self._print(f"  Bytes written:     {self._format_bytes(stats.bytes_generated)}")
        self._print(f"  Time:              {self._format_duration(stats.elapsed_seconds)}")

        if stats.error_details:
            self._print()
            self._print("Errors:")
            for detail in stats.error_details:
                self._print(f"  - {detail}")
        self._print()

    def report_discovery(
        self,
        discovered: Dict[str, Set[str]],
        catalog: VariantCatalog,
        output_dir: Optional[str] = None
    ) -> None:
        """
        Print the variants present for each base name.

        Args:
            discovered: Mapping of base name to variant names
            catalog: Active catalog (for column order and file names)
            output_dir: Optional output directory to show in the header
        """
        self._print("=" * 60)
        self._print("DISCOVERED VARIANTS")
        self._print("=" * 60)
        if output_dir:
            self._print(f"  Output:      {output_dir}")
        self._print(f"  Base names:  {len(discovered):,}")
        self._print(f"  Files:       {sum(len(v) for v in discovered.values()):,}")
        self._print()

        if not discovered:
            self._print("No variants found.")
            self._print()
            return

        for base_name in sorted(discovered):
            present = discovered[base_name]
            files = [
                output_filename(base_name, spec)
                for spec in catalog if spec.name in present
            ]
            self._print(f"  {base_name}")
            for filename in files:
                self._print(f"    {filename}")
        self._print()

    def report_discovery_json(
        self,
        discovered: Dict[str, Set[str]],
        catalog: VariantCatalog
    ) -> None:
        """
        Print discovery as JSON for templating tools.

        Each base name maps to its variants in catalog order, with the
        file name relative to the output directory.
        """
        data = {}
        for base_name in sorted(discovered):
            present = discovered[base_name]
            data[base_name] = {
                spec.name: output_filename(base_name, spec)
                for spec in catalog if spec.name in present
            }
        self._print(json.dumps(data, indent=2))
