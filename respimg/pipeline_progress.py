"""
PipelineProgress - Tracks and displays scan progress.
"""

import logging
from typing import Optional

from .pipeline_stats import PipelineStats


class PipelineProgress:
    """
    Tracks and displays progress with optional per-file output.
    """

    def __init__(
        self,
        show_files: bool = False,
        log_interval: int = 100,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            show_files: If True, print each file as it's processed
            log_interval: Log summary progress every N files (when not show_files)
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.last_logged = 0

    def on_file_processed(self, result) -> None:
        """
        Called when a file has been through the pipeline.

        Args:
            result: The ProcessResult for the file
        """
        if not self.show_files:
            return

        name = result.filename
        if result.skipped:
            print(f"  [SKIP] {name} -> {result.reason}")
        elif result.errors:
            for error in result.errors:
                print(f"  [ERROR] {name} -> {error}")
        elif result.dry_run:
            names = ', '.join(result.request.variant_names)
            print(f"  [DRY RUN] {name} -> would generate {names}")
        else:
            for artifact in result.artifacts:
                size_str = self._format_bytes(artifact.size)
                print(f"  [OK] {name} -> {artifact.variant_name} ({size_str})")
            for variant_name in result.up_to_date:
                print(f"  [CURRENT] {name} -> {variant_name}")

    def on_progress_update(self, stats: PipelineStats) -> None:
        """
        Called after each file to report overall progress.

        Args:
            stats: Current run statistics
        """
        total_done = stats.completed_count

        if not self.show_files and total_done - self.last_logged >= self.log_interval:
            self.last_logged = total_done
            self.logger.info(
                f"Progress: {stats.processed} processed, {stats.skipped} skipped, "
                f"{stats.errors} errors ({stats.rate_per_minute:.1f}/min, "
                f"{stats.remaining_count} left)"
            )

    @staticmethod
    def _format_bytes(bytes_val: Optional[int]) -> str:
        """Format bytes as human-readable string."""
        if bytes_val is None:
            return "unknown"
        for unit in ['B', 'KB', 'MB', 'GB']:
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} TB"

    def __call__(self, stats: PipelineStats) -> None:
        """Allow use as callback for stats updates."""
        self.on_progress_update(stats)
