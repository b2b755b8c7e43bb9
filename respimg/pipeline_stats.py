"""
PipelineStats - Statistics for a processing run.
"""

import time
from dataclasses import dataclass, field
from typing import List


@dataclass
class PipelineStats:
    """
    Statistics for a processing run.

    Attributes:
        total_to_process: Files found in the input directory
        processed: Files whose variants were all produced
        skipped: Ineligible or unsupported files
        errors: Files with at least one failure
        variants_written: Variant files written
        variants_up_to_date: Variants skipped as already current
        bytes_generated: Total bytes of variants written
        start_time: Start timestamp
        error_details: List of error messages
    """
    total_to_process: int = 0
    processed: int = 0
    skipped: int = 0
    errors: int = 0
    variants_written: int = 0
    variants_up_to_date: int = 0
    bytes_generated: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def rate_per_second(self) -> float:
        """Processing rate in files per second."""
        if self.elapsed_seconds > 0:
            return self.processed / self.elapsed_seconds
        return 0.0

    @property
    def rate_per_minute(self) -> float:
        """Processing rate in files per minute."""
        return self.rate_per_second * 60

    @property
    def completed_count(self) -> int:
        """Total completed (processed + skipped + errors)."""
        return self.processed + self.skipped + self.errors

    @property
    def remaining_count(self) -> int:
        """Remaining to process."""
        return self.total_to_process - self.completed_count

    def record(self, result) -> None:
        """Fold a ProcessResult into the counters."""
        if result.skipped:
            self.skipped += 1
        elif result.errors:
            self.errors += 1
            self.error_details.extend(str(e) for e in result.errors)
        else:
            self.processed += 1

        for artifact in result.artifacts:
            self.variants_written += 1
            self.bytes_generated += artifact.size or 0
        self.variants_up_to_date += len(result.up_to_date)
