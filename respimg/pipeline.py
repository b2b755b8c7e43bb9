"""
Pipeline - Turns source images into responsive variants.

Two entry points feed the same per-file processing:
    1. Startup: scan the input directory and process every eligible file
    2. Events: process a single path reported by a file watcher
"""

import logging
import os
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set

from .errors import SourceNotFound, VariantError
from .name_parser import NameConventionParser, SourceImageRequest
from .output_manager import OutputArtifact, OutputManager
from .pipeline_config import PipelineConfig
from .pipeline_progress import PipelineProgress
from .pipeline_stats import PipelineStats
from .variant_encoder import VariantEncoder


class EventKind(str, Enum):
    """File event kinds reported by a watcher. All but DELETE are treated alike."""
    CREATE = 'create'
    MODIFY = 'modify'
    WRITE = 'write'
    DELETE = 'delete'


class ProcessState(str, Enum):
    """Terminal state of one file's run."""
    SKIPPED = 'skipped'
    COMPLETED = 'completed'
    FAILED = 'failed'


@dataclass
class ProcessResult:
    """
    Outcome of running one file through the pipeline.

    Attributes:
        source_path: Path of the source file
        state: Terminal state
        request: Parsed request (None when skipped before classification)
        artifacts: Variant files written
        up_to_date: Names of variants skipped because they were current
        errors: Failures recorded under the continue policy
        reason: Why the file was skipped
        dry_run: True if nothing was decoded or written
    """
    source_path: str
    state: ProcessState = ProcessState.COMPLETED
    request: Optional[SourceImageRequest] = None
    artifacts: List[OutputArtifact] = field(default_factory=list)
    up_to_date: List[str] = field(default_factory=list)
    errors: List[VariantError] = field(default_factory=list)
    reason: Optional[str] = None
    dry_run: bool = False

    @property
    def filename(self) -> str:
        return os.path.basename(self.source_path)

    @property
    def skipped(self) -> bool:
        return self.state == ProcessState.SKIPPED

    @property
    def failed(self) -> bool:
        return self.state == ProcessState.FAILED


class Pipeline:
    """
    Classifies, decodes, resizes, encodes and writes variants.

    Each source is decoded once and every requested variant is rendered
    from that decoded image, in catalog order. Runs for the same source
    path are serialized.
    """

    def __init__(
        self,
        config: PipelineConfig,
        encoder: Optional[VariantEncoder] = None,
        output: Optional[OutputManager] = None,
        progress: Optional[PipelineProgress] = None,
        dry_run: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline.

        Args:
            config: Pipeline configuration (catalog, directories, policy)
            encoder: Variant encoder (default: built from the catalog quality)
            output: Output manager (default: built from config.output_dir)
            progress: Optional progress tracker for scans
            dry_run: If True, report what would be generated without writing
            logger: Optional logger instance
        """
        self.config = config
        self.catalog = config.catalog
        self.logger = logger or logging.getLogger(__name__)
        self.parser = NameConventionParser(self.catalog)
        self.encoder = encoder or VariantEncoder(quality=self.catalog.quality, logger=self.logger)
        self.output = output or OutputManager(config.output_dir, self.catalog, logger=self.logger)
        self.progress = progress
        self.dry_run = dry_run
        self.stats = PipelineStats()
        self._stop_requested = False
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def stop(self) -> None:
        """Request a running scan to stop after the current file."""
        self._stop_requested = True

    def startup(self) -> PipelineStats:
        """
        Process existing sources if configured to do so.

        Returns:
            PipelineStats for the scan (empty if no scan ran)
        """
        if not self.config.enabled:
            self.logger.info("Image variants disabled, nothing to do")
            return PipelineStats()
        if not self.config.process_existing_on_startup:
            self.logger.info("Skipping startup scan (process_existing_on_startup is off)")
            return PipelineStats()
        return self.scan_directory()

    def scan_directory(self, directory: Optional[str] = None) -> PipelineStats:
        """
        Process every file in a directory (non-recursive).

        Per-file failures are logged and the scan moves on, whatever the
        configured error policy.

        Args:
            directory: Directory to scan (default: config.input_dir)

        Returns:
            PipelineStats with results

        Raises:
            SourceNotFound: The directory cannot be listed
        """
        if not self.config.enabled:
            return PipelineStats()

        directory = directory or self.config.input_dir
        try:
            names = sorted(os.listdir(directory))
        except OSError as e:
            raise SourceNotFound(f"Cannot list input directory {directory}: {e}", path=directory) from e

        paths = [os.path.join(directory, name) for name in names]
        paths = [p for p in paths if os.path.isfile(p)]

        self.stats = PipelineStats(total_to_process=len(paths))

        mode_str = " [DRY RUN]" if self.dry_run else ""
        self.logger.info(f"Scanning {directory}: {len(paths)} files{mode_str}")

        for path in paths:
            if self._stop_requested:
                self.logger.info("Stop requested, halting scan")
                break

            result = self._handle(path, None, EventKind.CREATE, fail_fast=False)
            self.stats.record(result)

            if self.progress:
                self.progress.on_file_processed(result)
                self.progress.on_progress_update(self.stats)

        self.logger.info(
            f"Scan complete: {self.stats.processed} processed, "
            f"{self.stats.variants_written} variants written, "
            f"{self.stats.skipped} skipped, {self.stats.errors} errors "
            f"({self.stats.elapsed_seconds:.1f}s)"
        )

        return self.stats

    def handle_event(
        self,
        file_path: str,
        file_extension: Optional[str] = None,
        event_kind=EventKind.MODIFY
    ) -> ProcessResult:
        """
        Process a single file event from a watcher.

        Args:
            file_path: Path of the changed file
            file_extension: Extension reported with the event (default: from path)
            event_kind: create, modify, write or delete

        Returns:
            ProcessResult for the file

        Raises:
            VariantError: A variant failed and the error policy is fail-fast
        """
        if not self.config.enabled:
            return ProcessResult(
                source_path=file_path,
                state=ProcessState.SKIPPED,
                reason="disabled",
            )
        return self._handle(
            file_path, file_extension, EventKind(event_kind), fail_fast=self.config.fail_fast
        )

    def process_file(self, path: str, fail_fast: Optional[bool] = None) -> ProcessResult:
        """
        Process a source file regardless of its extension.

        Args:
            path: Source image path
            fail_fast: Override the configured error policy

        Returns:
            ProcessResult for the file
        """
        if fail_fast is None:
            fail_fast = self.config.fail_fast
        if not self.config.enabled:
            return ProcessResult(source_path=path, state=ProcessState.SKIPPED, reason="disabled")

        request = self.parser.parse(path)
        if request is None:
            return self._skip(path, "no variant token in name")
        return self.process_request(request, fail_fast)

    def discover(self) -> Dict[str, Set[str]]:
        """Map each base name to the variant names present in the output directory."""
        return self.output.discover()

    def _handle(
        self,
        path: str,
        extension: Optional[str],
        kind: EventKind,
        fail_fast: bool
    ) -> ProcessResult:
        """Classify a file and run it through the pipeline."""
        if extension is None:
            extension = os.path.splitext(path)[1]

        if not VariantEncoder.is_source_extension(extension):
            return self._skip(path, f"unsupported extension {extension or '(none)'}")

        request = self.parser.parse(path)
        if request is None:
            return self._skip(path, "no variant token in name")

        if kind == EventKind.DELETE:
            # Produced variants stay in place when a source disappears
            self.logger.info(f"Source removed: {path} (variants of {request.base_name} kept)")
            return ProcessResult(source_path=path, request=request)

        return self.process_request(request, fail_fast)

    def process_request(self, request: SourceImageRequest, fail_fast: bool) -> ProcessResult:
        """
        Decode a source once and produce each requested variant.

        Under fail-fast the first error is raised and remaining variants are
        not attempted; variants already written stay on disk. Otherwise
        errors are logged, recorded on the result and processing continues.
        """
        result = ProcessResult(source_path=request.source_path, request=request)

        if self.dry_run:
            result.dry_run = True
            self.logger.info(
                f"[DRY RUN] Would generate {', '.join(request.variant_names)} "
                f"for {request.source_path}"
            )
            return result

        with self._lock_for(request.source_path):
            pending = []
            for variant in request.variants:
                if self.config.skip_up_to_date and self.output.is_up_to_date(
                    request.source_path, request.base_name, variant
                ):
                    result.up_to_date.append(variant.name)
                else:
                    pending.append(variant)

            if not pending:
                self.logger.debug(f"All variants current: {request.source_path}")
                return result

            try:
                decoded = self.encoder.decode(request.source_path)
            except VariantError as e:
                self._record_error(result, e, fail_fast)
                return result

            for variant in pending:
                try:
                    data = self.encoder.render(decoded, variant)
                    artifact = self.output.persist(request.base_name, variant, data)
                except VariantError as e:
                    self._record_error(result, e, fail_fast)
                    continue

                result.artifacts.append(artifact)
                self.logger.info(
                    f"Generated: {os.path.basename(artifact.path)} ({artifact.size} bytes)"
                )

        return result

    def _record_error(self, result: ProcessResult, error: VariantError, fail_fast: bool) -> None:
        """Log a failure, then raise it (fail-fast) or keep it on the result."""
        result.state = ProcessState.FAILED
        self.logger.error(f"Error processing {result.filename}: {error}")
        if fail_fast:
            raise error
        result.errors.append(error)

    def _skip(self, path: str, reason: str) -> ProcessResult:
        self.logger.debug(f"Skipping {path}: {reason}")
        return ProcessResult(source_path=path, state=ProcessState.SKIPPED, reason=reason)

    def _lock_for(self, path: str) -> threading.Lock:
        key = os.path.normcase(os.path.abspath(path))
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock
