"""Tests for PipelineProgress class."""

import pytest
from respimg.errors import DecodeFailure
from respimg.name_parser import SourceImageRequest
from respimg.output_manager import OutputArtifact
from respimg.pipeline import ProcessResult, ProcessState
from respimg.pipeline_progress import PipelineProgress
from respimg.pipeline_stats import PipelineStats


class TestPipelineProgress:
    """Tests for PipelineProgress class."""

    @pytest.fixture
    def request_(self, catalog):
        return SourceImageRequest(
            source_path='/src/photo.L.M.jpg',
            base_name='photo',
            variants=(catalog.by_token('L'), catalog.by_token('M')),
        )

    def test_init_defaults(self, logger):
        """Test default initialization."""
        progress = PipelineProgress(logger=logger)

        assert progress.show_files is False
        assert progress.log_interval == 100

    def test_success_show_files(self, logger, request_, capsys):
        """Test show_files output for written variants."""
        progress = PipelineProgress(show_files=True, logger=logger)
        result = ProcessResult(
            source_path=request_.source_path,
            request=request_,
            artifacts=[OutputArtifact('photo', 'Large', '/out/photo.L.webp', 5000)],
        )

        progress.on_file_processed(result)

        captured = capsys.readouterr()
        assert '[OK] photo.L.M.jpg -> Large (4.9 KB)' in captured.out

    def test_error_show_files(self, logger, request_, capsys):
        """Test show_files output for failures."""
        progress = PipelineProgress(show_files=True, logger=logger)
        result = ProcessResult(
            source_path=request_.source_path,
            state=ProcessState.FAILED,
            request=request_,
            errors=[DecodeFailure('bad data')],
        )

        progress.on_file_processed(result)

        captured = capsys.readouterr()
        assert 'ERROR' in captured.out
        assert 'bad data' in captured.out

    def test_skip_show_files(self, logger, capsys):
        """Test show_files output for skipped files."""
        progress = PipelineProgress(show_files=True, logger=logger)
        result = ProcessResult(
            source_path='/src/ignored.jpg',
            state=ProcessState.SKIPPED,
            reason='no variant token in name',
        )

        progress.on_file_processed(result)

        captured = capsys.readouterr()
        assert '[SKIP] ignored.jpg -> no variant token in name' in captured.out

    def test_dry_run_show_files(self, logger, request_, capsys):
        """Test show_files output for dry run."""
        progress = PipelineProgress(show_files=True, logger=logger)
        result = ProcessResult(source_path=request_.source_path, request=request_, dry_run=True)

        progress.on_file_processed(result)

        captured = capsys.readouterr()
        assert 'DRY RUN' in captured.out
        assert 'Large, Medium' in captured.out

    def test_quiet_without_show_files(self, logger, request_, capsys):
        """Test nothing is printed per file by default."""
        progress = PipelineProgress(logger=logger)

        progress.on_file_processed(ProcessResult(source_path=request_.source_path, request=request_))

        assert capsys.readouterr().out == ''

    def test_callable_interface(self, logger):
        """Test using progress as callback."""
        progress = PipelineProgress(logger=logger)
        stats = PipelineStats(total_to_process=100)
        stats.processed = 100

        progress(stats)

        assert progress.last_logged == 100
