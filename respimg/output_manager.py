"""
OutputManager - Writes variant files and discovers what has been produced.
"""

import logging
import os
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Set

from .errors import OutputWriteFailure
from .name_parser import DELIVERY_EXTENSION, output_filename
from .variant_catalog import DELIMITER, VariantCatalog, VariantSpec


@dataclass(frozen=True)
class OutputArtifact:
    """
    A variant file on disk.

    Attributes:
        base_name: Base name of the source image
        variant_name: Name of the variant (e.g., 'Large')
        path: Absolute path of the file
        size: Size in bytes, if known
    """
    base_name: str
    variant_name: str
    path: str
    size: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'base_name': self.base_name,
            'variant_name': self.variant_name,
            'path': self.path,
            'size': self.size,
        }


class OutputManager:
    """
    Manages the flat output directory of variant files.

    Output paths depend only on the output directory, base name and
    suffix token, so reprocessing a source overwrites its previous variants.
    """

    def __init__(
        self,
        output_dir: str,
        catalog: VariantCatalog,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize output manager.

        Args:
            output_dir: Directory variants are written to
            catalog: Active variant catalog
            logger: Optional logger instance
        """
        self.output_dir = Path(output_dir).absolute()
        self.catalog = catalog
        self.logger = logger or logging.getLogger(__name__)

    def output_path(self, base_name: str, variant: VariantSpec) -> Path:
        """Absolute path of a variant file."""
        return self.output_dir / output_filename(base_name, variant)

    def persist(self, base_name: str, variant: VariantSpec, data: bytes) -> OutputArtifact:
        """
        Write a variant file, replacing any previous version.

        The data goes to a temporary sibling first and is renamed into
        place, so readers never see a partially written variant.

        Raises:
            OutputWriteFailure: Directory creation or write failed
        """
        path = self.output_path(base_name, variant)
        tmp_path = path.with_name(f".{path.name}.tmp")

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputWriteFailure(
                f"Cannot create output directory {self.output_dir}: {e}",
                path=str(path),
            ) from e

        try:
            with open(tmp_path, 'wb') as f:
                f.write(data)
            os.replace(tmp_path, path)
        except OSError as e:
            try:
                tmp_path.unlink()
            except OSError:
                pass
            raise OutputWriteFailure(f"Cannot write {path}: {e}", path=str(path)) from e

        self.logger.debug(f"Wrote {path} ({len(data)} bytes)")
        return OutputArtifact(
            base_name=base_name,
            variant_name=variant.name,
            path=str(path),
            size=len(data),
        )

    def is_up_to_date(self, source_path: str, base_name: str, variant: VariantSpec) -> bool:
        """True if the variant exists and is not older than its source."""
        path = self.output_path(base_name, variant)
        try:
            return path.stat().st_mtime >= os.stat(source_path).st_mtime
        except OSError:
            return False

    def match_filename(self, filename: str) -> Optional[OutputArtifact]:
        """
        Match an output file name against the naming convention.

        Returns:
            OutputArtifact (without size) or None for foreign files
        """
        stem, ext = os.path.splitext(filename)
        if ext != DELIVERY_EXTENSION:
            return None

        base_name, sep, token = stem.rpartition(DELIMITER)
        if not sep or not base_name:
            return None

        spec = self.catalog.by_token(token)
        if spec is None:
            return None

        return OutputArtifact(
            base_name=base_name,
            variant_name=spec.name,
            path=str(self.output_dir / filename),
        )

    def list_artifacts(self) -> List[OutputArtifact]:
        """
        List variant files in the output directory (non-recursive).

        Never raises: an unreadable directory yields an empty list.
        """
        artifacts = []
        try:
            with os.scandir(self.output_dir) as entries:
                for entry in entries:
                    if not entry.is_file():
                        continue
                    artifact = self.match_filename(entry.name)
                    if artifact is None:
                        continue
                    try:
                        size = entry.stat().st_size
                    except OSError:
                        size = None
                    artifacts.append(OutputArtifact(
                        base_name=artifact.base_name,
                        variant_name=artifact.variant_name,
                        path=artifact.path,
                        size=size,
                    ))
        except OSError as e:
            self.logger.warning(f"Cannot list output directory {self.output_dir}: {e}")
            return []

        artifacts.sort(key=lambda a: (a.base_name, a.variant_name))
        return artifacts

    def discover(self) -> Dict[str, Set[str]]:
        """
        Map each base name to the set of variant names present on disk.
        """
        discovered: Dict[str, Set[str]] = defaultdict(set)
        for artifact in self.list_artifacts():
            discovered[artifact.base_name].add(artifact.variant_name)
        return dict(discovered)
