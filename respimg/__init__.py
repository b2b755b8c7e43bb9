"""
Responsive image variants

Turns source images named with variant suffix tokens (photo.L.M.jpg)
into resized WebP variants (photo.L.webp, photo.M.webp):
    1. Startup: scan the input directory and process eligible files
    2. Events: process single files reported by a file watcher

Produced variants can be listed per base name for templating.
"""

__version__ = "1.0.0"

from .errors import (
    VariantError,
    ConfigurationInvalid,
    SourceNotFound,
    DecodeFailure,
    EncodeFailure,
    OutputWriteFailure,
)
from .variant_catalog import VariantSpec, VariantCatalog, default_catalog
from .name_parser import NameConventionParser, SourceImageRequest, output_filename
from .variant_encoder import VariantEncoder, DecodedImage, target_size
from .output_manager import OutputManager, OutputArtifact
from .pipeline_config import PipelineConfig, ErrorPolicy
from .pipeline_stats import PipelineStats
from .pipeline_progress import PipelineProgress
from .pipeline import Pipeline, ProcessResult, ProcessState, EventKind
from .reporter import Reporter

__all__ = [
    "VariantError",
    "ConfigurationInvalid",
    "SourceNotFound",
    "DecodeFailure",
    "EncodeFailure",
    "OutputWriteFailure",
    "VariantSpec",
    "VariantCatalog",
    "default_catalog",
    "NameConventionParser",
    "SourceImageRequest",
    "output_filename",
    "VariantEncoder",
    "DecodedImage",
    "target_size",
    "OutputManager",
    "OutputArtifact",
    "PipelineConfig",
    "ErrorPolicy",
    "PipelineStats",
    "PipelineProgress",
    "Pipeline",
    "ProcessResult",
    "ProcessState",
    "EventKind",
    "Reporter",
]
