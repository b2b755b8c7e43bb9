"""
PipelineConfig - Runtime configuration for the variant pipeline.
"""

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .errors import ConfigurationInvalid
from .variant_catalog import DEFAULT_QUALITY, VariantCatalog, default_catalog


class ErrorPolicy(str, Enum):
    """What a live event does when a variant fails."""
    FAIL_FAST = 'fail-fast'
    CONTINUE = 'continue'


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _parse_policy(value) -> ErrorPolicy:
    try:
        return ErrorPolicy(value)
    except ValueError as e:
        raise ConfigurationInvalid(
            f"error_policy must be one of {[p.value for p in ErrorPolicy]}, got {value!r}"
        ) from e


@dataclass
class PipelineConfig:
    """
    Configuration for the variant pipeline.

    Attributes:
        input_dir: Directory holding source images
        output_dir: Directory variants are written to
        catalog: Variant catalog (includes encode quality)
        enabled: When False every pipeline call is a no-op
        process_existing_on_startup: Scan input_dir when the pipeline starts
        error_policy: Fail-fast or continue for live events
        skip_up_to_date: Skip variants newer than their source
    """
    input_dir: str
    output_dir: str
    catalog: VariantCatalog = field(default_factory=default_catalog)
    enabled: bool = True
    process_existing_on_startup: bool = True
    error_policy: ErrorPolicy = ErrorPolicy.FAIL_FAST
    skip_up_to_date: bool = False

    ENV_PREFIX = 'RESPIMG_'

    @property
    def quality(self) -> int:
        return self.catalog.quality

    @property
    def fail_fast(self) -> bool:
        return self.error_policy == ErrorPolicy.FAIL_FAST

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if not self.input_dir:
            errors.append("input_dir is required")
        elif not os.path.isdir(self.input_dir):
            errors.append(f"input_dir does not exist: {self.input_dir}")

        if not self.output_dir:
            errors.append("output_dir is required")
        elif os.path.exists(self.output_dir) and not os.path.isdir(self.output_dir):
            errors.append(f"output_dir is not a directory: {self.output_dir}")

        return errors

    @classmethod
    def from_dict(cls, data: dict) -> 'PipelineConfig':
        """
        Create from configuration data.

        Raises:
            ConfigurationInvalid: The catalog or error policy is invalid
        """
        catalog = VariantCatalog.from_dict({
            'quality': data.get('quality', DEFAULT_QUALITY),
            'variants': data.get('variants'),
        })
        return cls(
            input_dir=data.get('input_dir', ''),
            output_dir=data.get('output_dir', ''),
            catalog=catalog,
            enabled=data.get('enabled', True),
            process_existing_on_startup=data.get('process_existing_on_startup', True),
            error_policy=_parse_policy(data.get('error_policy', ErrorPolicy.FAIL_FAST.value)),
            skip_up_to_date=data.get('skip_up_to_date', False),
        )

    @classmethod
    def from_file(cls, filepath: str) -> 'PipelineConfig':
        """
        Load configuration from a JSON file.

        Relative directories are resolved against the file's location.
        """
        path = Path(filepath)
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationInvalid(f"Cannot parse {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationInvalid(f"{filepath} must contain a JSON object")

        for key in ('input_dir', 'output_dir'):
            if data.get(key) and not os.path.isabs(data[key]):
                data[key] = str(path.parent / data[key])

        return cls.from_dict(data)

    @classmethod
    def from_env(cls, base: Optional['PipelineConfig'] = None) -> 'PipelineConfig':
        """
        Create configuration from environment variables.

        Environment variables:
            RESPIMG_INPUT_DIR: Source image directory
            RESPIMG_OUTPUT_DIR: Variant output directory
            RESPIMG_QUALITY: Encode quality 0-100
            RESPIMG_ENABLED: Enable processing (default: true)
            RESPIMG_PROCESS_EXISTING: Scan existing files on startup (default: true)
            RESPIMG_ERROR_POLICY: 'fail-fast' or 'continue'
            RESPIMG_SKIP_UP_TO_DATE: Skip variants newer than their source

        Args:
            base: Optional configuration to override (e.g., loaded from file)
        """
        config = base or cls(input_dir='', output_dir='')
        env = os.environ
        p = cls.ENV_PREFIX

        if env.get(f'{p}INPUT_DIR'):
            config.input_dir = env[f'{p}INPUT_DIR']
        if env.get(f'{p}OUTPUT_DIR'):
            config.output_dir = env[f'{p}OUTPUT_DIR']
        if env.get(f'{p}QUALITY'):
            try:
                quality = int(env[f'{p}QUALITY'])
            except ValueError as e:
                raise ConfigurationInvalid(
                    f"{p}QUALITY must be an integer, got {env[f'{p}QUALITY']!r}"
                ) from e
            config.catalog = config.catalog.with_quality(quality)
        if env.get(f'{p}ENABLED'):
            config.enabled = _parse_bool(env[f'{p}ENABLED'])
        if env.get(f'{p}PROCESS_EXISTING'):
            config.process_existing_on_startup = _parse_bool(env[f'{p}PROCESS_EXISTING'])
        if env.get(f'{p}ERROR_POLICY'):
            config.error_policy = _parse_policy(env[f'{p}ERROR_POLICY'])
        if env.get(f'{p}SKIP_UP_TO_DATE'):
            config.skip_up_to_date = _parse_bool(env[f'{p}SKIP_UP_TO_DATE'])

        return config

    def to_dict(self) -> dict:
        data = {
            'input_dir': self.input_dir,
            'output_dir': self.output_dir,
            'enabled': self.enabled,
            'process_existing_on_startup': self.process_existing_on_startup,
            'error_policy': self.error_policy.value,
            'skip_up_to_date': self.skip_up_to_date,
        }
        data.update(self.catalog.to_dict())
        return data
