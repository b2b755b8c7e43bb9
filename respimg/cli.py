"""
Command Line Interface for responsive image variants.
"""

import argparse
import logging
from typing import List, Optional

from .errors import ConfigurationInvalid, VariantError
from .pipeline import EventKind, Pipeline
from .pipeline_config import ErrorPolicy, PipelineConfig
from .pipeline_progress import PipelineProgress
from .reporter import Reporter


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('respimg')


def get_config(args: argparse.Namespace) -> PipelineConfig:
    """
    Build configuration from file, environment and CLI overrides.

    Raises:
        ConfigurationInvalid: The configuration cannot be used
    """
    config_path = getattr(args, 'config', None)
    base = PipelineConfig.from_file(config_path) if config_path else None
    config = PipelineConfig.from_env(base)

    if getattr(args, 'input', None):
        config.input_dir = args.input
    if getattr(args, 'output', None):
        config.output_dir = args.output
    if getattr(args, 'quality', None) is not None:
        config.catalog = config.catalog.with_quality(args.quality)
    if getattr(args, 'skip_up_to_date', False):
        config.skip_up_to_date = True
    if getattr(args, 'continue_on_error', False):
        config.error_policy = ErrorPolicy.CONTINUE

    return config


def load_config(
    args: argparse.Namespace,
    logger: logging.Logger,
    require_input: bool = True
) -> Optional[PipelineConfig]:
    """
    Load and validate configuration, logging any problems.

    Args:
        args: Parsed arguments
        logger: Logger for problems
        require_input: If False, only the output directory must be set

    Returns:
        PipelineConfig, or None if it is unusable
    """
    try:
        config = get_config(args)
    except FileNotFoundError:
        logger.error(f"Config file not found: {args.config}")
        return None
    except ConfigurationInvalid as e:
        for problem in e.problems:
            logger.error(problem)
        return None

    if require_input:
        errors = config.validate()
    else:
        errors = [] if config.output_dir else ["output_dir is required"]
    if errors:
        for error in errors:
            logger.error(error)
        return None

    return config


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Add configuration arguments to a parser."""
    group = parser.add_argument_group('Configuration')
    group.add_argument('--config', metavar='FILE',
                       help='JSON configuration file')
    group.add_argument('-i', '--input', metavar='DIR',
                       help='Override RESPIMG_INPUT_DIR')
    group.add_argument('-o', '--output', metavar='DIR',
                       help='Override RESPIMG_OUTPUT_DIR')
    group.add_argument('--quality', type=int, metavar='Q',
                       help='Override encode quality (0-100)')


def cmd_scan(args: argparse.Namespace) -> int:
    """Execute scan command (startup pass over the input directory)."""
    logger = setup_logging(args.verbose)

    config = load_config(args, logger)
    if config is None:
        return 1

    logger.info(f"Input: {config.input_dir}")
    logger.info(f"Output: {config.output_dir}")
    logger.info(f"Quality: {config.quality}")
    logger.info(f"Variants: {', '.join(f'{v.name}={v.suffix_token}' for v in config.catalog)}")

    if args.show_files:
        logger.info("Show-files mode: will print each file")

    progress = None
    if not args.quiet:
        progress = PipelineProgress(show_files=args.show_files, logger=logger)

    try:
        pipeline = Pipeline(config, progress=progress, dry_run=args.dry_run, logger=logger)
        if args.force:
            stats = pipeline.scan_directory()
        else:
            stats = pipeline.startup()

        if not args.quiet:
            print()
            Reporter().report_run(stats)

        return 0 if stats.errors == 0 else 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except VariantError as e:
        logger.error(f"Scan failed: {e}")
        return 1


def cmd_process(args: argparse.Namespace) -> int:
    """Execute process command (a single file event)."""
    logger = setup_logging(args.verbose)

    config = load_config(args, logger, require_input=False)
    if config is None:
        return 1

    pipeline = Pipeline(config, logger=logger)
    try:
        result = pipeline.handle_event(args.path, event_kind=args.event)
    except VariantError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    if result.skipped:
        logger.info(f"Skipped {result.filename}: {result.reason}")
    for artifact in result.artifacts:
        print(artifact.path)

    return 1 if result.errors else 0


def cmd_discover(args: argparse.Namespace) -> int:
    """Execute discover command."""
    logger = setup_logging(args.verbose)

    config = load_config(args, logger, require_input=False)
    if config is None:
        return 1

    pipeline = Pipeline(config, logger=logger)
    discovered = pipeline.discover()

    reporter = Reporter()
    if args.json:
        reporter.report_discovery_json(discovered, config.catalog)
    else:
        reporter.report_discovery(discovered, config.catalog, str(pipeline.output.output_dir))

    return 0


def cmd_catalog(args: argparse.Namespace) -> int:
    """Execute catalog command."""
    logger = setup_logging(args.verbose)

    try:
        config = get_config(args)
    except FileNotFoundError:
        logger.error(f"Config file not found: {args.config}")
        return 1
    except ConfigurationInvalid as e:
        for problem in e.problems:
            logger.error(problem)
        return 1

    Reporter().report_catalog(config.catalog)
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='respimg',
        description='Responsive image variant generation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Naming convention:
  Sources named  photo.L.M.jpg  produce  photo.L.webp  and  photo.M.webp
  Files without a known suffix token are ignored.

Examples:
  python -m respimg scan -i images/ -o public/img
  python -m respimg process images/photo.L.jpg -o public/img
  python -m respimg discover -o public/img --json
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Scan command
    scan_parser = subparsers.add_parser('scan', help='Process every eligible file in the input directory')
    scan_parser.add_argument('-n', '--dry-run', action='store_true', help='Show what would be done')
    scan_parser.add_argument('-f', '--force', action='store_true',
                             help='Scan even if process_existing_on_startup is off')
    scan_parser.add_argument('--skip-up-to-date', action='store_true',
                             help='Skip variants newer than their source')
    scan_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    scan_parser.add_argument('--show-files', action='store_true',
                             help='Print each file as processed with result')
    scan_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_config_arguments(scan_parser)

    # Process command
    process_parser = subparsers.add_parser('process', help='Process a single changed file')
    process_parser.add_argument('path', help='Source image path')
    process_parser.add_argument('-e', '--event', choices=[k.value for k in EventKind],
                                default=EventKind.MODIFY.value, help='Event kind (default: modify)')
    process_parser.add_argument('--continue-on-error', action='store_true',
                                help='Log variant failures and keep going')
    process_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_config_arguments(process_parser)

    # Discover command
    discover_parser = subparsers.add_parser('discover', help='List variants in the output directory')
    discover_parser.add_argument('--json', action='store_true', help='Print JSON for templating')
    discover_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_config_arguments(discover_parser)

    # Catalog command
    catalog_parser = subparsers.add_parser('catalog', help='Show the active variant catalog')
    catalog_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_config_arguments(catalog_parser)

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'scan':
        return cmd_scan(parsed_args)
    elif parsed_args.command == 'process':
        return cmd_process(parsed_args)
    elif parsed_args.command == 'discover':
        return cmd_discover(parsed_args)
    elif parsed_args.command == 'catalog':
        return cmd_catalog(parsed_args)

    return 1
