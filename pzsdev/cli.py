"""Command-line interface for exporting a game to standalone HTML."""

import sys
import logging
import argparse
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

from pzsdev import __version__
from pzsdev.config.loader import load_config, ConfigError
from pzsdev.config.validator import validate_config, ValidationError
from pzsdev.export import ExportError, ExportOptions, ExportPaths, export_game


def positive_int(value: str) -> int:
    """argparse type for level numbers."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid level number: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"level must be a positive integer, got {number}")
    return number


def create_parser(prog: str = 'pzsdev-export') -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog=prog,
        description='Export a PuzzleScript game to a standalone HTML file',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export game/game.pzs to dist/game.html without Armor Games branding
  pzsdev-export

  # Keep the Armor Games play button, intro video and footer
  pzsdev-export --armorgames

  # Start playing from level 5 (clears any saved progress in the browser)
  pzsdev-export --level=5

  # Export another source file
  pzsdev-export --source=/tmp/edited.pzs --level=3
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=Path,
        metavar='PATH',
        help='Path to pzsdev.yaml (default: ./pzsdev.yaml if present)'
    )

    parser.add_argument(
        '--source',
        type=Path,
        metavar='PATH',
        help='Game source to export. Overrides config.'
    )

    parser.add_argument(
        '--template',
        type=Path,
        metavar='PATH',
        help='Standalone HTML template. Overrides config.'
    )

    parser.add_argument(
        '--output',
        type=Path,
        metavar='PATH',
        help='HTML file to write. Overrides config.'
    )

    parser.add_argument(
        '--armorgames',
        action='store_true',
        help='Keep the Armor Games play button, intro video and footer'
    )

    parser.add_argument(
        '--level',
        type=positive_int,
        metavar='N',
        help='Start the exported game at MESSAGE Level N'
    )

    return parser


def setup_logging(config: dict) -> None:
    """
    Setup logging configuration from config.

    Args:
        config: Configuration dictionary
    """
    logging_config = config.get('logging', {})

    level_str = logging_config.get('level', 'INFO').upper()
    level = getattr(logging, level_str, logging.INFO)

    handlers = []

    if logging_config.get('console', True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        formatter = logging.Formatter('%(levelname)s: %(message)s')
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    log_file = logging_config.get('file')
    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(level)
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
        except (OSError, PermissionError) as e:
            print(f"Error: Could not create log file '{log_file}': {e}", file=sys.stderr)
            sys.exit(1)

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True  # Override any existing configuration
    )


def load_validated_config(config_path: Optional[Path]) -> dict:
    """Load config and validate it; raises ConfigError or ValidationError."""
    config = load_config(config_path)
    validate_config(config)
    return config


def resolve_paths(config: dict, args: argparse.Namespace) -> ExportPaths:
    """Configured export paths with any command-line overrides applied."""
    paths = config['paths']
    return ExportPaths(
        source=args.source.resolve() if args.source else Path(paths['source']),
        template=args.template.resolve() if args.template else Path(paths['template']),
        output=args.output.resolve() if args.output else Path(paths['output']),
    )


def run_export(config: dict, args: argparse.Namespace) -> int:
    """
    Run one export with the given configuration and arguments.

    Returns:
        Exit code
    """
    use_armor_games = args.armorgames or config['export'].get('armorgames', False)
    options = ExportOptions(use_armor_games=use_armor_games, target_level=args.level)
    paths = resolve_paths(config, args)

    try:
        output = export_game(paths, options, default_title=config['export']['default_title'])
    except ExportError as e:
        logger.debug(f"Export aborted: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.error(f"Export failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info(f"Successfully exported: {output}")
    if use_armor_games:
        logger.info("(Using Armor Games template with play button and intro video)")
    else:
        logger.info("(Using clean template - no splash screen or branding)")

    return 0


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the export CLI.

    Args:
        argv: Command-line arguments (default: sys.argv)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = load_validated_config(args.config)
    except (ConfigError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(config)

    try:
        return run_export(config, args)
    except KeyboardInterrupt:
        print("\nExport interrupted by user.", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())
