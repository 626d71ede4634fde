#!/usr/bin/env python3
"""
Export the game and open it in the default browser.

Accepts the same arguments as pzsdev-export. Nothing is opened when the
export fails.

Usage:
    python -m pzsdev.tools.play [--level=N] [--armorgames]
"""

import logging
import sys
import webbrowser
from typing import Optional

from pzsdev.cli import (
    create_parser,
    load_validated_config,
    resolve_paths,
    run_export,
    setup_logging,
)
from pzsdev.config.loader import ConfigError
from pzsdev.config.validator import ValidationError

logger = logging.getLogger(__name__)


def main(argv: Optional[list] = None) -> int:
    parser = create_parser(prog='pzsdev-play')
    args = parser.parse_args(argv)

    try:
        config = load_validated_config(args.config)
    except (ConfigError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(config)

    code = run_export(config, args)
    if code != 0:
        return code

    output = resolve_paths(config, args).output
    logger.info(f"Opening {output}")
    webbrowser.open(output.resolve().as_uri())
    return 0


if __name__ == "__main__":
    sys.exit(main())
