"""Prelude metadata parsing for PuzzleScript game sources."""

import re
from typing import Dict

# "title My Game", "homepage www.example.com", "background_color #123"
_METADATA_LINE = re.compile(r'^(\w+)\s+(.+)$', re.ASCII)


def parse_metadata(source: str) -> Dict[str, str]:
    """
    Collect ``KEY value`` lines from the prelude of a game source.

    Scanning stops at the first line starting with ``===`` (the first section
    divider). Keys are lower-cased, values trimmed, and a repeated key keeps
    its last value. Lines that don't look like ``KEY value`` are ignored.

    Args:
        source: Raw game source text

    Returns:
        Mapping of lower-cased key to value (possibly empty)
    """
    metadata = {}

    for line in source.split('\n'):
        line = line.rstrip('\r')
        if line.strip().lower().startswith('==='):
            break

        match = _METADATA_LINE.match(line)
        if match:
            metadata[match.group(1).lower()] = match.group(2).strip()

    return metadata
