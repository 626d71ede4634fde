"""
Level slicing for PuzzleScript game sources.

Lets a game be exported so that play starts at a chosen level, without
hand-editing the source. Levels are announced by ``MESSAGE Level N`` lines
inside the LEVELS section; everything from the requested marker to the end of
the file is kept, everything between the section header and that marker is
dropped.
"""

import logging
import re
from typing import List, Optional

logger = logging.getLogger(__name__)

# =======
# LEVELS
# =======
LEVELS_HEADER = re.compile(
    r'^=+[ \t]*\r?\n[ \t]*LEVELS[ \t]*\r?\n=+[ \t]*\r?\n', re.IGNORECASE | re.MULTILINE
)

# Zero-width so the marker line stays at the start of the chunk it opens
_CHUNK_BOUNDARY = re.compile(
    r'(?=^[ \t]*MESSAGE[ \t]+Level[ \t]+\d+)', re.IGNORECASE | re.MULTILINE
)
_LEVEL_MARKER = re.compile(
    r'^[ \t]*MESSAGE[ \t]+Level[ \t]+(\d+)', re.IGNORECASE | re.MULTILINE
)


def _marker_for(level: int) -> re.Pattern:
    # \b keeps "Level 1" from matching "Level 10"
    return re.compile(rf'[ \t]*MESSAGE[ \t]+Level[ \t]+{level}\b', re.IGNORECASE)


def find_levels(source: str) -> List[int]:
    """
    List the level numbers announced in the LEVELS section, in file order.

    Returns an empty list when the source has no LEVELS section.
    """
    header = LEVELS_HEADER.search(source)
    if not header:
        return []
    return [int(m.group(1)) for m in _LEVEL_MARKER.finditer(source, header.end())]


def skip_to_level(source: str, target_level: Optional[int]) -> str:
    """
    Truncate the LEVELS section so it starts at ``MESSAGE Level <target_level>``.

    Args:
        source: Raw game source text
        target_level: Positive level number, or None for no slicing

    Returns:
        Text before the LEVELS header, the header itself, then every level
        chunk from the target onwards, byte for byte. The source is returned
        unchanged when there is no LEVELS section or the level is not found
        (the latter logs a warning).

    Raises:
        ValueError: If target_level is not a positive integer
    """
    if target_level is None:
        return source

    if isinstance(target_level, bool) or not isinstance(target_level, int) or target_level < 1:
        raise ValueError(f"target_level must be a positive integer, got {target_level!r}")

    header = LEVELS_HEADER.search(source)
    if not header:
        logger.debug("No LEVELS section found, nothing to slice")
        return source

    before_levels = source[:header.start()]
    levels_header = header.group(0)
    chunks = _CHUNK_BOUNDARY.split(source[header.end():])

    marker = _marker_for(target_level)
    for index, chunk in enumerate(chunks):
        if marker.match(chunk):
            logger.debug(f"Level {target_level} found in chunk {index} of {len(chunks)}")
            return before_levels + levels_header + ''.join(chunks[index:])

    logger.warning(f"Level {target_level} not found, using all levels")
    return source
