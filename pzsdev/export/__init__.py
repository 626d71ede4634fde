"""
Standalone HTML export package for pzsdev.

Turns a PuzzleScript game source plus the engine's standalone template into
a single playable HTML file.
"""

from .metadata import parse_metadata
from .levels import skip_to_level, find_levels
from .branding import strip_armor_games_elements
from .assembler import (
    DEFAULT_TITLE,
    ExportError,
    ExportOptions,
    ExportPaths,
    SourceNotFoundError,
    TemplateNotFoundError,
    assemble,
    escape_source,
    export_game,
)

__all__ = [
    'parse_metadata',
    'skip_to_level',
    'find_levels',
    'strip_armor_games_elements',
    'DEFAULT_TITLE',
    'ExportError',
    'ExportOptions',
    'ExportPaths',
    'SourceNotFoundError',
    'TemplateNotFoundError',
    'assemble',
    'escape_source',
    'export_game',
]
