"""
Standalone HTML assembly.

Takes a PuzzleScript game source and the engine's standalone template and
produces a single self-contained HTML file: the template's placeholders are
filled from the source's metadata and the source itself is embedded as a
JavaScript string literal.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .branding import strip_armor_games_elements
from .levels import skip_to_level
from .metadata import parse_metadata

logger = logging.getLogger(__name__)

DEFAULT_TITLE = 'PuzzleScript Game'

TITLE_PLACEHOLDER = '__GAMETITLE__'
HOMEPAGE_PLACEHOLDER = '__HOMEPAGE__'
GAMEDAT_PLACEHOLDER = '__GAMEDAT__'

# Template defaults guarded by a "/*Don't ..." comment
BACKGROUND_COLOR_DEFAULT = "black;/*Don't"
TEXT_COLOR_DEFAULT = "lightblue;/*Don't"

# A saved game or checkpoint in the browser would override the forced level
CLEAR_SAVE_SCRIPT = (
    "<script>localStorage.removeItem(document.URL);"
    "localStorage.removeItem(document.URL+'_checkpoint');</script>"
)

# Backslash must come first so later escapes aren't doubled
_ESCAPES = (
    ('\\', '\\\\'),
    ('"', '\\"'),
    ('\n', '\\n'),
    ('\r', '\\r'),
    ('\t', '\\t'),
)


class ExportError(Exception):
    """Export-related errors."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class SourceNotFoundError(ExportError):
    """The game source file does not exist."""
    pass


class TemplateNotFoundError(ExportError):
    """The HTML template file does not exist."""
    pass


@dataclass
class ExportOptions:
    """Per-run export switches."""
    use_armor_games: bool = False
    target_level: Optional[int] = None


@dataclass
class ExportPaths:
    """Input and output locations for one export."""
    source: Path
    template: Path
    output: Path


def escape_source(source: str) -> str:
    """Quote a game source as a double-quoted JavaScript string literal."""
    for raw, escaped in _ESCAPES:
        source = source.replace(raw, escaped)
    return '"' + source + '"'


def assemble(
    source: str,
    template: str,
    metadata: Optional[Dict[str, str]] = None,
    options: Optional[ExportOptions] = None,
    default_title: str = DEFAULT_TITLE
) -> str:
    """
    Build the standalone HTML document for a game.

    Args:
        source: Raw game source text
        template: Standalone template HTML
        metadata: Parsed prelude metadata. Parsed from the (sliced) source if None.
        options: Export switches (defaults: branding stripped, all levels)
        default_title: Title used when the source declares none

    Returns:
        The final HTML text
    """
    if options is None:
        options = ExportOptions()

    html = template

    if options.target_level is not None:
        source = skip_to_level(source, options.target_level)
        html = html.replace('</head>', CLEAR_SAVE_SCRIPT + '</head>', 1)

    if not options.use_armor_games:
        html = strip_armor_games_elements(html)

    if metadata is None:
        metadata = parse_metadata(source)

    if metadata.get('background_color'):
        html = html.replace(
            BACKGROUND_COLOR_DEFAULT,
            metadata['background_color'] + ";/*Don't",
            1
        )

    if metadata.get('text_color'):
        html = html.replace(
            TEXT_COLOR_DEFAULT,
            metadata['text_color'] + ";/*Don't",
            1
        )

    html = html.replace(TITLE_PLACEHOLDER, metadata.get('title') or default_title)
    html = html.replace(HOMEPAGE_PLACEHOLDER, metadata.get('homepage') or '')

    # str.replace has no metacharacters, so '$' in the source needs no escaping
    html = html.replace(GAMEDAT_PLACEHOLDER, escape_source(source))

    return html


def _read_text(path: Path) -> str:
    # newline='' keeps CRLF sources byte-identical
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ExportError(f"File is not valid UTF-8 text: {path} ({e.reason} at byte {e.start})", path)


def export_game(
    paths: ExportPaths,
    options: Optional[ExportOptions] = None,
    default_title: str = DEFAULT_TITLE
) -> Path:
    """
    Export a game source to a standalone HTML file.

    Both inputs are checked before anything is written, so a failed export
    leaves no output behind. The output directory is created if needed and
    an existing output file is overwritten.

    Args:
        paths: Source, template and output locations
        options: Export switches
        default_title: Title used when the source declares none

    Returns:
        Path of the written HTML file

    Raises:
        SourceNotFoundError: If the game source doesn't exist
        TemplateNotFoundError: If the template doesn't exist
        ExportError: If an input is not valid UTF-8
        OSError: If reading or writing fails
    """
    if options is None:
        options = ExportOptions()

    if not paths.source.is_file():
        raise SourceNotFoundError(f"Source file not found: {paths.source}", paths.source)

    if not paths.template.is_file():
        raise TemplateNotFoundError(f"Template file not found: {paths.template}", paths.template)

    source = _read_text(paths.source)
    template = _read_text(paths.template)

    if options.target_level is not None:
        logger.info(f"Starting from level {options.target_level}")

    html = assemble(source, template, options=options, default_title=default_title)

    paths.output.parent.mkdir(parents=True, exist_ok=True)
    with open(paths.output, 'w', encoding='utf-8', newline='') as f:
        f.write(html)

    logger.debug(f"Wrote {len(html)} characters to {paths.output}")
    return paths.output
