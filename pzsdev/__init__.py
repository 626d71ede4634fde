"""
pzsdev - PuzzleScript development tools

Exports a PuzzleScript game source into a standalone HTML file and runs a
live-reload dev server around the PuzzleScript editor.
"""

__version__ = "0.3.0"
