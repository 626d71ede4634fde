"""
Live-reload dev server package for pzsdev.

Serves the PuzzleScript editor and keeps it in sync with the game source on
disk.
"""

from .bridge import BRIDGE_SCRIPT, inject_bridge
from .watcher import GameWatcher, ReloadState
from .dev_server import DevServer, DevHandler, export_level, run_server

__all__ = [
    'BRIDGE_SCRIPT',
    'inject_bridge',
    'GameWatcher',
    'ReloadState',
    'DevServer',
    'DevHandler',
    'export_level',
    'run_server',
]
