"""
Shared pytest fixtures and utilities for the pzsdev test suite.
"""

import logging
from pathlib import Path
from typing import Dict, Any, Callable, Optional

import pytest
import yaml


SAMPLE_SOURCE = """title Block Pusher
author Test Author
homepage www.example.com

========
OBJECTS
========

Background
black

Player
blue

=======
LEGEND
=======

. = Background
P = Player

=======
LEVELS
=======

MESSAGE Level 1

P..
...

MESSAGE Level 2

.P.
...

MESSAGE Level 10

..P
...
"""

SAMPLE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<title>__GAMETITLE__</title>
<style>
body{background-color:black;/*Don't edit this line*/color:lightblue;/*Don't edit this line*/}
#gameCanvas{position:absolute;display:none;width:100%;}
#video{position:absolute;width:100%;}
#playbutton{position:absolute;cursor:pointer;}
</style>
</head>
<body>
<img id="playbutton" src="data:image/png;base64,AAAA">
<video id="video" autoplay>
<source src="intro.mp4" type="video/mp4">
</video>
<script>var video=document.getElementById("video");video.onended=function(){startGame();};</script>
<canvas id="gameCanvas"></canvas>
<div class="footer">
<a href="https://armor.ag/MoreGames">Armor Games</a>
</div>
<a href="__HOMEPAGE__">homepage</a>
<script>var sourceCode=__GAMEDAT__;compile(["restart"],sourceCode);</script>
</body>
</html>
"""

SAMPLE_EDITOR = """<!DOCTYPE html>
<html>
<head><title>PuzzleScript Editor</title></head>
<body>
<textarea id="code"></textarea>
</body>
</html>
"""


@pytest.fixture(autouse=True)
def restore_root_logger():
    """
    Undo setup_logging() side effects between tests.
    """
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def project_root() -> Path:
    """
    Repository root path.
    """
    return Path(__file__).resolve().parent.parent


@pytest.fixture
def sample_source() -> str:
    return SAMPLE_SOURCE


@pytest.fixture
def sample_template() -> str:
    return SAMPLE_TEMPLATE


@pytest.fixture
def game_project(tmp_path: Path) -> Path:
    """
    A project tree laid out the way the default config expects it.

    game/game.pzs, puzzlescript/standalone_inlined.txt, puzzlescript/editor.html,
    puzzlescript/js/engine.js and a pzsdev.yaml that turns console logging off.
    """
    root = tmp_path / "project"
    (root / "game").mkdir(parents=True)
    (root / "puzzlescript" / "js").mkdir(parents=True)

    (root / "game" / "game.pzs").write_text(SAMPLE_SOURCE, encoding="utf-8")
    (root / "puzzlescript" / "standalone_inlined.txt").write_text(SAMPLE_TEMPLATE, encoding="utf-8")
    (root / "puzzlescript" / "editor.html").write_text(SAMPLE_EDITOR, encoding="utf-8")
    (root / "puzzlescript" / "js" / "engine.js").write_text("var engine = 1;\n", encoding="utf-8")
    (root / "pzsdev.yaml").write_text(
        yaml.safe_dump({"logging": {"console": False}}), encoding="utf-8"
    )
    return root


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[[Dict[str, Any]], Path]:
    """
    Create a pzsdev.yaml in a temp directory.

    Usage:
        path = make_config({"server": {"port": 8080}})
    """

    def _builder(overrides: Optional[Dict[str, Any]] = None) -> Path:
        base = {"logging": {"console": False}}
        if overrides:
            base = merge_dicts(base, overrides)

        cfg_path = tmp_path / "pzsdev.yaml"
        cfg_path.write_text(yaml.safe_dump(base))
        return cfg_path

    return _builder


def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow+deep merge helper for fixture config dictionaries.
    """
    result: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result
