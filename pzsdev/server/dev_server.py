#!/usr/bin/env python3
"""
pzsdev dev server: the PuzzleScript editor with live reload.

Serves the PuzzleScript directory, with the editor page patched to include
the bridge script. The game source is served live from disk at /game.pzs and
watched for changes; every change is pushed to open editors over a
Server-Sent Events stream at /__reload, and the bridge reloads the game.

Endpoints:
    GET  /, /index.html   editor page with the bridge injected
    GET  /game.pzs        current game source
    GET  /__reload        SSE stream of "reload-game" events
    POST /game.pzs        save the request body as the game source
    POST /play?level=N    export the request body starting at level N and
                          open the standalone build in the browser

Usage:
    pzsdev-serve [--config pzsdev.yaml] [--port 3000] [--no-browser]
"""

import argparse
import json
import logging
import os
import subprocess
import sys
import tempfile
import threading
import webbrowser
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse, parse_qs

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from pzsdev import __version__
from pzsdev.cli import load_validated_config, setup_logging
from pzsdev.config.loader import ConfigError
from pzsdev.config.validator import ValidationError
from pzsdev.server.bridge import inject_bridge
from pzsdev.server.watcher import GameWatcher, ReloadState

logger = logging.getLogger(__name__)

RELOAD_PATH = "/__reload"
GAME_PATH = "/game.pzs"
PLAY_PATH = "/play"
RELOAD_EVENT = "reload-game"
PING_INTERVAL = 15.0


class DevServer(ThreadingHTTPServer):
    """HTTP server carrying the config, reload state and export lock."""

    def __init__(self, server_address, config: dict, handler_class=None):
        self.config = config
        self.state = ReloadState()
        # /play requests all write the same output file
        self.play_lock = threading.Lock()
        super().__init__(server_address, handler_class or DevHandler)

    @property
    def game_file(self) -> Path:
        return Path(self.config['paths']['source'])

    @property
    def puzzlescript_dir(self) -> Path:
        return Path(self.config['paths']['puzzlescript'])

    @property
    def editor_file(self) -> Path:
        return self.puzzlescript_dir / self.config['paths']['editor']


class DevHandler(SimpleHTTPRequestHandler):
    """Editor page, live game source, reload stream and static files."""

    server: DevServer  # type: ignore[assignment]

    def __init__(self, *args, **kwargs):
        # args are (request, client_address, server)
        super().__init__(*args, directory=str(args[2].puzzlescript_dir), **kwargs)

    def do_GET(self):
        parsed = urlparse(self.path)

        if parsed.path == RELOAD_PATH:
            self._serve_reload_stream()
            return

        if parsed.path in ("/", "/index.html"):
            self._serve_editor()
            return

        if parsed.path == GAME_PATH:
            self._serve_game()
            return

        super().do_GET()

    def do_POST(self):
        parsed = urlparse(self.path)
        # Drain the body before any reply so the socket closes cleanly
        try:
            body = self._read_body()
        except ValueError:
            self.close_connection = True
            self.send_error(400, "Invalid Content-Length")
            return

        if parsed.path == GAME_PATH:
            self._save_game(body)
        elif parsed.path == PLAY_PATH:
            self._play(parse_qs(parsed.query), body)
        else:
            self.send_error(404, f"Not found: {parsed.path}")

    # ------------------------------------------------------------------
    # GET handlers
    # ------------------------------------------------------------------

    def _serve_editor(self):
        editor = self.server.editor_file
        if not editor.is_file():
            self.send_error(404, f"Editor page not found: {editor.name}")
            return

        html = inject_bridge(editor.read_text(encoding="utf-8"))
        self._send_content(200, html.encode("utf-8"), "text/html; charset=utf-8")

    def _serve_game(self):
        game_file = self.server.game_file
        try:
            content = game_file.read_bytes()
        except FileNotFoundError:
            self.send_error(404, f"Game source not found: {game_file.name}")
            return
        except OSError as e:
            self.send_error(500, str(e))
            return

        self._send_content(200, content, "text/plain; charset=utf-8")

    def _serve_reload_stream(self):
        state = self.server.state
        # Taken before the client hears back, so no change can slip between
        last_id = state.change_id

        self.send_response(200)
        self.send_header("Content-Type", "text/event-stream")
        self.send_header("Connection", "keep-alive")
        self.end_headers()
        self.close_connection = True

        try:
            self.wfile.write(b": connected\n\n")
            self.wfile.flush()
        except (BrokenPipeError, ConnectionResetError):
            return

        logger.info("Browser connected")
        while True:
            change_id = state.wait_for_change(last_id, timeout=PING_INTERVAL)
            if state.closed:
                break
            if change_id is None:
                payload = b": ping\n\n"
            else:
                last_id = change_id
                payload = f"event: {RELOAD_EVENT}\ndata: {change_id}\n\n".encode("utf-8")
            try:
                self.wfile.write(payload)
                self.wfile.flush()
            except (BrokenPipeError, ConnectionResetError):
                break
        logger.debug("Reload stream closed")

    # ------------------------------------------------------------------
    # POST handlers
    # ------------------------------------------------------------------

    def _read_body(self) -> bytes:
        """Read the request body; raises ValueError on a bad Content-Length."""
        length = int(self.headers.get("Content-Length", 0) or 0)
        return self.rfile.read(length) if length > 0 else b""

    def _decode_body(self, body: bytes) -> Optional[str]:
        """Request body as text, or None after sending a 400."""
        if not body:
            self.send_error(400, "Empty body")
            return None
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError:
            self.send_error(400, "Body must be UTF-8 text")
            return None

    def _save_game(self, body: bytes):
        text = self._decode_body(body)
        if text is None:
            return

        game_file = self.server.game_file
        try:
            game_file.parent.mkdir(parents=True, exist_ok=True)
            with open(game_file, "w", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as e:
            logger.error(f"Could not save {game_file}: {e}")
            self.send_error(500, str(e))
            return

        logger.info(f"Game saved ({len(text)} characters)")
        self._send_content(200, b"ok", "text/plain; charset=utf-8")

    def _play(self, query: dict, body: bytes):
        level = query.get("level", [""])[0]
        if not level.isdecimal() or int(level) < 1:
            self.send_error(400, "level must be a positive integer")
            return

        text = self._decode_body(body)
        if text is None:
            return

        with self.server.play_lock:
            ok, message = export_level(self.server.config, text, int(level))

        if not ok:
            self._send_json(500, {"ok": False, "error": message})
            return

        webbrowser.open(Path(message).as_uri())
        self._send_json(200, {"ok": True, "output": message})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _send_content(self, status: int, content: bytes, content_type: str):
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(content)))
        self.end_headers()
        self.wfile.write(content)

    def _send_json(self, status: int, payload: dict):
        content = json.dumps(payload).encode("utf-8")
        self._send_content(status, content, "application/json")

    def end_headers(self):
        # The editor must never see a stale game.pzs or editor page
        self.send_header("Cache-Control", "no-cache, no-store, must-revalidate")
        super().end_headers()

    def log_message(self, format, *args):
        logger.debug(f"{self.address_string()} {format % args}")


def export_level(config: dict, source_text: str, level: int):
    """
    Export an edited source starting at a level, in a subprocess.

    The text is written to a temporary file that is handed to pzsdev-export
    with --source and --level, then removed.

    Returns:
        (True, output path) on success, (False, error message) on failure
    """
    fd, tmp_name = tempfile.mkstemp(suffix=".pzs", prefix="pzsdev-")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(source_text)

        cmd = [sys.executable, "-m", "pzsdev.cli", f"--source={tmp_name}", f"--level={level}"]
        if config.get('config_file'):
            cmd += ["--config", str(config['config_file'])]

        logger.info(f"Exporting from level {level}")
        result = subprocess.run(
            cmd,
            cwd=str(config.get('root') or Path.cwd()),
            capture_output=True,
            text=True,
        )
    finally:
        try:
            os.unlink(tmp_name)
        except OSError as e:
            logger.warning(f"Could not remove {tmp_name}: {e}")

    if result.returncode != 0:
        error = result.stderr.strip() or f"export exited with status {result.returncode}"
        logger.error(f"Export failed: {error}")
        return False, error

    return True, str(Path(config['paths']['output']))


def _print_banner(console: Console, url: str, config: dict) -> None:
    lines = [
        f"Open:   {url}",
        f"Watch:  {config['paths']['source']}",
        f"Serve:  {config['paths']['puzzlescript']}",
        "",
        "Edit game.pzs -> save -> the editor reloads the game.",
    ]
    console.print(Panel(
        Text("\n".join(lines)),
        title=f"pzsdev dev server v{__version__}",
        box=box.DOUBLE,
        border_style="cyan",
        expand=False,
    ))


def run_server(config: dict, console: Optional[Console] = None) -> int:
    """
    Serve until interrupted.

    Returns:
        Exit code
    """
    console = console or Console()
    server_config = config['server']
    puzzlescript_dir = Path(config['paths']['puzzlescript'])

    if not puzzlescript_dir.is_dir():
        print(f"Error: PuzzleScript directory not found: {puzzlescript_dir}", file=sys.stderr)
        return 1

    try:
        httpd = DevServer((server_config['host'], server_config['port']), config)
    except OSError as e:
        print(f"Error: Could not start server on port {server_config['port']}: {e}", file=sys.stderr)
        return 1

    watcher = GameWatcher(
        Path(config['paths']['source']),
        httpd.state,
        interval=server_config['poll_interval'],
    )
    watcher.start()

    host = server_config['host']
    display_host = "localhost" if host in ("0.0.0.0", "127.0.0.1", "") else host
    url = f"http://{display_host}:{httpd.server_port}"
    _print_banner(console, url, config)

    if server_config.get('open_browser', True):
        timer = threading.Timer(0.5, webbrowser.open, args=(url,))
        timer.daemon = True
        timer.start()

    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        console.print("\nShutting down...")
    finally:
        watcher.stop()
        httpd.state.close()
        httpd.server_close()

    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pzsdev-serve',
        description='PuzzleScript editor with live reload of the game source',
    )
    parser.add_argument('--config', type=Path, metavar='PATH',
                        help='Path to pzsdev.yaml (default: ./pzsdev.yaml if present)')
    parser.add_argument('--host', metavar='HOST', help='Bind address. Overrides config.')
    parser.add_argument('--port', type=int, metavar='PORT', help='HTTP port. Overrides config.')
    parser.add_argument('--no-browser', action='store_true',
                        help='Do not open the editor in a browser')
    return parser


def main(argv: Optional[list] = None) -> int:
    args = create_parser().parse_args(argv)

    try:
        config = load_validated_config(args.config)
    except (ConfigError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if args.host:
        config['server']['host'] = args.host
    if args.port is not None:
        config['server']['port'] = args.port
    if args.no_browser:
        config['server']['open_browser'] = False

    setup_logging(config)
    return run_server(config)


if __name__ == "__main__":
    sys.exit(main())
