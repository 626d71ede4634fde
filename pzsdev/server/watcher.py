"""Polling file watcher that drives browser reloads."""

import logging
import threading
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


class ReloadState:
    """Change counter that SSE handlers wait on."""

    def __init__(self) -> None:
        self.cond = threading.Condition()
        self.change_id = 0
        self.closed = False

    def bump(self) -> int:
        with self.cond:
            self.change_id += 1
            self.cond.notify_all()
            return self.change_id

    def close(self) -> None:
        """Wake every waiter so open streams can end."""
        with self.cond:
            self.closed = True
            self.cond.notify_all()

    def wait_for_change(self, last_id: int, timeout: float) -> Optional[int]:
        """
        Block until the change id moves past last_id.

        Returns:
            The new change id, or None on timeout or once closed
        """
        with self.cond:
            changed = self.cond.wait_for(
                lambda: self.closed or self.change_id != last_id,
                timeout=timeout,
            )
            if not changed or self.closed:
                return None
            return self.change_id


def _fingerprint(path: Path) -> Optional[Tuple[int, int]]:
    try:
        st = path.stat()
    except FileNotFoundError:
        return None
    return (st.st_mtime_ns, st.st_size)


class GameWatcher:
    """
    Watches a single file by polling its (mtime, size).

    Any difference from the previous poll, including the file appearing or
    disappearing, bumps the reload state. The state observed at start() is
    the baseline and does not trigger a reload.
    """

    def __init__(self, path: Path, state: ReloadState, interval: float = 0.5):
        self.path = Path(path)
        self.state = state
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last = None

    def start(self) -> None:
        try:
            self._last = _fingerprint(self.path)
        except OSError as e:
            logger.warning(f"Could not stat {self.path}: {e}")
            self._last = None
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="pzsdev-watcher", daemon=True)
        self._thread.start()
        logger.info(f"Watching {self.path} for changes")

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.interval * 4)
            self._thread = None

    def poll(self) -> bool:
        """Check the file once; returns True if a change was signalled."""
        current = _fingerprint(self.path)
        if current == self._last:
            return False
        self._last = current
        logger.info(f"File changed: {self.path}")
        self.state.bump()
        return True

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self.poll()
            except OSError as e:
                logger.warning(f"Could not stat {self.path}: {e}")
