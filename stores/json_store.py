"""
Debounced JSON persistence.

Stores mutate their in-memory map and call mark_dirty(); the first dirty
signal arms a timer, later ones inside the window are coalesced, and the
timer thread writes one snapshot of the document. flush() writes
synchronously (shutdown, tests).

A write failure is logged and leaves the store dirty; the next mutation
re-arms the timer and retries. If the target directory cannot be created
at all the store runs memory-only.
"""
import json
import logging
import os
import threading
from pathlib import Path
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


def load_json_file(path: Optional[Path], fallback: Dict) -> Dict:
    """Read a JSON object from disk; any problem yields the fallback."""
    if path is None or not path.exists():
        return fallback
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"[STORE] Could not read {path}: {e}")
        return fallback
    return data if isinstance(data, dict) else fallback


class DebouncedJsonFile:
    """
    Coalescing writer for one JSON document.

    Args:
        path: Target file (None -> memory-only)
        snapshot: Callable returning a copy of the document to write; runs
            on the timer thread, so it takes the owner's lock itself
        delay_seconds: Debounce window
    """

    def __init__(self, path, snapshot: Callable[[], Dict], delay_seconds: float = 1.5, name: str = "STORE"):
        self.name = name
        self.delay_seconds = delay_seconds
        self._snapshot = snapshot
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._write_lock = threading.Lock()
        self.dirty = False
        self.writes = 0
        self.path = self._prepare(path)

    def _prepare(self, path) -> Optional[Path]:
        if not path:
            return None
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"[{self.name}] Cannot create {path.parent}: {e} - running memory-only")
            return None
        return path

    @property
    def memory_only(self) -> bool:
        return self.path is None

    def mark_dirty(self):
        """Schedule a flush unless one is already pending."""
        with self._lock:
            self.dirty = True
            if self.path is None or self._timer is not None:
                return
            self._timer = threading.Timer(self.delay_seconds, self._on_timer)
            self._timer.daemon = True
            self._timer.start()

    def _on_timer(self):
        with self._lock:
            self._timer = None
        self._write()

    def flush(self) -> bool:
        """Write now (cancelling any pending timer). Returns True on success."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        return self._write()

    def _write(self) -> bool:
        if self.path is None:
            return False

        # One writer at a time: timer thread and flush() share the .tmp path
        with self._write_lock:
            with self._lock:
                self.dirty = False
            document = self._snapshot()

            tmp_path = self.path.with_name(self.path.name + '.tmp')
            try:
                with open(tmp_path, 'w', encoding='utf-8') as f:
                    json.dump(document, f, indent=2)
                os.replace(tmp_path, self.path)
            except (OSError, TypeError, ValueError) as e:
                logger.error(f"[{self.name}] Failed to save {self.path}: {e}")
                with self._lock:
                    self.dirty = True
                return False

            self.writes += 1
        return True

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
