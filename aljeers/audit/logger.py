"""Access log: append-only JSON Lines with size rotation and a hash chain."""

from __future__ import annotations

import fcntl
import hashlib
import json
import os
from dataclasses import dataclass
from pathlib import Path

from aljeers.models import AccessEvent

DEFAULT_MAX_BYTES = 10_485_760
DEFAULT_BACKUP_COUNT = 5

_TAIL_CHUNK = 4096


@dataclass
class ChainValidationResult:
    valid: bool
    broken_at_line: int | None = None


def _chain_hash(prev_line: bytes | None) -> str | None:
    return hashlib.sha256(prev_line).hexdigest() if prev_line is not None else None


def _read_last_line(path: Path) -> bytes | None:
    """Return the last non-empty line of *path*, reading backwards from the end."""
    try:
        f = open(path, "rb")
    except FileNotFoundError:
        return None
    with f:
        pos = f.seek(0, os.SEEK_END)
        tail = b""
        while pos > 0:
            step = min(_TAIL_CHUNK, pos)
            pos -= step
            f.seek(pos)
            tail = f.read(step) + tail
            if b"\n" in tail.rstrip(b"\n"):
                break
    tail = tail.rstrip(b"\n")
    if not tail:
        return None
    return tail.rsplit(b"\n", 1)[-1]


def validate_access_chain(log_path: Path) -> ChainValidationResult:
    """Check that every entry's prev_hash matches the SHA-256 of the line before it.

    A line that is not a JSON object (blank, truncated, undecodable) breaks
    the chain at that line.
    """
    prev_line: bytes | None = None
    for lineno, raw in enumerate(log_path.read_bytes().splitlines(), start=1):
        try:
            entry = json.loads(raw.decode())
        except (UnicodeDecodeError, json.JSONDecodeError):
            return ChainValidationResult(valid=False, broken_at_line=lineno)
        if not isinstance(entry, dict) or entry.get("prev_hash") != _chain_hash(prev_line):
            return ChainValidationResult(valid=False, broken_at_line=lineno)
        prev_line = raw
    return ChainValidationResult(valid=True)


class AccessLogger:
    """Writes one JSON line per AccessEvent, chaining each line to the previous one.

    The previous line is read from the file under the lock on every write, so
    several loggers (one per worker process, say) can share one file without
    breaking the chain.
    """

    def __init__(
        self,
        log_path: str,
        max_bytes: int = DEFAULT_MAX_BYTES,
        backup_count: int = DEFAULT_BACKUP_COUNT,
    ) -> None:
        self.log_path = Path(log_path)
        self._max_bytes = max_bytes
        self._backup_count = backup_count

    @classmethod
    def from_env(cls, log_path: str) -> AccessLogger:
        max_bytes = int(os.environ.get("ALJEERS_ACCESS_LOG_MAX_BYTES", str(DEFAULT_MAX_BYTES)))
        backup_count = int(
            os.environ.get("ALJEERS_ACCESS_LOG_BACKUP_COUNT", str(DEFAULT_BACKUP_COUNT)),
        )
        return cls(log_path=log_path, max_bytes=max_bytes, backup_count=backup_count)

    def _backup_path(self, index: int) -> Path:
        return self.log_path.with_name(f"{self.log_path.name}.{index}")

    def _maybe_rotate(self) -> None:
        if not self.log_path.exists() or self.log_path.stat().st_size < self._max_bytes:
            return

        self._backup_path(self._backup_count).unlink(missing_ok=True)
        for i in range(self._backup_count - 1, 0, -1):
            if self._backup_path(i).exists():
                self._backup_path(i).rename(self._backup_path(i + 1))
        self.log_path.rename(self._backup_path(1))

    def log(self, event: AccessEvent) -> None:
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

        lock_file = self.log_path.with_name(f".{self.log_path.name}.lock")
        with open(lock_file, "w") as lf:
            fcntl.flock(lf, fcntl.LOCK_EX)
            try:
                # A rotated file starts a fresh chain
                self._maybe_rotate()
                data = event.model_dump(mode="json")
                data["prev_hash"] = _chain_hash(_read_last_line(self.log_path))
                line = json.dumps(data, separators=(",", ":"))
                with open(self.log_path, "a") as f:
                    f.write(line + "\n")
            finally:
                fcntl.flock(lf, fcntl.LOCK_UN)
