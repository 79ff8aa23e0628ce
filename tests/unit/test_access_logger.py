"""Tests for the access logger."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pytest

from aljeers.audit.logger import AccessLogger, ChainValidationResult, validate_access_chain
from aljeers.models import AccessEventType
from tests.conftest import make_access_event


def test_log_appends_json_line(access_log_path: Path) -> None:
    logger = AccessLogger(log_path=str(access_log_path))
    logger.log(make_access_event(status_code=200))

    lines = access_log_path.read_text().splitlines()
    assert len(lines) == 1
    parsed = json.loads(lines[0])
    assert parsed["event_type"] == "request_wrapped"
    assert parsed["status_code"] == 200
    assert parsed["prev_hash"] is None


def test_log_creates_parent_directory(access_log_path: Path) -> None:
    assert not access_log_path.parent.exists()
    AccessLogger(log_path=str(access_log_path)).log(make_access_event())
    assert access_log_path.exists()


def test_entries_are_hash_chained(access_log_path: Path) -> None:
    logger = AccessLogger(log_path=str(access_log_path))
    logger.log(make_access_event(path="/a"))
    logger.log(make_access_event(path="/b"))

    first, second = access_log_path.read_text().splitlines()
    assert json.loads(second)["prev_hash"] == hashlib.sha256(first.encode()).hexdigest()
    assert validate_access_chain(access_log_path) == ChainValidationResult(valid=True)


def test_chain_continues_across_instances(access_log_path: Path) -> None:
    AccessLogger(log_path=str(access_log_path)).log(make_access_event(path="/a"))
    AccessLogger(log_path=str(access_log_path)).log(make_access_event(path="/b"))
    assert validate_access_chain(access_log_path).valid


def test_tampering_breaks_chain(access_log_path: Path) -> None:
    logger = AccessLogger(log_path=str(access_log_path))
    for i in range(3):
        logger.log(make_access_event(path=f"/{i}"))

    lines = access_log_path.read_text().splitlines()
    lines[1] = lines[1].replace('"/1"', '"/tampered"')
    access_log_path.write_text("\n".join(lines) + "\n")

    result = validate_access_chain(access_log_path)
    assert result.valid is False
    assert result.broken_at_line == 3


def test_empty_log_is_valid(tmp_path: Path) -> None:
    log_file = tmp_path / "access.jsonl"
    log_file.write_text("")
    assert validate_access_chain(log_file).valid


def test_rotation_moves_full_log_aside(access_log_path: Path) -> None:
    logger = AccessLogger(log_path=str(access_log_path), max_bytes=1, backup_count=2)
    logger.log(make_access_event(path="/first"))
    logger.log(make_access_event(path="/second"))

    backup = access_log_path.with_name("access.jsonl.1")
    assert backup.exists()
    assert json.loads(backup.read_text())["path"] == "/first"
    current = json.loads(access_log_path.read_text())
    assert current["path"] == "/second"
    assert current["prev_hash"] is None


def test_rotation_drops_oldest_backup(access_log_path: Path) -> None:
    logger = AccessLogger(log_path=str(access_log_path), max_bytes=1, backup_count=2)
    for i in range(4):
        logger.log(make_access_event(path=f"/{i}"))

    assert json.loads(access_log_path.with_name("access.jsonl.1").read_text())["path"] == "/2"
    assert json.loads(access_log_path.with_name("access.jsonl.2").read_text())["path"] == "/1"
    assert not access_log_path.with_name("access.jsonl.3").exists()


def test_from_env_reads_limits(access_log_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALJEERS_ACCESS_LOG_MAX_BYTES", "1")
    monkeypatch.setenv("ALJEERS_ACCESS_LOG_BACKUP_COUNT", "1")
    logger = AccessLogger.from_env(str(access_log_path))
    logger.log(make_access_event(event_type=AccessEventType.RESPONSE_ENVELOPED))
    logger.log(make_access_event())
    assert access_log_path.with_name("access.jsonl.1").exists()


def test_loggers_sharing_a_file_keep_one_chain(access_log_path: Path) -> None:
    first = AccessLogger(log_path=str(access_log_path))
    second = AccessLogger(log_path=str(access_log_path))
    first.log(make_access_event(path="/a"))
    second.log(make_access_event(path="/b"))
    first.log(make_access_event(path="/c"))

    assert validate_access_chain(access_log_path) == ChainValidationResult(valid=True)
    paths = [json.loads(line)["path"] for line in access_log_path.read_text().splitlines()]
    assert paths == ["/a", "/b", "/c"]


def test_chain_follows_lines_longer_than_read_chunk(access_log_path: Path) -> None:
    logger = AccessLogger(log_path=str(access_log_path))
    logger.log(make_access_event(details={"note": "x" * 10_000}))
    logger.log(make_access_event())
    assert validate_access_chain(access_log_path).valid


@pytest.mark.parametrize(
    "bad_line",
    [b'{"truncated":', b"", b"\xff\xfe", b"[1, 2]"],
)
def test_malformed_line_breaks_chain(access_log_path: Path, bad_line: bytes) -> None:
    logger = AccessLogger(log_path=str(access_log_path))
    logger.log(make_access_event())
    with open(access_log_path, "ab") as f:
        f.write(bad_line + b"\n")

    assert validate_access_chain(access_log_path) == ChainValidationResult(
        valid=False, broken_at_line=2,
    )
