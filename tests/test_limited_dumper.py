"""Unit tests for the quota-limited dumper."""

import os
import threading
from pathlib import Path

import pytest

from payload_dumper.adapters.dump import DISCARDED_ID, QuotaLimitedDumper, QuotaSnapshot


def test_starts_with_exhausted_quota(dump_dir: str, clock) -> None:
    dumper = QuotaLimitedDumper("dump-", directory=dump_dir, clock=clock)

    assert dumper.dump(b"payload").identifier == DISCARDED_ID
    assert dumper.snapshot() == QuotaSnapshot(capacity=0, seconds=0)
    assert os.listdir(dump_dir) == []


def test_exactly_capacity_dumps_succeed(dump_dir: str, clock) -> None:
    dumper = QuotaLimitedDumper("dump-", directory=dump_dir, clock=clock)
    dumper.reset(3, 60)

    results = [dumper.dump(f"p{i}".encode()) for i in range(4)]

    assert [r.persisted for r in results] == [True, True, True, False]
    assert len({r.path for r in results[:3]}) == 3
    assert dumper.snapshot().capacity == 0


def test_dump_round_trip_and_prefix(dump_dir: str, clock) -> None:
    dumper = QuotaLimitedDumper("req-body-", directory=dump_dir, clock=clock)
    dumper.reset(1, 60)
    payload = bytes(range(256)) * 8

    result = dumper.dump(payload)

    assert result.persisted is True
    assert os.path.dirname(result.path) == dump_dir
    assert os.path.basename(result.path).startswith("req-body-")
    assert Path(result.path).read_bytes() == payload


def test_expired_quota_discards_even_with_capacity_left(dump_dir: str, clock) -> None:
    dumper = QuotaLimitedDumper("dump-", directory=dump_dir, clock=clock)
    dumper.reset(5, 10)

    assert dumper.dump(b"a").persisted is True

    clock.advance(10)
    assert dumper.dump(b"b").persisted is True

    clock.advance(0.5)
    assert dumper.dump(b"c").persisted is False
    # A refused dump does not consume quota.
    assert dumper.snapshot().capacity == 3


def test_reset_replaces_previous_quota(dump_dir: str, clock) -> None:
    dumper = QuotaLimitedDumper("dump-", directory=dump_dir, clock=clock)
    dumper.reset(1, 10)
    dumper.dump(b"a")
    assert dumper.dump(b"b").persisted is False

    dumper.reset(2, 30)

    assert dumper.snapshot() == QuotaSnapshot(capacity=2, seconds=30)
    assert dumper.dump(b"c").persisted is True


def test_snapshot_reports_seconds_left_and_never_mutates(clock) -> None:
    dumper = QuotaLimitedDumper("dump-", clock=clock)
    dumper.reset(4, 100)

    clock.advance(30.7)
    first = dumper.snapshot()
    second = dumper.snapshot()

    assert first == second == QuotaSnapshot(capacity=4, seconds=69)


def test_snapshot_seconds_go_negative_after_expiry(clock) -> None:
    dumper = QuotaLimitedDumper("dump-", clock=clock)
    dumper.reset(1, 5)

    clock.advance(8)

    assert dumper.snapshot().seconds == -3


def test_reset_rejects_negative_capacity(clock) -> None:
    dumper = QuotaLimitedDumper("dump-", clock=clock)

    with pytest.raises(ValueError):
        dumper.reset(-1, 10)


def test_failed_write_still_consumes_quota(tmp_path, clock) -> None:
    directory = tmp_path / "missing"
    dumper = QuotaLimitedDumper("dump-", directory=str(directory), clock=clock)
    dumper.reset(2, 60)

    assert dumper.dump(b"lost").persisted is False
    assert dumper.snapshot().capacity == 1

    directory.mkdir()
    assert dumper.dump(b"kept").persisted is True
    assert dumper.dump(b"over").persisted is False


def test_short_write_removes_partial_file(dump_dir: str, clock, monkeypatch: pytest.MonkeyPatch) -> None:
    from payload_dumper.adapters.dump import base

    dumper = QuotaLimitedDumper("dump-", directory=dump_dir, clock=clock)
    dumper.reset(2, 60)

    monkeypatch.setattr(base.os, "write", lambda fd, data: 0)
    result = dumper.dump(b"payload")
    monkeypatch.undo()

    assert result.persisted is False
    assert os.listdir(dump_dir) == []
    assert dumper.snapshot().capacity == 1


def test_concurrent_dumps_never_exceed_quota(dump_dir: str) -> None:
    dumper = QuotaLimitedDumper("dump-", directory=dump_dir)
    dumper.reset(5, 3600)
    workers = 20
    barrier = threading.Barrier(workers)
    persisted: list[bool] = []
    lock = threading.Lock()

    def _writer(idx: int) -> None:
        barrier.wait()
        ok = dumper.dump(f"payload-{idx}".encode()).persisted
        with lock:
            persisted.append(ok)

    threads = [threading.Thread(target=_writer, args=(i,)) for i in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert persisted.count(True) == 5
    assert len(os.listdir(dump_dir)) == 5
    assert dumper.snapshot().capacity == 0


def test_failed_reset_leaves_quota_unchanged(clock) -> None:
    dumper = QuotaLimitedDumper("dump-", clock=clock)
    dumper.reset(3, 100)

    with pytest.raises(OverflowError):
        dumper.reset(9, 10**400)

    assert dumper.snapshot() == QuotaSnapshot(capacity=3, seconds=100)


def test_non_bytes_payload_rejected_without_consuming_quota(dump_dir: str, clock) -> None:
    dumper = QuotaLimitedDumper("dump-", directory=dump_dir, clock=clock)
    dumper.reset(1, 60)

    with pytest.raises(TypeError):
        dumper.dump("not bytes")  # type: ignore[arg-type]

    assert os.listdir(dump_dir) == []
    assert dumper.snapshot().capacity == 1
    assert dumper.dump(memoryview(b"ok")).persisted is True
