"""Tests for cd_common.id_generator and cd_common.datetime_utils."""

from datetime import UTC, datetime, timedelta

import pytest

from src.cd_common.datetime_utils import cutoff, utc_now
from src.cd_common.id_generator import SnowflakeIdGenerator, generate_id


class TestSnowflakeIdGenerator:
    def test_returns_str(self) -> None:
        gen = SnowflakeIdGenerator(worker_id=1)
        assert isinstance(gen.next_id(), str)

    def test_unique_ids(self) -> None:
        gen = SnowflakeIdGenerator(worker_id=1)
        ids = {gen.next_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_monotonically_increasing(self) -> None:
        gen = SnowflakeIdGenerator(worker_id=1)
        prev = int(gen.next_id())
        for _ in range(100):
            current = int(gen.next_id())
            assert current > prev
            prev = current

    def test_worker_id_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            SnowflakeIdGenerator(worker_id=1024)

    def test_module_level_helper(self) -> None:
        assert generate_id() != generate_id()


class TestUtcNow:
    def test_returns_aware_datetime(self) -> None:
        now = utc_now()
        assert isinstance(now, datetime)
        assert now.tzinfo is not None

    def test_is_utc(self) -> None:
        assert utc_now().utcoffset() == timedelta(0)


class TestCutoff:
    def test_subtracts_seconds(self) -> None:
        now = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
        assert cutoff(now, 900) == datetime(2026, 3, 1, 11, 45, tzinfo=UTC)
