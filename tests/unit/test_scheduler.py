"""Tests for the in-process health ping scheduler."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from taskboard.core import scheduler as scheduler_module
from taskboard.core.scheduler import HEALTH_PING_JOB_ID, run_health_ping, scheduler, start_scheduler, stop_scheduler
from taskboard.jobs.health_ping import PingResult


@pytest.mark.unit
@pytest.mark.parametrize("interval", [None, 0, -5])
def test_disabled_without_interval(monkeypatch: pytest.MonkeyPatch, interval: int | None) -> None:
    monkeypatch.setattr(scheduler_module.settings, "health_ping_interval_minutes", None)

    assert start_scheduler(interval_minutes=interval) is False
    assert scheduler.get_job(HEALTH_PING_JOB_ID) is None


@pytest.mark.unit
async def test_start_registers_job_and_stop_shuts_down() -> None:
    try:
        assert start_scheduler(interval_minutes=5) is True

        job = scheduler.get_job(HEALTH_PING_JOB_ID)
        assert job is not None
        assert job.trigger.interval.total_seconds() == 300
        assert scheduler.running
    finally:
        stop_scheduler()
        scheduler.remove_all_jobs()

    # AsyncIOScheduler applies the shutdown on the next loop iteration
    await asyncio.sleep(0)
    assert not scheduler.running


@pytest.mark.unit
async def test_run_health_ping_swallows_failed_result() -> None:
    failed = PingResult(endpoint="/health", success=False, error="connection refused")

    with patch("taskboard.core.scheduler.send_random_request", new=AsyncMock(return_value=failed)) as mock_send:
        await run_health_ping()

    mock_send.assert_awaited_once()
