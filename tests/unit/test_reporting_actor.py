"""Unit tests for the report generation Dramatiq actor."""

from __future__ import annotations

import asyncio
import typing as typ
from pathlib import Path

import dramatiq
import pytest
from dramatiq.brokers.stub import StubBroker

from punchclock.reporting import (
    FilesystemArtifactSink,
    ReportService,
    ReportStatus,
    actor,
)
from tests.helpers import RecordingQueue, make_user

if typ.TYPE_CHECKING:
    from punchclock.common.db import SessionFactory


@pytest.fixture
def report_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> typ.Iterator[Path]:
    """Point the actor's artifact directory at a temp path."""
    path = tmp_path / "artifacts"
    monkeypatch.setenv("PUNCHCLOCK_REPORT_DIR", str(path))
    actor.reset_caches()
    yield path
    actor.reset_caches()


@pytest.fixture
def stub_broker() -> typ.Iterator[StubBroker]:
    """Return the stub broker installed for tests, emptied afterwards."""
    broker = dramatiq.get_broker()
    assert isinstance(broker, StubBroker), "tests must run against a StubBroker"
    broker.flush_all()
    yield broker
    broker.flush_all()


def _queued_report(sync_session_factory: SessionFactory) -> tuple[int, str]:
    async def create() -> tuple[int, str]:
        user = await make_user(sync_session_factory)
        service = ReportService(
            sync_session_factory,
            sink=FilesystemArtifactSink(Path("unused")),
            enqueue=RecordingQueue(),
        )
        report = await service.create(user.id, "2025-09-01", "2025-09-30")
        return report.id, report.process_id

    return asyncio.run(create())


def _status(sync_session_factory: SessionFactory, process_id: str) -> ReportStatus:
    service = ReportService(
        sync_session_factory,
        sink=FilesystemArtifactSink(Path("unused")),
        enqueue=RecordingQueue(),
    )
    return asyncio.run(service.get_status(process_id)).status


class TestGenerateReportJob:
    """Tests for generate_report_job and enqueue_report."""

    def test_actor_uses_reports_queue_without_retries(self) -> None:
        """Report jobs run on their own queue and are never retried."""
        assert actor.generate_report_job.queue_name == actor.REPORTS_QUEUE == "reports"
        assert actor.generate_report_job.options["max_retries"] == 0

    def test_enqueue_report_sends_to_reports_queue(
        self, stub_broker: StubBroker, database_url: str
    ) -> None:
        """The enqueue callable publishes one message per report id."""
        send = actor.enqueue_report(database_url)

        send(42)

        queue = stub_broker.queues[actor.REPORTS_QUEUE]
        assert queue.qsize() == 1

    def test_direct_call_completes_report(
        self,
        database_url: str,
        sync_session_factory: SessionFactory,
        report_dir: Path,
    ) -> None:
        """Calling the actor inline runs the executor to completion."""
        report_id, process_id = _queued_report(sync_session_factory)

        status = actor.generate_report_job(database_url, report_id)

        assert status == "completed"
        assert _status(sync_session_factory, process_id) is ReportStatus.COMPLETED
        (artifact,) = report_dir.iterdir()
        assert artifact.name.startswith(f"report_{process_id}_")

    def test_worker_processes_enqueued_report(
        self,
        stub_broker: StubBroker,
        database_url: str,
        sync_session_factory: SessionFactory,
        report_dir: Path,
    ) -> None:
        """A Dramatiq worker picks the job up and completes the report."""
        report_id, process_id = _queued_report(sync_session_factory)
        actor.enqueue_report(database_url)(report_id)

        worker = dramatiq.Worker(stub_broker, worker_timeout=100)
        worker.start()
        try:
            stub_broker.join(actor.REPORTS_QUEUE)
            worker.join()
        finally:
            worker.stop()

        assert _status(sync_session_factory, process_id) is ReportStatus.COMPLETED
        assert len(list(report_dir.iterdir())) == 1
