from __future__ import annotations

import threading

import pytest
from fastapi.testclient import TestClient

from shiptrack.api import create_app
from shiptrack.domain.reconciliation import ReconciliationSummary


class StubJob:
    def __init__(self, summary: ReconciliationSummary) -> None:
        self.summary = summary
        self.runs = 0

    async def run_async(self) -> ReconciliationSummary:
        self.runs += 1
        return self.summary


@pytest.fixture
def job() -> StubJob:
    return StubJob(ReconciliationSummary(processed=3, updated=1, events_written=2, failed=1))


@pytest.fixture
def client(job: StubJob, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setenv("CRON_SECRET", "s3cret")
    return TestClient(create_app(lambda: job))  # type: ignore[arg-type]


def test_poll_with_query_secret_runs_job(client: TestClient, job: StubJob) -> None:
    response = client.get("/api/poll", params={"secret": "s3cret"})

    assert response.status_code == 200
    assert response.json() == {
        "message": "Sync complete",
        "processed": 3,
        "updated": 1,
        "failed": 1,
    }
    assert job.runs == 1


@pytest.mark.parametrize(
    "headers",
    [{"X-Cron-Secret": "s3cret"}, {"Authorization": "Bearer s3cret"}],
)
def test_poll_accepts_header_secrets(
    client: TestClient,
    job: StubJob,
    headers: dict[str, str],
) -> None:
    response = client.post("/api/poll", headers=headers)

    assert response.status_code == 200
    assert job.runs == 1


@pytest.mark.parametrize(
    ("params", "headers"),
    [
        ({}, {}),
        ({"secret": "wrong"}, {}),
        ({}, {"Authorization": "Basic s3cret"}),
    ],
)
def test_poll_rejects_wrong_or_missing_secret(
    client: TestClient,
    job: StubJob,
    params: dict[str, str],
    headers: dict[str, str],
) -> None:
    response = client.get("/api/poll", params=params, headers=headers)

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid secret"}
    assert job.runs == 0


def test_poll_without_configured_secret_is_a_server_error(
    client: TestClient,
    job: StubJob,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("CRON_SECRET", raising=False)

    response = client.get("/api/poll", params={"secret": "s3cret"})

    assert response.status_code == 500
    assert response.json() == {"error": "CRON_SECRET not configured"}
    assert job.runs == 0


def test_poll_reports_empty_store(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CRON_SECRET", "s3cret")
    job = StubJob(ReconciliationSummary())
    client = TestClient(create_app(lambda: job))  # type: ignore[arg-type]

    response = client.get("/api/poll", headers={"X-Cron-Secret": "s3cret"})

    assert response.json() == {
        "message": "No active shipments",
        "processed": 0,
        "updated": 0,
        "failed": 0,
    }


def test_healthz(client: TestClient) -> None:
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_poll_builds_job_off_the_event_loop(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CRON_SECRET", "s3cret")
    built_on: list[int] = []
    ran_on: list[int] = []

    class ThreadRecordingJob(StubJob):
        async def run_async(self) -> ReconciliationSummary:
            ran_on.append(threading.get_ident())
            return await super().run_async()

    job = ThreadRecordingJob(ReconciliationSummary())

    def job_factory() -> StubJob:
        built_on.append(threading.get_ident())
        return job

    client = TestClient(create_app(job_factory))  # type: ignore[arg-type]

    response = client.post("/api/poll", params={"secret": "s3cret"})

    assert response.status_code == 200
    assert job.runs == 1
    assert len(built_on) == len(ran_on) == 1
    assert built_on[0] != ran_on[0]
