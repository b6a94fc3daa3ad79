from __future__ import annotations

import http.client
import io
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from services.server_update import (
    FileChecksumStore,
    ProviderRegistry,
    UpdateConfig,
    UpdateError,
    UpdateOutcome,
    UpdateService,
    UpdateStatus,
    VersionQuery,
)
from tests.unit.update_service_test_utils import (
    JOB_URL,
    FakeHttp,
    RecordingChecksumStore,
    StaticProvider,
    example_registry,
    serve_jenkins_build,
)


def _static_registry(provider: StaticProvider, queries: list[VersionQuery] | None = None) -> ProviderRegistry:
    registry = ProviderRegistry()

    def factory(query: VersionQuery) -> StaticProvider:
        if queries is not None:
            queries.append(query)
        return provider

    registry.register("static", factory)
    return registry


def _config(tmp_path: Path, **overrides) -> UpdateConfig:
    values = {
        "project": "static",
        "output_file": tmp_path / "server.jar",
        "working_directory": tmp_path,
        "checksum_store": RecordingChecksumStore(),
    }
    values.update(overrides)
    return UpdateConfig(**values)


@pytest.mark.parametrize("project", ["missing", "", "  ", "papr"])
def test_unregistered_project_returns_no_provider(tmp_path: Path, project: str) -> None:
    config = _config(tmp_path, project=project, check_only=True)

    outcome = UpdateService(config, _static_registry(StaticProvider())).run()

    assert outcome.status is UpdateStatus.NO_PROVIDER
    assert not (tmp_path / "server.jar").exists()


def test_downloads_when_target_missing(tmp_path: Path) -> None:
    provider = StaticProvider(payload=b"new-build", token="t1")
    store = RecordingChecksumStore()

    outcome = UpdateService(_config(tmp_path, checksum_store=store), _static_registry(provider)).run()

    assert outcome.status is UpdateStatus.SUCCESS
    assert outcome.is_success
    assert (tmp_path / "server.jar").read_bytes() == b"new-build"
    assert store.saves == ["t1"]


def test_matching_token_is_up_to_date_without_download(tmp_path: Path) -> None:
    target = tmp_path / "server.jar"
    target.write_bytes(b"installed")
    provider = StaticProvider(payload=b"new-build", token="t1")

    outcome = UpdateService(
        _config(tmp_path, checksum_store=RecordingChecksumStore("t1")), _static_registry(provider)
    ).run()

    assert outcome.status is UpdateStatus.UP_TO_DATE
    assert provider.opened == 0
    assert target.read_bytes() == b"installed"


def test_empty_stored_token_never_counts_as_current(tmp_path: Path) -> None:
    (tmp_path / "server.jar").write_bytes(b"installed")
    provider = StaticProvider(payload=b"fresh", token="")

    outcome = UpdateService(_config(tmp_path), _static_registry(provider)).run()

    assert outcome.status is UpdateStatus.SUCCESS
    assert provider.opened == 1


def test_changed_token_replaces_file_and_saves_token(tmp_path: Path) -> None:
    target = tmp_path / "server.jar"
    target.write_bytes(b"old")
    store = RecordingChecksumStore("t1")
    provider = StaticProvider(payload=b"new", token="t2")

    outcome = UpdateService(_config(tmp_path, checksum_store=store), _static_registry(provider)).run()

    assert outcome.status is UpdateStatus.SUCCESS
    assert target.read_bytes() == b"new"
    assert store.token == "t2"
    assert list(tmp_path.glob("*.part")) == []


def test_check_only_reports_out_of_date_without_touching_file(tmp_path: Path) -> None:
    target = tmp_path / "server.jar"
    target.write_bytes(b"old")
    store = RecordingChecksumStore("t1")
    provider = StaticProvider(payload=b"new", token="t2")

    outcome = UpdateService(
        _config(tmp_path, checksum_store=store, check_only=True), _static_registry(provider)
    ).run()

    assert outcome.status is UpdateStatus.OUT_OF_DATE
    assert target.read_bytes() == b"old"
    assert provider.opened == 0
    assert store.saves == []


def test_check_only_with_missing_target_writes_nothing(tmp_path: Path) -> None:
    provider = StaticProvider()

    outcome = UpdateService(_config(tmp_path, check_only=True), _static_registry(provider)).run()

    assert outcome.status is UpdateStatus.OUT_OF_DATE
    assert not (tmp_path / "server.jar").exists()


def test_check_only_without_checksum_capability_is_out_of_date(tmp_path: Path) -> None:
    target = tmp_path / "server.jar"
    target.write_bytes(b"old")
    provider = StaticProvider(payload=b"new", token=None)

    outcome = UpdateService(_config(tmp_path, check_only=True), _static_registry(provider)).run()

    assert outcome.status is UpdateStatus.OUT_OF_DATE
    assert target.read_bytes() == b"old"


def test_provider_without_checksum_always_downloads(tmp_path: Path) -> None:
    target = tmp_path / "server.jar"
    target.write_bytes(b"old")
    store = RecordingChecksumStore("anything")
    provider = StaticProvider(payload=b"new", token=None)

    outcome = UpdateService(_config(tmp_path, checksum_store=store), _static_registry(provider)).run()

    assert outcome.status is UpdateStatus.SUCCESS
    assert target.read_bytes() == b"new"
    assert store.saves == []


def test_uncreatable_target_fails_before_provider_is_built(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("file", encoding="utf-8")
    queries: list[VersionQuery] = []

    outcome = UpdateService(
        _config(tmp_path, output_file=blocker / "server.jar"),
        _static_registry(StaticProvider(), queries),
    ).run()

    assert outcome.status is UpdateStatus.FILE_CREATE_FAILED
    assert queries == []


def test_uncreatable_target_makes_no_network_calls(tmp_path: Path, fake_http: FakeHttp) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file", encoding="utf-8")
    config = _config(tmp_path, project="example", output_file=blocker / "server.jar")

    outcome = UpdateService(config, example_registry()).run()

    assert outcome.status is UpdateStatus.FILE_CREATE_FAILED
    assert fake_http.requested == []


def test_missing_stream_is_failed(tmp_path: Path) -> None:
    store = RecordingChecksumStore()
    provider = StaticProvider(payload=None)

    outcome = UpdateService(_config(tmp_path, checksum_store=store), _static_registry(provider)).run()

    assert outcome.status is UpdateStatus.FAILED
    assert not outcome.is_success
    assert store.saves == []


def test_write_error_is_failed_and_keeps_target(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "server.jar"
    target.write_bytes(b"old")

    def broken_replace(stream, path):
        raise OSError("disk full")

    monkeypatch.setattr("services.server_update.service.replace_with_stream", broken_replace)

    outcome = UpdateService(
        _config(tmp_path, checksum_store=RecordingChecksumStore("t0")), _static_registry(StaticProvider())
    ).run()

    assert outcome.status is UpdateStatus.FAILED
    assert target.read_bytes() == b"old"


def test_provider_construction_error_is_unknown_error(tmp_path: Path) -> None:
    registry = ProviderRegistry()
    error = UpdateError("metadata unreachable")

    def factory(query: VersionQuery):
        raise error

    registry.register("static", factory)
    lines: list[str] = []

    outcome = UpdateService(_config(tmp_path, diagnostics=lines.append), registry).run()

    assert outcome.status is UpdateStatus.UNKNOWN_ERROR
    assert outcome.error is error
    assert "metadata unreachable" in outcome.message
    assert any("UpdateError" in line for line in lines)


def test_failing_diagnostics_sink_does_not_change_outcome(tmp_path: Path) -> None:
    def sink(message: str) -> None:
        raise RuntimeError("sink broke")

    outcome = UpdateService(_config(tmp_path, diagnostics=sink), _static_registry(StaticProvider())).run()

    assert outcome.status is UpdateStatus.SUCCESS


def test_version_query_carries_requested_version(tmp_path: Path) -> None:
    queries: list[VersionQuery] = []

    UpdateService(_config(tmp_path, version="1.20.4"), _static_registry(StaticProvider(), queries)).run()

    assert [query.version for query in queries] == ["1.20.4"]
    assert not queries[0].is_latest


def test_jenkins_update_is_idempotent(tmp_path: Path, fake_http: FakeHttp) -> None:
    artifact_url = serve_jenkins_build(fake_http, 42, payload=b"build-42")
    store = RecordingChecksumStore()
    config = _config(tmp_path, project="EXAMPLE", checksum_store=store)
    registry = example_registry()

    first = UpdateService(config, registry).run()
    second = UpdateService(config, registry).run()

    assert first.status is UpdateStatus.SUCCESS
    assert second.status is UpdateStatus.UP_TO_DATE
    assert fake_http.count(artifact_url) == 1
    assert store.token == "main||42||Example_main||https://ci.example.invalid/"
    assert (tmp_path / "server.jar").read_bytes() == b"build-42"


def test_jenkins_new_build_triggers_download(tmp_path: Path, fake_http: FakeHttp) -> None:
    serve_jenkins_build(fake_http, 42, payload=b"build-42")
    store = RecordingChecksumStore()
    config = _config(tmp_path, project="example", checksum_store=store)
    registry = example_registry()
    UpdateService(config, registry).run()

    serve_jenkins_build(fake_http, 43, payload=b"build-43")
    outcome = UpdateService(config, registry).run()

    assert outcome.status is UpdateStatus.SUCCESS
    assert (tmp_path / "server.jar").read_bytes() == b"build-43"
    assert store.token.split("||")[1] == "43"


def test_jenkins_invalid_artifact_is_failed(tmp_path: Path, fake_http: FakeHttp) -> None:
    serve_jenkins_build(fake_http, 8, artifacts=[{"fileName": "readme.txt", "relativePath": "readme.txt"}])
    store = RecordingChecksumStore()

    outcome = UpdateService(_config(tmp_path, project="example", checksum_store=store), example_registry()).run()

    assert outcome.status is UpdateStatus.FAILED
    assert f"{JOB_URL}8/artifact/INVALID" in fake_http.requested
    assert store.saves == []


def test_jenkins_build_lookup_failure_is_unknown_error(tmp_path: Path, fake_http: FakeHttp) -> None:
    fake_http.fail(f"{JOB_URL}api/json?tree=lastSuccessfulBuild[number]")

    outcome = UpdateService(_config(tmp_path, project="example"), example_registry()).run()

    assert outcome.status is UpdateStatus.UNKNOWN_ERROR
    assert isinstance(outcome.error, UpdateError)


def test_run_async_returns_outcome_future(tmp_path: Path) -> None:
    service = UpdateService(_config(tmp_path), _static_registry(StaticProvider()))

    future = service.run_async()

    assert future.result(timeout=5) == UpdateOutcome.of(UpdateStatus.SUCCESS)


def test_run_async_uses_given_executor(tmp_path: Path) -> None:
    service = UpdateService(_config(tmp_path), _static_registry(StaticProvider()))

    with ThreadPoolExecutor(max_workers=1) as executor:
        outcome = service.run_async(executor).result(timeout=5)

    assert outcome.status is UpdateStatus.SUCCESS


def test_run_logs_final_status(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="services.server_update")

    UpdateService(_config(tmp_path), _static_registry(StaticProvider())).run()

    messages = [record.getMessage() for record in caplog.records]
    assert any("Update of static finished: SUCCESS" in message for message in messages)


class _TruncatedStream(io.BytesIO):
    def read(self, size: int = -1) -> bytes:
        raise http.client.IncompleteRead(b"partial", 100)


def test_truncated_download_is_failed_and_keeps_target(tmp_path: Path) -> None:
    target = tmp_path / "server.jar"
    target.write_bytes(b"old")
    store = RecordingChecksumStore("t1")
    provider = StaticProvider(token="t2")
    provider.open_artifact = lambda: _TruncatedStream()  # type: ignore[method-assign]

    outcome = UpdateService(_config(tmp_path, checksum_store=store), _static_registry(provider)).run()

    assert outcome.status is UpdateStatus.FAILED
    assert target.read_bytes() == b"old"
    assert store.saves == []
    assert list(tmp_path.glob("*.part")) == []


def test_check_only_uncreatable_target_is_file_create_failed(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file", encoding="utf-8")
    queries: list[VersionQuery] = []

    outcome = UpdateService(
        _config(tmp_path, output_file=blocker / "server.jar", check_only=True),
        _static_registry(StaticProvider(), queries),
    ).run()

    assert outcome.status is UpdateStatus.FILE_CREATE_FAILED
    assert queries == []


def test_check_only_missing_target_is_not_created(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "server.jar"

    outcome = UpdateService(
        _config(tmp_path, output_file=target, check_only=True), _static_registry(StaticProvider())
    ).run()

    assert outcome.status is UpdateStatus.OUT_OF_DATE
    assert not target.parent.exists()


def test_undecodable_checksum_file_downloads_again(tmp_path: Path) -> None:
    target = tmp_path / "server.jar"
    target.write_bytes(b"old")
    checksum_path = tmp_path / "checksum.txt"
    checksum_path.write_bytes(b"\xff\xfe\xfa")
    provider = StaticProvider(payload=b"new", token="t2")

    outcome = UpdateService(
        _config(tmp_path, checksum_store=FileChecksumStore(checksum_path)), _static_registry(provider)
    ).run()

    assert outcome.status is UpdateStatus.SUCCESS
    assert target.read_bytes() == b"new"
    assert checksum_path.read_text(encoding="utf-8") == "t2"
