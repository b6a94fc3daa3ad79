from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, then, when

from services.server_update import (
    MemoryChecksumStore,
    UpdateOutcome,
    UpdateStatus,
    run_update,
    update_project,
)
from tests.unit.update_service_test_utils import FakeHttp, example_registry, serve_jenkins_build


@dataclass
class ServerDirectory:
    root: Path
    store: MemoryChecksumStore = field(default_factory=MemoryChecksumStore)
    artifact_urls: dict[int, str] = field(default_factory=dict)

    @property
    def server_file(self) -> Path:
        return self.root / "server.jar"


def _build_payload(build: int) -> bytes:
    return f"example build {build}".encode("utf-8")


@pytest.fixture
def server_directory(tmp_path: Path) -> ServerDirectory:
    return ServerDirectory(root=tmp_path / "server")


def _publish(fake_http: FakeHttp, server_directory: ServerDirectory, build: int) -> None:
    url = serve_jenkins_build(fake_http, build, payload=_build_payload(build))
    server_directory.artifact_urls[build] = url


@given(parsers.parse("a CI server whose last successful build is {build:d}"))
def ci_server(fake_http: FakeHttp, server_directory: ServerDirectory, build: int) -> None:
    _publish(fake_http, server_directory, build)


@given("an empty server directory")
def empty_directory(fake_http: FakeHttp, server_directory: ServerDirectory) -> None:
    assert not server_directory.root.exists()


@when(parsers.parse("the CI server publishes build {build:d}"))
def publish_build(fake_http: FakeHttp, server_directory: ServerDirectory, build: int) -> None:
    _publish(fake_http, server_directory, build)


def _run(server_directory: ServerDirectory, project: str, *, check_only: bool) -> UpdateOutcome:
    config = (
        update_project(project)
        .output_file(server_directory.server_file)
        .working_directory(server_directory.root)
        .checksum_store(server_directory.store)
        .check_only(check_only)
        .build()
    )
    return run_update(config, example_registry())


@when(parsers.parse('the "{project}" server file is updated'), target_fixture="outcome")
def update_server_file(server_directory: ServerDirectory, project: str) -> UpdateOutcome:
    return _run(server_directory, project, check_only=False)


@when(
    parsers.parse('the "{project}" server file is checked without downloading'),
    target_fixture="outcome",
)
def check_server_file(server_directory: ServerDirectory, project: str) -> UpdateOutcome:
    return _run(server_directory, project, check_only=True)


@then(parsers.parse('the update status is "{status}"'))
def assert_status(outcome: UpdateOutcome, status: str) -> None:
    assert outcome.status is UpdateStatus[status], outcome.message


@then(parsers.parse("the server file holds the bytes of build {build:d}"))
def assert_server_file(server_directory: ServerDirectory, build: int) -> None:
    assert server_directory.server_file.read_bytes() == _build_payload(build)


@then(parsers.re(r"build (?P<build>\d+) was downloaded (?P<times>\d+) times?"))
def assert_download_count(
    fake_http: FakeHttp, server_directory: ServerDirectory, build: str, times: str
) -> None:
    url = server_directory.artifact_urls[int(build)]
    assert fake_http.count(url) == int(times)


@then("no requests were sent")
def assert_no_requests(fake_http: FakeHttp) -> None:
    assert fake_http.requested == []


@then("no server file was created")
def assert_no_server_file(server_directory: ServerDirectory) -> None:
    assert not server_directory.server_file.exists()
