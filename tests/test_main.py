"""Tests for the command line interface."""

import json
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from tradelog.application.config import ConnectionSettings
from tradelog.main import cli, run_connect
from tests.fakes import FakeActor, FakeActorFactory

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logger():
    with patch("tradelog.main.setup_logger"):
        yield


class TestDiagnosticsCommand:
    def test_prints_json_report(self, monkeypatch):
        monkeypatch.setenv("CANISTER_ID", "abc")
        monkeypatch.delenv("TRADELOG_BACKEND_CANISTER_ID", raising=False)

        result = runner.invoke(cli, ["diagnostics", "--backend-url", "http://localhost:4943"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["canister_id"] == "abc"
        assert data["deployment_type"] == "local"


class TestConnectCommand:
    def test_exit_code_follows_result(self):
        with patch("tradelog.main.run_connect", new=AsyncMock(return_value=True)) as run:
            result = runner.invoke(cli, ["connect", "--backend-url", "http://backend", "--principal", "alice"])

        assert result.exit_code == 0
        settings, identity, launch_url = run.await_args.args
        assert settings.backend_url == "http://backend"
        assert identity.principal == "alice"
        assert launch_url is None

    def test_failure_exits_non_zero(self):
        with patch("tradelog.main.run_connect", new=AsyncMock(return_value=False)):
            result = runner.invoke(cli, ["connect"])

        assert result.exit_code == 1


class TestRunConnect:
    @pytest.mark.asyncio
    async def test_ready(self):
        factory = FakeActorFactory(FakeActor())
        with patch("tradelog.infrastructure.backend.HttpActorFactory", return_value=factory):
            assert await run_connect(ConnectionSettings(), None, None) is True

        assert factory.calls == 1

    @pytest.mark.asyncio
    async def test_error_without_automatic_retry(self):
        factory = FakeActorFactory(FakeActor(health_error=RuntimeError("refused")))
        settings = ConnectionSettings(max_auto_retries=0)
        with patch("tradelog.infrastructure.backend.HttpActorFactory", return_value=factory):
            assert await run_connect(settings, None, None) is False

        assert factory.calls == 1

    @pytest.mark.asyncio
    async def test_error_is_shown_as_friendly_message(self, capsys):
        factory = FakeActorFactory(FakeActor(health_error=RuntimeError("Actor not available")))
        settings = ConnectionSettings(max_auto_retries=0)
        with patch("tradelog.infrastructure.backend.HttpActorFactory", return_value=factory):
            assert await run_connect(settings, None, None) is False

        assert "Backend connection not available. Please refresh the page." in capsys.readouterr().out
