"""Tests for the click command line."""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from ec2_bridge import __version__
from ec2_bridge.cli import cli
from ec2_bridge.utils.exceptions import AmbiguousResource, NoZoneAvailable

from conftest import INSTANCE_ID, instance_data


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fake_orchestrator():
    with patch("ec2_bridge.utils.decorators.build_orchestrator") as build:
        orchestrator = MagicMock(name="orchestrator")
        build.return_value = orchestrator
        yield orchestrator


def test_version(runner):
    result = runner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_status(runner, fake_orchestrator):
    fake_orchestrator.get_instance_status.return_value = "running"
    result = runner.invoke(cli, ["status", INSTANCE_ID])
    assert result.exit_code == 0
    assert result.output.strip() == "running"


def test_status_rejects_bad_id(runner, fake_orchestrator):
    result = runner.invoke(cli, ["status", "web-1"])
    assert result.exit_code == 1
    fake_orchestrator.get_instance_status.assert_not_called()


def test_resolve_not_found(runner, fake_orchestrator):
    fake_orchestrator.resolver.resolve_volume_id.return_value = None
    result = runner.invoke(cli, ["resolve", "volume", "data-1"])
    assert result.exit_code == 0
    assert result.output.strip() == "none"


def test_resolve_ambiguous_exits_non_zero(runner, fake_orchestrator):
    fake_orchestrator.resolver.resolve_instance_id.side_effect = AmbiguousResource(
        "instance", "web-1", ["i-1", "i-2"]
    )
    result = runner.invoke(cli, ["resolve", "instance", "web-1"])
    assert result.exit_code == 1


def test_macs(runner, fake_orchestrator):
    fake_orchestrator.list_instance_network_macs.return_value = {"subnet-a": "02:00:00:00:00:01"}
    result = runner.invoke(cli, ["macs", INSTANCE_ID])
    assert result.exit_code == 0
    assert '"subnet-a": "02:00:00:00:00:01"' in result.output


def test_serve_fails_without_zone(runner, fake_orchestrator):
    fake_orchestrator.gateway.zone.side_effect = NoZoneAvailable("none")
    with patch("ec2_bridge.cli.CallBridge") as bridge_cls:
        result = runner.invoke(cli, ["serve"])
    assert result.exit_code == 1
    bridge_cls.assert_not_called()


def test_serve_starts_bridge(runner, fake_orchestrator, tmp_path):
    fake_orchestrator.gateway.zone.return_value = "ap-southeast-1a"
    (tmp_path / "settings.yaml").write_text("bridge:\n  host: 0.0.0.0\n", encoding="utf-8")
    with patch("ec2_bridge.cli.CallBridge") as bridge_cls:
        result = runner.invoke(cli, ["--config-dir", str(tmp_path), "serve", "--port", "26000"])
    assert result.exit_code == 0
    bridge_cls.assert_called_once_with(fake_orchestrator, "0.0.0.0", 26000)
    bridge_cls.return_value.serve_forever.assert_called_once()


def test_region_option_reaches_gateway(runner):
    gateway = MagicMock(name="gateway")
    gateway.describe_instances.return_value = [instance_data(state="stopped")]
    with patch("ec2_bridge.utils.decorators.create_ec2_gateway", return_value=gateway) as factory:
        result = runner.invoke(cli, ["--region", "eu-west-1", "status", INSTANCE_ID])
    assert result.exit_code == 0
    assert result.output.strip() == "stopped"
    assert factory.call_args.kwargs["region"] == "eu-west-1"


def test_serve_rejects_unknown_log_level(runner, fake_orchestrator, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "loud")
    with patch("ec2_bridge.cli.CallBridge") as bridge_cls:
        result = runner.invoke(cli, ["serve"])
    assert result.exit_code == 1
    bridge_cls.assert_not_called()
