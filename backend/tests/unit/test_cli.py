"""Unit tests for the poolstat command line."""

import pytest
from click.testing import CliRunner

from poolstat import cli
from poolstat.adapters.registry import FakeRegistryClient
from poolstat.core.exceptions import ArgumentError

POOL = "com.mongodb:type=ConnectionPool,host=h1"


@pytest.fixture
def registry(monkeypatch) -> FakeRegistryClient:
    fake = FakeRegistryClient()
    fake.register(POOL, Host="h1", Port=27017, Size=10, Total=1, InUse=0)
    fake.targets = []

    def _open(target: str) -> FakeRegistryClient:
        fake.targets.append(target)
        return fake

    monkeypatch.setattr(cli, "open_registry", _open)
    return fake


class TestResolveTarget:
    """Tests for host/port resolution."""

    def test_host_and_port(self):
        assert cli.resolve_target("db", 8778) == "db:8778"

    def test_port_in_host(self):
        assert cli.resolve_target("db:8778", None) == "db:8778"

    def test_missing_port(self):
        with pytest.raises(ArgumentError, match="port is required"):
            cli.resolve_target("localhost", None)


class TestMain:
    """Tests for the click command."""

    def test_prints_requested_number_of_reports(self, registry):
        result = CliRunner().invoke(cli.main, ["--port", "8778", "-n", "2", "0"])

        assert result.exit_code == 0, result.output
        assert result.output.count("{ pools : [") == 2
        assert f"objectName: '{POOL}'" in result.output
        assert registry.targets == ["localhost:8778"]
        assert registry.opened and registry.closed

    def test_report_followed_by_blank_line(self, registry):
        result = CliRunner().invoke(cli.main, ["-h", "db:8778", "--rowcount", "1"])

        assert result.exit_code == 0, result.output
        assert result.output.endswith("  ]\n}\n\n")
        assert registry.targets == ["db:8778"]

    def test_missing_port_is_usage_error(self, registry):
        result = CliRunner().invoke(cli.main, ["-n", "1"])

        assert result.exit_code == 2
        assert "port is required" in result.output
        assert "Usage:" in result.output
        assert registry.targets == []

    def test_non_numeric_port_is_usage_error(self, registry):
        result = CliRunner().invoke(cli.main, ["--port", "abc"])
        assert result.exit_code == 2

    def test_unknown_option_is_usage_error(self, registry):
        result = CliRunner().invoke(cli.main, ["--port", "1", "--bogus"])
        assert result.exit_code == 2

    def test_too_many_positional_arguments(self, registry):
        result = CliRunner().invoke(cli.main, ["--port", "1", "1", "2"])
        assert result.exit_code == 2

    def test_registry_failure_exits_non_zero(self, registry):
        registry.fail_search(after=1)
        result = CliRunner().invoke(cli.main, ["--port", "8778", "-n", "3", "0"])

        assert result.exit_code == 1
        assert result.output.count("{ pools : [") == 1
        assert "Error: search for" in result.output
        assert registry.closed

    def test_help_lists_fields(self):
        result = CliRunner().invoke(cli.main, ["--help"])

        assert result.exit_code == 0
        assert "inUseConnections.localPort" in result.output
        assert "--rowcount" in result.output

    def test_interrupt_exits_cleanly_and_closes_registry(self, registry):
        registry.fail_search(KeyboardInterrupt())
        result = CliRunner().invoke(cli.main, ["--port", "8778", "-n", "0"])

        assert result.exit_code == 0, result.output
        assert "{ pools : [" not in result.output
        assert registry.opened and registry.closed
