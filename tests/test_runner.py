"""
Tests for the iteration harness (numcoerce.runner).
"""

import io
import math

import pytest

from numcoerce import runner
from numcoerce.fixtures import NUMCOERCE_FIXTURE_DATA, clear_cache
from numcoerce.runner import (
    FatalPolicy, RunConfig, run, DONE_MARKER, EXIT_FATAL, EXIT_OK,
    NUMCOERCE_ON_FATAL,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv(NUMCOERCE_FIXTURE_DATA, raising=False)
    monkeypatch.delenv(NUMCOERCE_ON_FATAL, raising=False)
    clear_cache()
    yield
    clear_cache()


def run_to_text(config):
    out = io.StringIO()
    result = run(config, out=out)
    return result, out.getvalue()


class TestHaltPolicy:
    """Default policy: a fatal operand ends the run."""

    def test_stops_at_object(self):
        result, text = run_to_text(RunConfig())
        assert result.halted
        assert result.exit_code == EXIT_FATAL
        assert len(result.records) == 23
        assert "-- Iteration 23 --" in text
        assert "-- Iteration 24 --" not in text
        assert DONE_MARKER not in text

    def test_fatal_block_printed(self):
        _, text = run_to_text(RunConfig())
        last_block = text.split("-- Iteration 23 --\n")[1]
        assert last_block.startswith("Fatal error: ")


class TestContinuePolicy:
    """A fatal operand is reported and the run goes on."""

    def test_full_run(self):
        result, text = run_to_text(RunConfig(fatal_policy=FatalPolicy.CONTINUE))
        assert not result.halted
        assert result.exit_code == EXIT_OK
        assert len(result.records) == 24
        assert text.rstrip().endswith(DONE_MARKER)

    def test_outcomes(self):
        result, _ = run_to_text(RunConfig(fatal_policy=FatalPolicy.CONTINUE))
        values = [o.value for o in result.outcomes]
        assert values[0] == 1.0                 # 0
        assert values[1] == 20.3                # 1
        assert values[2] == math.inf            # 12345
        assert 0.0 <= values[3] < 1.0           # -2345
        assert values[4] == math.inf            # 2147483647
        assert values[10] == values[11] == 1.0  # null
        assert values[12] == 20.3               # true
        assert values[13] == 1.0                # false
        assert values[16] == 1.0                # ""
        assert values[18] == 20.3               # [] coerces to 1
        assert values[19] == 1.0                # "abcxyz"
        assert values[22] is None               # object
        resource = result.records[23].operand.data
        assert values[23] == 20.3 ** resource.id

    def test_diagnostics(self):
        result, _ = run_to_text(RunConfig(fatal_policy=FatalPolicy.CONTINUE))
        assert result.diagnostics.warning_count == 1
        assert result.diagnostics.error_count == 1

    def test_diagnostics_report(self):
        result, _ = run_to_text(RunConfig(fatal_policy=FatalPolicy.CONTINUE))
        report = result.diagnostics.to_json()
        assert report["warning_count"] == 1
        assert report["error_count"] == 1
        warning, error = report["diagnostics"]
        assert warning == {
            "code": "W101",
            "message": "non-numeric value of kind 'list' used as an operand",
            "severity": "warning",
            "operand": "exponent",
            "hints": ["the operand was treated as 1"],
        }
        assert error["code"] == "E201"
        assert error["severity"] == "error"

    def test_output_layout(self):
        _, text = run_to_text(RunConfig(fatal_policy=FatalPolicy.CONTINUE))
        assert text.startswith(
            "*** Testing pow() : usage variations ***\n"
            "\n-- Iteration 1 --\nfloat(1)\n"
            "\n-- Iteration 2 --\nfloat(20.3)\n"
            "\n-- Iteration 3 --\nfloat(INF)\n"
            "\n-- Iteration 4 --\nfloat(0)\n"
        )
        block = text.split("-- Iteration 19 --\n")[1].split("\n-- Iteration 20")[0]
        assert block.startswith("Warning: ")
        assert block.rstrip().endswith("float(20.3)")


class TestConfig:
    """Overrides and environment."""

    def test_base_override(self):
        result, _ = run_to_text(RunConfig(base=2.0, fatal_policy=FatalPolicy.CONTINUE))
        assert result.outcomes[1].value == 2.0
        assert result.outcomes[2].value == math.inf

    def test_resource_path_override(self, tmp_path):
        target = tmp_path / "handle.txt"
        target.write_text("x")
        result, _ = run_to_text(RunConfig(
            fatal_policy=FatalPolicy.CONTINUE, resource_path=target,
        ))
        assert result.records[23].operand.data.path == target.resolve()

    def test_env_policy(self, monkeypatch):
        monkeypatch.setenv(NUMCOERCE_ON_FATAL, "Continue")
        assert RunConfig.from_env().fatal_policy == FatalPolicy.CONTINUE

    def test_overrides_beat_env(self, monkeypatch):
        monkeypatch.setenv(NUMCOERCE_ON_FATAL, "continue")
        config = RunConfig.from_env(fatal_policy=FatalPolicy.HALT)
        assert config.fatal_policy == FatalPolicy.HALT

    def test_bad_policy(self):
        with pytest.raises(ValueError, match="halt"):
            FatalPolicy.parse("sometimes")

    def test_custom_catalog(self, tmp_path):
        path = tmp_path / "tiny.yaml"
        path.write_text(
            'base: {kind: int, value: 2}\n'
            'inputs:\n'
            '  - {kind: int, value: 10}\n'
            '  - {kind: string, value: "3 apples"}\n'
        )
        result, text = run_to_text(RunConfig(fixtures_path=path))
        assert [o.value for o in result.outcomes] == [1024, 8]
        assert "int(1024)" in text
        assert not text.startswith("***")


class TestResources:
    """Handles are released however the run ends."""

    @pytest.mark.parametrize("policy", list(FatalPolicy))
    def test_released(self, monkeypatch, policy):
        providers = []

        class RecordingProvider(runner.ResourceProvider):
            def __init__(self, *args, **kwargs):
                super().__init__(*args, **kwargs)
                providers.append(self)

        monkeypatch.setattr(runner, "ResourceProvider", RecordingProvider)
        run_to_text(RunConfig(fatal_policy=policy))
        assert len(providers) == 1
        assert providers[0].open_count == 0
