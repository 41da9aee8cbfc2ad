"""
Tests for the runner environment wrapper.
"""

import os
from pathlib import Path

import pytest

from depotsetup.utils.actions import ActionsRuntime, escape_data
from tests.conftest import write_event


class TestInputs:
    def test_get_input(self, runtime) -> None:
        runtime.environ["INPUT_VERSION"] = "  2.57.1 \n"
        assert runtime.get_input("version") == "2.57.1"

    def test_get_input_default(self, runtime) -> None:
        assert runtime.get_input("version", default="latest") == "latest"

    @pytest.mark.parametrize("value", ["true", "True", "TRUE"])
    def test_boolean_true(self, runtime, value: str) -> None:
        runtime.environ["INPUT_OIDC"] = value
        assert runtime.get_boolean_input("oidc") is True

    @pytest.mark.parametrize("value", ["false", "False", "FALSE"])
    def test_boolean_false(self, runtime, value: str) -> None:
        runtime.environ["INPUT_OIDC"] = value
        assert runtime.get_boolean_input("oidc", default=True) is False

    @pytest.mark.parametrize("value", ["yes", "1", "tRuE"])
    def test_boolean_rejects_other_values(self, runtime, value: str) -> None:
        runtime.environ["INPUT_OIDC"] = value
        with pytest.raises(TypeError, match="Core Schema"):
            runtime.get_boolean_input("oidc")


class TestSideChannels:
    def test_add_path(self, runtime) -> None:
        runtime.add_path("/cache/depot/bin")

        assert runtime.environ["PATH"] == f"/cache/depot/bin{os.pathsep}/usr/bin"
        assert Path(runtime.environ["GITHUB_PATH"]).read_text() == f"/cache/depot/bin{os.linesep}"

    def test_add_path_outside_runner(self) -> None:
        runtime = ActionsRuntime({})
        runtime.add_path("/cache/depot/bin")
        assert runtime.environ["PATH"] == "/cache/depot/bin"

    def test_export_variable(self, runtime) -> None:
        runtime.export_variable("DEPOT_TOKEN", "abc")

        assert runtime.environ["DEPOT_TOKEN"] == "abc"
        lines = Path(runtime.environ["GITHUB_ENV"]).read_text().splitlines()
        assert lines[0].startswith("DEPOT_TOKEN<<ghadelimiter_")
        assert lines[1] == "abc"
        assert lines[2] == lines[0].split("<<", 1)[1]

    def test_does_not_touch_process_environment(self) -> None:
        environ = {}
        ActionsRuntime(environ).export_variable("DEPOT_SETUP_TEST_VAR", "1")
        assert "DEPOT_SETUP_TEST_VAR" not in os.environ


class TestLogging:
    def test_secret_is_masked_and_redacted(self, runtime, capsys) -> None:
        runtime.set_secret("s3cret")
        runtime.info("token is s3cret")

        out = capsys.readouterr().out
        assert "::add-mask::s3cret" in out
        assert "token is ***" in out

    def test_error_workflow_command(self, runtime, capsys) -> None:
        runtime.error("bad\nthing 100%")
        assert capsys.readouterr().out == "::error::bad%0Athing 100%25\n"

    def test_error_outside_actions(self, capsys) -> None:
        ActionsRuntime({}).error("bad thing")
        out = capsys.readouterr().out
        assert "bad thing" in out
        assert "::error::" not in out

    def test_secret_not_printed_outside_actions(self, capsys) -> None:
        runtime = ActionsRuntime({})
        runtime.set_secret("s3cret")
        runtime.warning("leaked s3cret")
        out = capsys.readouterr().out
        assert "s3cret" not in out

    def test_escape_data(self) -> None:
        assert escape_data("a%b\r\nc") == "a%25b%0D%0Ac"


class TestEventContext:
    def test_payload(self, runtime, tmp_path: Path) -> None:
        write_event(tmp_path, runtime.environ, "pull_request", {"number": 7})
        assert runtime.event_name == "pull_request"
        assert runtime.event_payload == {"number": 7}

    def test_missing_payload(self, runtime, capsys) -> None:
        runtime.environ["GITHUB_EVENT_PATH"] = "/nonexistent/event.json"
        assert runtime.event_payload == {}
        assert "does not exist" in capsys.readouterr().out
