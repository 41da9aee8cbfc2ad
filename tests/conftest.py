"""
Shared test fixtures and configuration.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import pytest
import requests

from depotsetup.utils.actions import ActionsRuntime


def make_response(
    json_body: Any = None,
    status: int = 200,
    content: Optional[bytes] = None,
) -> MagicMock:
    """Build a stand-in for requests.Response."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.__enter__.return_value = response
    response.json.return_value = json_body
    if content is not None:
        response.iter_content.return_value = [content]
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status} Error", response=response
        )
    return response


@pytest.fixture
def environ(tmp_path: Path) -> Dict[str, str]:
    """A runner-like environment backed by files under tmp_path."""
    runner_dir = tmp_path / "runner"
    runner_dir.mkdir()
    (runner_dir / "path").touch()
    (runner_dir / "env").touch()
    return {
        "GITHUB_ACTIONS": "true",
        "GITHUB_REPOSITORY": "acme/widgets",
        "GITHUB_RUN_ID": "4242",
        "GITHUB_PATH": str(runner_dir / "path"),
        "GITHUB_ENV": str(runner_dir / "env"),
        "RUNNER_TOOL_CACHE": str(tmp_path / "tool-cache"),
        "RUNNER_TEMP": str(tmp_path / "temp"),
        "PATH": "/usr/bin",
    }


@pytest.fixture
def runtime(environ: Dict[str, str]) -> ActionsRuntime:
    return ActionsRuntime(environ)


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


def write_event(tmp_path: Path, environ: Dict[str, str], name: str, payload: Dict) -> None:
    """Point the environment at an event payload file."""
    event_path = tmp_path / "event.json"
    event_path.write_text(json.dumps(payload))
    environ["GITHUB_EVENT_NAME"] = name
    environ["GITHUB_EVENT_PATH"] = str(event_path)
