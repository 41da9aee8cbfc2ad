#!/usr/bin/env python3

"""
Thin wrapper around the GitHub Actions runner environment.

Everything that reads or writes process state (inputs, PATH, exported
variables, secrets, the event payload, workflow commands) goes through
ActionsRuntime, so the rest of the package can be driven with a plain
dict instead of os.environ.
"""

import json
import os
import uuid
from typing import Any, Dict, MutableMapping, Optional, Set

import requests
from colorama import Fore, Style

# YAML 1.2 "Core Schema" booleans, as accepted by the runner toolkit
TRUE_VALUES = ("true", "True", "TRUE")
FALSE_VALUES = ("false", "False", "FALSE")


class OIDCError(Exception):
    """Raised when an identity token cannot be obtained"""


def parse_core_boolean(value: Any, name: str) -> bool:
    """Accept a real bool or one of the YAML 1.2 core boolean spellings"""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value in TRUE_VALUES:
            return True
        if value in FALSE_VALUES:
            return False
    raise TypeError(
        f'Input does not meet YAML 1.2 "Core Schema" specification: {name}\n'
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )


def escape_data(value: str) -> str:
    """Escape a value for use in a workflow command"""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionsRuntime:
    """Inputs, outputs and logging for a single action run"""

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ
        self._secrets: Set[str] = set()
        self._event_payload: Optional[Dict[str, Any]] = None

    @property
    def in_actions(self) -> bool:
        return self.environ.get("GITHUB_ACTIONS") == "true"

    @property
    def repository(self) -> str:
        return self.environ.get("GITHUB_REPOSITORY", "")

    @property
    def run_id(self) -> str:
        return self.environ.get("GITHUB_RUN_ID", "")

    @property
    def event_name(self) -> str:
        return self.environ.get("GITHUB_EVENT_NAME", "")

    @property
    def event_payload(self) -> Dict[str, Any]:
        """The webhook payload of the triggering event (empty if unavailable)"""
        if self._event_payload is None:
            self._event_payload = {}
            event_path = self.environ.get("GITHUB_EVENT_PATH")
            if event_path:
                if os.path.exists(event_path):
                    with open(event_path, "r") as f:
                        self._event_payload = json.load(f)
                else:
                    self.warning(f"GITHUB_EVENT_PATH {event_path} does not exist")
        return self._event_payload

    # Inputs

    def get_input(self, name: str, default: str = "") -> str:
        """Read an action input (INPUT_<NAME>), trimmed"""
        key = f"INPUT_{name.replace(' ', '_').upper()}"
        value = self.environ.get(key, "").strip()
        return value or default

    def get_boolean_input(self, name: str, default: bool = False) -> bool:
        value = self.get_input(name)
        if not value:
            return default
        return parse_core_boolean(value, name)

    # Environment side channels

    def add_path(self, path: str) -> None:
        """Prepend a directory to PATH for this and all following steps"""
        path_file = self.environ.get("GITHUB_PATH")
        if path_file:
            with open(path_file, "a") as f:
                f.write(f"{path}{os.linesep}")
        current = self.environ.get("PATH", "")
        self.environ["PATH"] = f"{path}{os.pathsep}{current}" if current else path

    def export_variable(self, name: str, value: str) -> None:
        """Set an environment variable for this and all following steps"""
        self.environ[name] = value
        env_file = self.environ.get("GITHUB_ENV")
        if not env_file:
            return
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        if delimiter in name or delimiter in value:
            raise ValueError(f"Unexpected input: value should not contain the delimiter {delimiter}")
        with open(env_file, "a") as f:
            f.write(f"{name}<<{delimiter}{os.linesep}{value}{os.linesep}{delimiter}{os.linesep}")

    def set_secret(self, value: str) -> None:
        """Register a value that must be redacted from all log output"""
        if not value:
            return
        self._secrets.add(value)
        if self.in_actions:
            print(f"::add-mask::{escape_data(value)}")

    # Logging

    def _redact(self, message: str) -> str:
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message

    def info(self, message: str) -> None:
        print(self._redact(message))

    def warning(self, message: str) -> None:
        message = self._redact(message)
        if self.in_actions:
            print(f"::warning::{escape_data(message)}")
        else:
            print(f"{Fore.YELLOW}⚠️  {message}{Style.RESET_ALL}")

    def error(self, message: str) -> None:
        message = self._redact(message)
        if self.in_actions:
            print(f"::error::{escape_data(message)}")
        else:
            print(f"{Fore.RED}❌ {message}{Style.RESET_ALL}")

    def set_failed(self, message: str) -> None:
        """Report the run as failed; the caller decides the exit code"""
        self.error(message)

    # Identity

    def get_id_token(self, audience: str, session: Optional[requests.Session] = None) -> str:
        """Request a GitHub Actions OIDC token for the given audience"""
        request_url = self.environ.get("ACTIONS_ID_TOKEN_REQUEST_URL")
        request_token = self.environ.get("ACTIONS_ID_TOKEN_REQUEST_TOKEN")
        if not request_url:
            raise OIDCError("Unable to get ACTIONS_ID_TOKEN_REQUEST_URL env variable")
        if not request_token:
            raise OIDCError("Unable to get ACTIONS_ID_TOKEN_REQUEST_TOKEN env variable")

        http = session or requests
        try:
            response = http.get(
                request_url,
                params={"audience": audience},
                headers={"Authorization": f"Bearer {request_token}"},
            )
            response.raise_for_status()
            id_token = response.json().get("value")
        except (requests.RequestException, ValueError) as e:
            raise OIDCError(f"Failed to get ID Token. Error message: {e}")

        if not id_token:
            raise OIDCError("Response json body do not have ID Token field")
        self.set_secret(id_token)
        return id_token
