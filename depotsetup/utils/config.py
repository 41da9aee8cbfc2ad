#!/usr/bin/env python3

import copy
import os
from typing import Any, Dict, Optional

import yaml

from ..utils.actions import parse_core_boolean
from ..utils.system import get_real_home

# Type definitions
ConfigDict = Dict[str, Dict[str, Any]]

# Default paths
DEFAULT_CONFIG_PATH = "depot-setup.yaml"
USER_CONFIG_DIR = ".config/depot-setup"
SYSTEM_CONFIG_PATH = "/etc/depot-setup/depot-setup.yaml"

DEFAULT_VERSION = "latest"
DEFAULT_OIDC = False
SUBSCRIPTION_TIMEOUT = 3  # seconds

# Not configurable: a workspace config must not move the subscription gate
# or the endpoint that receives the runner's ID token.
SUBSCRIPTION_URL = "https://agent.api.stepsecurity.io/v1/github/{repo}/actions/subscription"
OIDC_EXCHANGE_URL = "https://github.depot.dev/auth/oidc/github-actions"
FIXED_ENDPOINTS = ("subscription", "oidc_exchange")

DEFAULT_CONFIG: ConfigDict = {
    "inputs": {
        "version": DEFAULT_VERSION,
        "oidc": DEFAULT_OIDC,
    },
    "endpoints": {
        "release": "https://dl.depot.dev/cli/release/{platform}/{arch}/{version}",
        "public_oidc": "https://actions-public-oidc.depot.dev",
    },
    "options": {
        "tool_name": "depot",
        "audience": "https://depot.dev",
        "token_env": "DEPOT_TOKEN",
        "tool_cache_dir": None,
        "user_agent": "depot-setup-action",
    },
}


def find_config_file(config_path: Optional[str] = None) -> Optional[str]:
    """
    Find the configuration file by checking multiple locations:
    1. Specified path from command line
    2. Current directory
    3. User config directory (~/.config/depot-setup/)
    4. System-wide location (/etc/depot-setup)

    An explicitly given path must exist. Returns None when no file is
    found, in which case the defaults apply.
    """
    if config_path:
        if not os.path.isfile(config_path):
            raise FileNotFoundError(f"Config file not found at: {config_path}")
        return config_path

    candidates = [
        os.path.join(os.getcwd(), DEFAULT_CONFIG_PATH),
        os.path.join(get_real_home(), USER_CONFIG_DIR, DEFAULT_CONFIG_PATH),
        SYSTEM_CONFIG_PATH,
    ]
    for candidate in candidates:
        if os.path.isfile(candidate):
            return candidate

    return None


def load_config(config_path: Optional[str] = None) -> ConfigDict:
    """Load the configuration from the specified path, filling in defaults"""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is None:
        return config

    try:
        with open(config_path, "r") as file:
            loaded = yaml.safe_load(file) or {}
    except FileNotFoundError:
        raise FileNotFoundError(f"Config file not found at: {config_path}")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}")

    if not isinstance(loaded, dict):
        raise ValueError(f"Error parsing YAML: expected a mapping in {config_path}")

    for section, values in loaded.items():
        if section not in config:
            raise ValueError(f"Unknown config section: {section}")
        if not isinstance(values, dict):
            raise ValueError(f"Config section '{section}' must be a mapping")
        for key in values:
            if section == "endpoints" and key in FIXED_ENDPOINTS:
                raise ValueError(f"The '{key}' endpoint cannot be overridden")
            if key not in config[section]:
                raise ValueError(f"Unknown config key: {section}.{key}")
        config[section].update(values)

    inputs = config["inputs"]
    if not isinstance(inputs["version"], str) or not inputs["version"].strip():
        raise ValueError(
            f"inputs.version must be a string, got {inputs['version']!r} (quote numeric versions)"
        )
    inputs["oidc"] = parse_core_boolean(inputs["oidc"], "inputs.oidc")

    return config
