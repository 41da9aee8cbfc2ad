#!/usr/bin/env python3

"""
depot-setup - Install the Depot CLI on a CI runner
Features:
- Resolves a requested version (or "latest") through the Depot release API
- Reuses the runner's tool cache between runs
- Optional OIDC exchange for a temporary DEPOT_TOKEN, including pull requests from forks
"""

from .version import __version__

from .core.auth import configure_token, is_oss_pull_request
from .core.installer import InstalledTool, install_cli
from .core.resolver import ResolutionError, ResolvedRelease, resolve_version
from .core.runner import SetupResult, run_setup
from .core.subscription import validate_subscription
from .cli.cli import run_cli
