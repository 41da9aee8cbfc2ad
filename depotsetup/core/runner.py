#!/usr/bin/env python3

from dataclasses import dataclass
from typing import Callable, Optional, Union

import requests

from ..utils.actions import ActionsRuntime
from ..utils.cache import ToolCache
from ..utils.config import ConfigDict
from ..utils.system import detect_arch, detect_platform
from .auth import actions_oidc_strategy, configure_token, oss_pull_request_strategy
from .installer import InstalledTool, install_cli
from .public_oidc import PublicOIDCClient
from .resolver import resolve_version
from .subscription import validate_subscription


@dataclass(frozen=True)
class SetupResult:
    tool: InstalledTool
    token_exported: bool


def create_session(user_agent: str) -> requests.Session:
    session = requests.Session()
    session.headers["User-Agent"] = user_agent
    return session


def run_setup(
    runtime: ActionsRuntime,
    config: ConfigDict,
    version: str,
    oidc: Union[bool, Callable[[], bool]],
    session: Optional[requests.Session] = None,
    tool_cache: Optional[ToolCache] = None,
) -> SetupResult:
    """
    Install the Depot CLI and, if asked, fetch a temporary token.

    oidc may be a callable; it is only evaluated once the CLI is installed,
    so an invalid oidc input fails the run after the install.
    """
    endpoints = config["endpoints"]
    options = config["options"]
    session = session or create_session(options["user_agent"])

    validate_subscription(runtime, session=session)

    release = resolve_version(
        version,
        detect_platform(),
        detect_arch(),
        session=session,
        url_template=endpoints["release"],
    )

    if tool_cache is None:
        tool_cache = ToolCache.from_environment(
            runtime.environ, default_root=options["tool_cache_dir"], session=session
        )
    tool = install_cli(release, tool_cache, runtime, tool_name=options["tool_name"])

    strategies = [
        actions_oidc_strategy(runtime, session, audience=options["audience"]),
        oss_pull_request_strategy(
            runtime,
            PublicOIDCClient(runtime, session=session, base_url=endpoints["public_oidc"]),
            audience=options["audience"],
        ),
    ]
    enabled = oidc() if callable(oidc) else oidc
    token_exported = configure_token(runtime, enabled, strategies, token_env=options["token_env"])

    return SetupResult(tool=tool, token_exported=token_exported)
