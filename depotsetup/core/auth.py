#!/usr/bin/env python3

"""
Short-lived Depot token acquisition.

Strategies are tried in order and the first one that produces a token
wins. A strategy that raises is logged and skipped; ending up with no
token at all is fine, later steps have to cope with that.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import requests

from ..utils.actions import ActionsRuntime
from ..utils.config import DEFAULT_CONFIG, OIDC_EXCHANGE_URL
from .public_oidc import PublicOIDCClient

AUDIENCE = DEFAULT_CONFIG["options"]["audience"]
TOKEN_ENV = DEFAULT_CONFIG["options"]["token_env"]


@dataclass
class TokenStrategy:
    # Used in "Unable to exchange <description> for temporary Depot token"
    description: str
    fetch: Callable[[], Optional[str]]


def is_oss_pull_request(event_name: str, payload: Dict[str, Any]) -> bool:
    """True for a pull request from a fork into a public repository"""
    if event_name != "pull_request":
        return False

    repository = payload.get("repository") or {}
    if repository.get("private") is not False:
        return False

    pull_request = payload.get("pull_request")
    if not pull_request:
        return False

    head_repo = (pull_request.get("head") or {}).get("repo") or {}
    return head_repo.get("full_name") != repository.get("full_name")


def actions_oidc_strategy(
    runtime: ActionsRuntime,
    session: requests.Session,
    exchange_url: str = OIDC_EXCHANGE_URL,
    audience: str = AUDIENCE,
) -> TokenStrategy:
    """Exchange the workflow's own OIDC token for a Depot token"""

    def fetch() -> Optional[str]:
        oidc_token = runtime.get_id_token(audience, session=session)
        response = session.post(exchange_url, json={"token": oidc_token})
        response.raise_for_status()
        result = response.json()
        if result and result.get("token"):
            runtime.info("Exchanged GitHub Actions OIDC token for temporary Depot token")
            return result["token"]
        return None

    return TokenStrategy(description="GitHub OIDC token", fetch=fetch)


def oss_pull_request_strategy(
    runtime: ActionsRuntime,
    client: PublicOIDCClient,
    audience: str = AUDIENCE,
) -> TokenStrategy:
    """Fall back to the public OIDC provider for pull requests from forks"""

    def fetch() -> Optional[str]:
        if not is_oss_pull_request(runtime.event_name, runtime.event_payload):
            return None
        runtime.info("Attempting to acquire open-source pull request OIDC token")
        token = client.get_id_token(audience)
        runtime.info("Using open-source pull request OIDC token for Depot authentication")
        return token

    return TokenStrategy(description="open-source pull request OIDC token", fetch=fetch)


def acquire_token(strategies: List[TokenStrategy], runtime: ActionsRuntime) -> Optional[str]:
    """Return the first token any strategy yields, or None"""
    for strategy in strategies:
        try:
            token = strategy.fetch()
        except Exception as e:
            runtime.info(
                f"Unable to exchange {strategy.description} for temporary Depot token: {e}"
            )
            continue
        if token:
            return token
    return None


def configure_token(
    runtime: ActionsRuntime,
    enabled: bool,
    strategies: List[TokenStrategy],
    token_env: str = TOKEN_ENV,
) -> bool:
    """
    Export a temporary token into token_env when enabled.

    A token the user already set is left alone. Returns True when a new
    token was exported.
    """
    if not enabled:
        return False
    if runtime.environ.get(token_env):
        return False

    token = acquire_token(strategies, runtime)
    if not token:
        return False

    runtime.set_secret(token)
    runtime.export_variable(token_env, token)
    return True
