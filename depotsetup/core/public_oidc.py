#!/usr/bin/env python3

"""
Client for the public OIDC provider used by open-source pull requests.

Workflows triggered from forks get no id-token permission, so the
provider issues tokens by challenge instead: the run claims a token,
prints the challenge code into its own job log, and the provider reads
the log back through the GitHub API before releasing the token.
"""

import time
from typing import Callable, Optional

import requests

from ..utils.actions import ActionsRuntime, OIDCError
from ..utils.config import DEFAULT_CONFIG

PUBLIC_OIDC_URL = DEFAULT_CONFIG["endpoints"]["public_oidc"]
EXCHANGE_ATTEMPTS = 60
EXCHANGE_INTERVAL = 1.0  # seconds


class PublicOIDCClient:
    def __init__(
        self,
        runtime: ActionsRuntime,
        session: Optional[requests.Session] = None,
        base_url: str = PUBLIC_OIDC_URL,
        attempts: int = EXCHANGE_ATTEMPTS,
        interval: float = EXCHANGE_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.runtime = runtime
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.attempts = attempts
        self.interval = interval
        self.sleep = sleep

    def _post(self, url: str, payload: dict) -> dict:
        try:
            response = self.session.post(url, json=payload)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise OIDCError(f"Request to {url} failed: {e}")

    def get_id_token(self, audience: str) -> str:
        claim = self._post(
            f"{self.base_url}/claim",
            {
                "aud": audience,
                "eventName": self.runtime.event_name,
                "repo": self.runtime.repository,
                "runID": self.runtime.run_id,
            },
        )
        claim_id = claim.get("claimID")
        challenge_code = claim.get("challengeCode")
        exchange_url = claim.get("exchangeURL")
        if not (claim_id and challenge_code and exchange_url):
            raise OIDCError("Public OIDC provider returned an incomplete claim")

        # Must reach the job log verbatim; the provider looks for it there.
        self.runtime.info(f"Verifying pull request run with challenge code: {challenge_code}")

        for attempt in range(self.attempts):
            if attempt:
                self.sleep(self.interval)
            result = self._post(exchange_url, {"claimID": claim_id})
            token = result.get("token")
            if token:
                return token

        raise OIDCError(f"Public OIDC provider did not issue a token for claim {claim_id}")
