#!/usr/bin/env python3

import sys
from typing import Optional

import requests

from ..utils.actions import ActionsRuntime
from ..utils.config import SUBSCRIPTION_TIMEOUT, SUBSCRIPTION_URL


def validate_subscription(
    runtime: ActionsRuntime,
    session: Optional[requests.Session] = None,
    url_template: str = SUBSCRIPTION_URL,
) -> None:
    """
    Check the repository's subscription.

    An explicit rejection from the server ends the process with exit code 1.
    A timeout or an unreachable endpoint is only logged.
    """
    api_url = url_template.format(repo=runtime.repository)
    http = session or requests

    try:
        response = http.get(api_url, timeout=SUBSCRIPTION_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        if e.response is not None:
            runtime.error("Subscription is not valid. Reach out to support@stepsecurity.io")
            sys.exit(1)
        runtime.info("Timeout or API not reachable. Continuing to next step.")
