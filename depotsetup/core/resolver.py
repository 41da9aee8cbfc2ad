#!/usr/bin/env python3

import re
from dataclasses import dataclass
from typing import Any, Optional, Union

import requests

from ..utils.config import DEFAULT_CONFIG

RELEASE_URL = DEFAULT_CONFIG["endpoints"]["release"]

# Release assets live under .../cli/releases/download/v<major>.<minor>.<patch>/...
RELEASE_VERSION_PATTERN = re.compile(r"cli/releases/download/v(\d+\.\d+\.\d+)")


class ResolutionError(Exception):
    """The release API could not resolve the requested version"""


@dataclass(frozen=True)
class ReleaseFound:
    url: str


@dataclass(frozen=True)
class ReleaseError:
    error: str


ReleaseResponse = Union[ReleaseFound, ReleaseError]


@dataclass(frozen=True)
class ResolvedRelease:
    url: str
    version: str


def parse_release_response(body: Any) -> ReleaseResponse:
    """Turn a {ok, url} / {ok, error} body into its variant"""
    if not isinstance(body, dict) or not isinstance(body.get("ok"), bool):
        raise ResolutionError(f"Unexpected response from release API: {body!r}")

    if body["ok"]:
        url = body.get("url")
        if not isinstance(url, str) or not url:
            raise ResolutionError("Release API response is missing a download URL")
        return ReleaseFound(url=url)

    return ReleaseError(error=str(body.get("error", "")))


def extract_version(url: str, requested: str) -> str:
    """
    Pull the x.y.z version out of a release download URL.

    Falls back to the requested version string unchanged when the URL
    does not have the expected shape.
    """
    match = RELEASE_VERSION_PATTERN.search(url)
    return match.group(1) if match else requested


def resolve_version(
    version: str,
    platform: str,
    arch: str,
    session: Optional[requests.Session] = None,
    url_template: str = RELEASE_URL,
) -> ResolvedRelease:
    """Resolve a version ("latest", "2.1.0", ...) to a download URL"""
    http = session or requests
    api_url = url_template.format(platform=platform, arch=arch, version=version)

    response = http.get(api_url)
    try:
        body = response.json()
    except ValueError as e:
        raise ResolutionError(f"Invalid response from release API: {e}")

    release = parse_release_response(body)
    if isinstance(release, ReleaseError):
        raise ResolutionError(release.error)
    if isinstance(release, ReleaseFound):
        return ResolvedRelease(url=release.url, version=extract_version(release.url, version))

    raise AssertionError(f"Unhandled release response: {release!r}")
