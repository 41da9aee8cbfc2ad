#!/usr/bin/env python3

import os
import re
import shutil
import subprocess
import tempfile
import uuid
from typing import Mapping, Optional

import requests

from .system import detect_arch, get_real_home

# Default paths
CACHE_DIR = os.path.join(get_real_home(), ".cache/depot-setup/tool-cache")

EXPLICIT_VERSION = re.compile(r"^v?\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.+-]*)?$")


def is_explicit_version(version: str) -> bool:
    """True for a concrete x.y.z version (not a range or a tag like 'latest')"""
    return bool(EXPLICIT_VERSION.match(version.strip()))


def clean_version(version: str) -> str:
    version = version.strip()
    return version[1:] if is_explicit_version(version) and version.startswith("v") else version


class ToolCache:
    """
    Versioned tool directory store, laid out like the hosted runner cache:
    <root>/<tool>/<version>/<arch>, completed by an <arch>.complete marker.
    """

    def __init__(
        self,
        root: Optional[str] = None,
        temp_dir: Optional[str] = None,
        arch: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.root = root or CACHE_DIR
        self.temp_dir = temp_dir or tempfile.gettempdir()
        self.arch = arch or detect_arch()
        self.session = session or requests.Session()

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str],
        default_root: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> "ToolCache":
        """Use the runner's RUNNER_TOOL_CACHE and RUNNER_TEMP when present"""
        return cls(
            root=environ.get("RUNNER_TOOL_CACHE") or default_root,
            temp_dir=environ.get("RUNNER_TEMP") or None,
            session=session,
        )

    def _tool_path(self, tool: str, version: str) -> str:
        return os.path.join(self.root, tool, clean_version(version), self.arch)

    def find(self, tool: str, version: str) -> Optional[str]:
        """Return the cached directory for (tool, version), or None"""
        if not is_explicit_version(version):
            return None
        tool_path = self._tool_path(tool, version)
        if os.path.isdir(tool_path) and os.path.isfile(f"{tool_path}.complete"):
            return tool_path
        return None

    def download_tool(self, url: str) -> str:
        """Download url into a fresh file under the temp dir and return its path"""
        os.makedirs(self.temp_dir, exist_ok=True)
        download_path = os.path.join(self.temp_dir, str(uuid.uuid4()))

        with self.session.get(url, stream=True) as response:
            response.raise_for_status()
            try:
                with open(download_path, "wb") as f:
                    for data in response.iter_content(64 * 1024):
                        f.write(data)
            except Exception:
                if os.path.exists(download_path):
                    os.remove(download_path)
                raise
        return download_path

    def extract_tar(self, archive_path: str) -> str:
        """Extract a gzipped tarball into a fresh directory and return it"""
        destination = os.path.join(self.temp_dir, str(uuid.uuid4()))
        os.makedirs(destination, exist_ok=True)
        try:
            subprocess.run(["tar", "xzf", archive_path, "-C", destination], check=True)
        except subprocess.CalledProcessError:
            shutil.rmtree(destination, ignore_errors=True)
            raise
        return destination

    def cache_dir(self, source_dir: str, tool: str, version: str) -> str:
        """Copy source_dir into the cache under (tool, version) and mark it complete"""
        if not os.path.isdir(source_dir):
            raise FileNotFoundError(f"sourceDir is not a directory: {source_dir}")

        tool_path = self._tool_path(tool, version)
        marker = f"{tool_path}.complete"

        # Drop any half-written entry from an interrupted run
        if os.path.exists(tool_path):
            shutil.rmtree(tool_path)
        if os.path.exists(marker):
            os.remove(marker)

        shutil.copytree(source_dir, tool_path)
        with open(marker, "w"):
            pass
        return tool_path
