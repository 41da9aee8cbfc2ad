#!/usr/bin/env python3

import os
import shutil
from dataclasses import dataclass

from ..utils.actions import ActionsRuntime
from ..utils.cache import ToolCache
from .resolver import ResolvedRelease

TOOL_NAME = "depot"


@dataclass(frozen=True)
class InstalledTool:
    name: str
    version: str
    path: str


def install_cli(
    release: ResolvedRelease,
    tool_cache: ToolCache,
    runtime: ActionsRuntime,
    tool_name: str = TOOL_NAME,
) -> InstalledTool:
    """Put the resolved release on PATH, downloading it only on a cache miss"""
    tool_path = tool_cache.find(tool_name, release.version)

    if not tool_path:
        runtime.info(f"⬇️  Downloading {tool_name} {release.version} from {release.url}")
        tar_path = tool_cache.download_tool(release.url)
        try:
            extracted_path = tool_cache.extract_tar(tar_path)
        finally:
            if os.path.exists(tar_path):
                os.remove(tar_path)
        try:
            tool_path = tool_cache.cache_dir(
                os.path.join(extracted_path, "bin"), tool_name, release.version
            )
        finally:
            shutil.rmtree(extracted_path, ignore_errors=True)

    runtime.add_path(tool_path)
    runtime.info(f"{tool_name} {release.version} is installed")
    return InstalledTool(name=tool_name, version=release.version, path=tool_path)
