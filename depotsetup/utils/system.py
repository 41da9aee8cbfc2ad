#!/usr/bin/env python3

import os
import platform
import sys

# Host names as reported by the release API
PLATFORM_NAMES = {
    "linux": "linux",
    "darwin": "darwin",
    "win32": "win32",
    "cygwin": "win32",
}

ARCH_NAMES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
    "armv6l": "arm",
    "arm": "arm",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
}


def get_real_home() -> str:
    """Get the real user's home directory even when running with sudo"""
    if "SUDO_USER" in os.environ and os.environ.get("HOME") == "/root":
        real_user = os.environ["SUDO_USER"]
        return os.path.expanduser(f"~{real_user}")
    return os.path.expanduser("~")


def detect_platform() -> str:
    """Return the platform name used in release URLs (linux, darwin, win32)"""
    current_platform = sys.platform
    for prefix, name in PLATFORM_NAMES.items():
        if current_platform.startswith(prefix):
            return name
    return current_platform


def detect_arch() -> str:
    """Return the architecture name used in release URLs (x64, arm64, ...)"""
    machine = platform.machine().lower()
    return ARCH_NAMES.get(machine, machine)
