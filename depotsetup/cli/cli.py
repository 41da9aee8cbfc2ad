#!/usr/bin/env python3

import argparse
import sys
from typing import Callable, Optional

from colorama import Fore, Style

from ..core.runner import run_setup
from ..utils.actions import ActionsRuntime
from ..utils.config import find_config_file, load_config
from ..version import __version__


def parse_args(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        description=f"depot-setup v{__version__} - Install the Depot CLI on a CI runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        help="Configuration file (default: depot-setup.yaml if present)",
    )
    parser.add_argument(
        "--cli-version",
        help="Depot CLI version to install (default: INPUT_VERSION or 'latest')",
    )
    parser.add_argument(
        "--oidc",
        dest="oidc",
        action="store_true",
        default=None,
        help="Exchange an OIDC token for a temporary DEPOT_TOKEN",
    )
    parser.add_argument(
        "--no-oidc",
        dest="oidc",
        action="store_false",
        help="Do not attempt an OIDC token exchange",
    )
    parser.add_argument(
        "--version", action="store_true", help="Show the version and exit"
    )

    return parser.parse_args(argv)


def resolve_version_input(args, runtime: ActionsRuntime, config) -> str:
    """Command line first, then action inputs, then the config file"""
    return args.cli_version or runtime.get_input("version", default=config["inputs"]["version"])


def oidc_input(args, runtime: ActionsRuntime, config) -> Callable[[], bool]:
    """Same precedence as the version; read lazily, after the install"""

    def read() -> bool:
        if args.oidc is not None:
            return args.oidc
        return runtime.get_boolean_input("oidc", default=config["inputs"]["oidc"])

    return read


def run_cli(argv=None, runtime: Optional[ActionsRuntime] = None) -> None:
    """Run the command-line interface"""
    args = parse_args(argv)

    if args.version:
        print(f"depot-setup v{__version__}")
        return

    runtime = runtime or ActionsRuntime()

    try:
        config = load_config(find_config_file(args.config))
        version = resolve_version_input(args, runtime, config)
        result = run_setup(runtime, config, version, oidc_input(args, runtime, config))
    except Exception as e:
        runtime.set_failed(str(e))
        sys.exit(1)

    if result.token_exported and not runtime.in_actions:
        print(f"{Fore.GREEN}✅ Temporary Depot token exported{Style.RESET_ALL}")


if __name__ == "__main__":
    run_cli()
