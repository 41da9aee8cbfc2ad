#!/usr/bin/env python3

"""
depot-setup - Install the Depot CLI on a CI runner

Usage:
  depot-setup [options]

Options:
  --config FILE          Configuration file (default: depot-setup.yaml if present)
  --cli-version VERSION  Depot CLI version to install (default: INPUT_VERSION or 'latest')
  --oidc / --no-oidc     Exchange an OIDC token for a temporary DEPOT_TOKEN
  --version              Show the version and exit
  --help                 Show this help message

Configuration file is searched in the following locations:
1. Specified path via --config
2. Current directory (depot-setup.yaml)
3. User config directory (~/.config/depot-setup/depot-setup.yaml)
4. System-wide location (/etc/depot-setup/depot-setup.yaml)
"""

from depotsetup import run_cli

if __name__ == "__main__":
    run_cli()
