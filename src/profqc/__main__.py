"""Entry point for profqc."""

import sys

from profqc.cli.main import cli

if __name__ == "__main__":
    sys.exit(cli())
