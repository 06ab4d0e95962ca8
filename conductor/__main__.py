"""Main entry point for the conductor CLI."""

import sys

from conductor.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
