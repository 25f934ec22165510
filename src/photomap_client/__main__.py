"""Entry point for ``python -m photomap_client``."""

import sys

from photomap_client.cli import main

if __name__ == "__main__":
    sys.exit(main())
