"""Entry point for ``python -m kdlcore`` and the ``kdlcore`` console script."""

import sys

from .main import main

if __name__ == "__main__":
    sys.exit(main())
