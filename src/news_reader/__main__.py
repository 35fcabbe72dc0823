"""Allow ``python -m news_reader``."""

import sys

from news_reader.cli import main

if __name__ == "__main__":
    sys.exit(main())
