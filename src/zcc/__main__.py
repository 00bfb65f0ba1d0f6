"""Allow ``python -m zcc``."""
import sys

from zcc.cli._dispatcher import main

if __name__ == "__main__":
    sys.exit(main())
