"""Entry point for running the whiteboard as a module: python -m whiteboard"""

import sys
from .ui import main

if __name__ == "__main__":
    sys.exit(main())
