"""
Polynomial Canvas: interactive least-squares polynomial fitting.

Run ``python main.py --help`` for the command-line options.
"""

import sys

from poly_canvas.app import main

if __name__ == "__main__":
    sys.exit(main())
