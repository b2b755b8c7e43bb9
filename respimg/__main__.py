"""
Main entry point for running the package as a module.

Usage:
    python -m respimg scan -i images/ -o public/img
    python -m respimg process images/photo.L.jpg -o public/img
    python -m respimg discover -o public/img
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
