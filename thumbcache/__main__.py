"""
Main entry point for running the package as a module.

Usage:
    python -m thumbcache list ~/Pictures
    python -m thumbcache thumbnail photo.jpg --size 30
    python -m thumbcache clean
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
