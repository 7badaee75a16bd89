"""
Run with: python -m plasmafractal
"""
import sys

from plasmafractal.app.main import main

if __name__ == "__main__":
    sys.exit(main())
