#!/usr/bin/env python3
"""
Check label cross-references in Org documents.

Usage:
    python scripts/check_references.py notes/ --report reports/refs.json
    python scripts/check_references.py paper.org --resolve eq:energy
"""

import sys

from labelref.cli import main


if __name__ == "__main__":
    sys.exit(main())
