#!/usr/bin/env python3
"""
Simple runner script for minipatch.

Runs the command line from a source checkout without installing the
package first.
"""

import sys
from pathlib import Path


def main():
    sys.path.insert(0, str(Path(__file__).resolve().parent))
    try:
        from minipatch.main import cli
    except ImportError as e:
        print(f"Import error: {e}")
        print("\nPlease install the dependencies first:")
        print("  pip install -e .")
        sys.exit(1)
    cli()


if __name__ == "__main__":
    main()
