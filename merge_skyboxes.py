#!/usr/bin/env python3
"""Thin runner for the `skybox_merger` package, delegates to `skybox_merger.cli.main()`.

Run it from the directory holding the tiles:
    python merge_skyboxes.py --delete
"""
import sys

from skybox_merger.cli import main

if __name__ == "__main__":
    sys.exit(main())
