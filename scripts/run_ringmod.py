#!/usr/bin/env python3
"""Main entry point — ring-modulate a WAV file."""

import sys

from ringmod.cli import main

if __name__ == "__main__":
    sys.exit(main())
