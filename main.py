#!/usr/bin/env python3
"""
Run Finger Paint from a source checkout.
"""

import sys

from fingerpaint.cli import main


if __name__ == "__main__":
    sys.exit(main())
