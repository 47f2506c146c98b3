#!/usr/bin/env python3
"""Run the subjectaccess CLI from a source checkout."""

import sys

from subjectaccess.cli import main

if __name__ == "__main__":
    sys.exit(main())
