#!/usr/bin/env python3
"""mergechunks - inspect and resolve git conflict chunks."""

import sys
from pathlib import Path

# Run from a checkout without installing
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from mergechunks.cli import main  # noqa: E402

if __name__ == "__main__":
    main()
