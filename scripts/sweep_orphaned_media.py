"""
Delete uploaded images that no blog post references any more.

Requires DATABASE_URL; exits 1 without touching the media store otherwise.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from blog_backend.orphans import main


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")
    sys.exit(main())
