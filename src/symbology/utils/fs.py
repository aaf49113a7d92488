"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/utils/fs.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

import re
from pathlib import Path


def ensure_dir(path: str | Path) -> Path:
    """Create directory if it doesn't exist."""
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def slugify(s: str) -> str:
    s = str(s).strip()
    s = re.sub(r"[^\w\-.]+", "_", s)
    return re.sub(r"_{2,}", "_", s).strip("_")
