"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/utils/logging.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(
    output_dir: str | Path | None = None,
    *,
    level: str = "INFO",
    console: Console | None = None,
) -> logging.Logger:
    """Configure the 'symbology' logger: Rich console output, plus symbology.log when output_dir is given."""
    logger = logging.getLogger("symbology")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if output_dir is not None:
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(out / "symbology.log", encoding="utf-8")
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logger.addHandler(fh)

    sh = RichHandler(
        console=console or Console(stderr=True),
        markup=False,
        rich_tracebacks=True,
        show_level=True,
        show_time=False,
        show_path=False,
    )
    logger.addHandler(sh)
    return logger
