"""Input loading and atomic-write helpers.

Purpose
-------
- ``load_raw_csv()`` is the single place the raw millennium CSV is read. Any
  failure there (missing file, malformed or empty file) is surfaced as a
  ``DataLoadError`` carrying the original message; it is never retried.
- ``write_csv()`` / ``write_json()`` write exports atomically: the content
  goes to a temporary file in the target directory which then replaces the
  target. An existing target is copied to ``<stem>_prev<suffix>`` first.
"""
from __future__ import annotations

import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional

import pandas as pd

logger = logging.getLogger(__name__)


class DataLoadError(RuntimeError):
    """The raw dataset could not be loaded."""


def load_raw_csv(path: Path | str) -> pd.DataFrame:
    """Read the raw CSV with every cell kept as text.

    ``keep_default_na=False`` keeps '' and 'n/a' as literal strings so the
    parse stage decides what is missing.
    """
    p = Path(path)
    logger.info("Loading UK Millennium dataset from %s", p)
    try:
        df = pd.read_csv(p, dtype=str, keep_default_na=False)
    except Exception as exc:
        logger.error("Failed to load data: %s", exc)
        raise DataLoadError(f"Data loading failed: {exc}") from exc

    logger.info("Loaded %d rows, %d columns", len(df), len(df.columns))
    logger.debug("Available columns: %s", list(df.columns))
    return df


def _compute_backup_path(p: Path, backup_name: Optional[str]) -> Path:
    """<stem>_prev<suffix> by default; a name with a suffix is used verbatim."""
    if backup_name is None:
        return p.with_name(p.stem + "_prev" + p.suffix)
    if Path(backup_name).suffix:
        return p.with_name(backup_name)
    return p.with_name(p.stem + "_" + backup_name + p.suffix)


def _atomic_write_text(content: str, path: Path, backup_name: Optional[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        shutil.copy2(path, _compute_backup_path(path, backup_name))
    with tempfile.NamedTemporaryFile(
        "w", delete=False, dir=str(path.parent), prefix=path.name + ".tmp.", encoding="utf-8"
    ) as tf:
        tf.write(content)
        tmp = Path(tf.name)
    tmp.replace(path)


def write_csv(
    df: pd.DataFrame,
    path: Path | str,
    *,
    dry_run: bool = False,
    backup_name: Optional[str] = None,
) -> Path:
    p = Path(path)
    if dry_run:
        logger.info("[dry-run] would write %d rows -> %s", len(df), p)
        return p
    _atomic_write_text(df.to_csv(index=False), p, backup_name)
    logger.info("Wrote %d rows -> %s", len(df), p)
    return p


def write_json(
    obj,
    path: Path | str,
    *,
    dry_run: bool = False,
    backup_name: Optional[str] = None,
) -> Path:
    p = Path(path)
    if dry_run:
        logger.info("[dry-run] would write JSON -> %s", p)
        return p
    _atomic_write_text(json.dumps(obj, ensure_ascii=False, indent=2), p, backup_name)
    logger.info("Wrote JSON -> %s", p)
    return p
