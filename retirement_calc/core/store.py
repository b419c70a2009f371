# retirement_calc/core/store.py
"""
On-disk persistence for the calculator snapshot.

- main record: one JSON document holding the full snapshot
- portfolio snapshots: JSON list with auto-incremented ids
- flat-file fallback cache: arbitrary JSON values by key
"""

from __future__ import annotations
import os, json, logging
from typing import Any, List, Optional, Tuple

from .. import config
from .projection.models import PortfolioSnapshot, RetirementCalculatorData

logger = logging.getLogger(__name__)

DATA_DIR = config.DATA_DIR
CACHE_SUBDIR = "cache"

def _ensure_dir(path: str) -> str:
    os.makedirs(path, exist_ok=True)
    return path

def _main_path() -> str:
    return os.path.join(_ensure_dir(DATA_DIR), config.MAIN_DATA_FILE)

def _snapshots_path() -> str:
    return os.path.join(_ensure_dir(DATA_DIR), config.SNAPSHOTS_FILE)

def _key_path(key: str) -> str:
    return os.path.join(_ensure_dir(os.path.join(DATA_DIR, CACHE_SUBDIR)), f"{key}.json")

def _write_json(path: str, obj: Any):
    tmp = path + ".tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2)
    os.replace(tmp, path)

# ---------- main record ----------

def save_data(data: RetirementCalculatorData):
    _write_json(_main_path(), {"id": "mainData", "data": data.to_dict()})

def get_data() -> Optional[RetirementCalculatorData]:
    p = _main_path()
    if not os.path.exists(p): return None
    with open(p, "r", encoding="utf-8") as f:
        obj = json.load(f)
    return RetirementCalculatorData.from_dict(obj["data"])

# ---------- portfolio snapshots ----------

def _read_snapshot_rows() -> List[dict]:
    p = _snapshots_path()
    if not os.path.exists(p): return []
    with open(p, "r", encoding="utf-8") as f:
        return json.load(f)

def add_snapshot(snapshot: PortfolioSnapshot) -> int:
    rows = _read_snapshot_rows()
    new_id = max((r["id"] for r in rows), default=0) + 1
    rows.append({"id": new_id, **snapshot.to_dict()})
    _write_json(_snapshots_path(), rows)
    return new_id

def get_snapshots() -> List[Tuple[int, PortfolioSnapshot]]:
    """All stored snapshots as (id, snapshot), oldest first."""
    out = [(r["id"], PortfolioSnapshot.from_dict(r)) for r in _read_snapshot_rows()]
    out.sort(key=lambda x: (x[1].date, x[0]))
    return out

def delete_snapshot(snapshot_id: int) -> bool:
    rows = _read_snapshot_rows()
    kept = [r for r in rows if r["id"] != snapshot_id]
    if len(kept) == len(rows):
        return False
    _write_json(_snapshots_path(), kept)
    return True

def clear_all():
    for p in (_main_path(), _snapshots_path()):
        if os.path.exists(p):
            os.remove(p)

# ---------- flat-file fallback cache ----------

def save_key(key: str, obj: Any) -> bool:
    try:
        _write_json(_key_path(key), obj)
        return True
    except (OSError, TypeError, ValueError) as e:
        logger.error("Failed to save cache key %s: %s", key, e)
        return False

def get_key(key: str) -> Optional[Any]:
    p = _key_path(key)
    if not os.path.exists(p): return None
    try:
        with open(p, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.error("Failed to read cache key %s: %s", key, e)
        return None

def remove_key(key: str):
    p = _key_path(key)
    if os.path.exists(p):
        os.remove(p)
