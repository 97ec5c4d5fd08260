from __future__ import annotations
import json
import hashlib
from pathlib import Path
from typing import Any, Dict, Optional
from datetime import datetime, timezone

import pandas as pd

DATA_ROOT = Path('data')
RUNS_LOG = Path('metadata/pipeline_runs.jsonl')


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def sha256_json(data: Any) -> str:
    h = hashlib.sha256()
    h.update(json.dumps(data, sort_keys=True, ensure_ascii=False, default=str).encode('utf-8'))
    return h.hexdigest()


def save_raw(resource: str, payload: Any, run_id: str, root: Path = DATA_ROOT) -> Path:
    ts = utc_now_iso().replace(':', '-').replace('.', '-')
    out_dir = root / 'raw' / resource
    out_dir.mkdir(parents=True, exist_ok=True)
    fpath = out_dir / f"{ts}_{run_id}.json"
    fpath.write_text(json.dumps(payload, ensure_ascii=False, indent=2, default=str), encoding='utf-8')
    return fpath


def snapshot_path(resource: str, root: Path = DATA_ROOT) -> Path:
    return root / 'normalized' / f"{resource}.csv"


def load_snapshot(resource: str, root: Path = DATA_ROOT) -> Optional[pd.DataFrame]:
    path = snapshot_path(resource, root)
    if not path.exists():
        return None
    return pd.read_csv(path, dtype=str)


def persist_snapshot(resource: str, df: pd.DataFrame, root: Path = DATA_ROOT) -> Path:
    path = snapshot_path(resource, root)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    return path


def append_run_log(record: Dict[str, Any], path: Path = RUNS_LOG) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('a', encoding='utf-8') as f:
        f.write(json.dumps(record, ensure_ascii=False) + '\n')
