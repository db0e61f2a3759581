import hashlib
from pathlib import Path
from typing import Union

import orjson

from .schema import Snapshot


def key_for(url: str) -> str:
    return hashlib.sha1(url.encode()).hexdigest()


def save_raw(raw_dir: Union[str, Path], url: str, html: str) -> Path:
    d = Path(raw_dir)
    d.mkdir(parents=True, exist_ok=True)
    p = d / f"{key_for(url)}.html"
    p.write_text(html, encoding="utf-8")
    return p


def write_snapshot(path: Union[str, Path], snapshot: Snapshot) -> Path:
    """Overwrite `path` with the snapshot as indented JSON plus a trailing newline."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    payload = snapshot.model_dump(mode="json", exclude_none=True)
    p.write_bytes(orjson.dumps(payload, option=orjson.OPT_INDENT_2) + b"\n")
    return p
