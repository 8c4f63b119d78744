"""Process-wide config and fault adapter, reloaded when the config file changes."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from jsonwire.config.loader import get_config_path, load_config
from jsonwire.config.schema import Config

if TYPE_CHECKING:
    from jsonwire.faults.adapter import FaultAdapter


@dataclass
class _Entry:
    stamp: int | None
    config: Config
    adapter: FaultAdapter | None = None


_lock = threading.RLock()
_entries: dict[Path, _Entry] = {}


def _resolve(config_path: Path | None) -> Path:
    return Path(config_path or get_config_path()).expanduser().resolve()


def _stamp(path: Path) -> int | None:
    """Modification time of the file, None while it does not exist."""
    try:
        return path.stat().st_mtime_ns
    except FileNotFoundError:
        return None


def _entry(config_path: Path | None, force_reload: bool) -> _Entry:
    path = _resolve(config_path)
    stamp = _stamp(path)
    with _lock:
        entry = _entries.get(path)
        if force_reload or entry is None or entry.stamp != stamp:
            entry = _Entry(stamp=stamp, config=load_config(path))
            _entries[path] = entry
        return entry


def get_config(*, config_path: Path | None = None, force_reload: bool = False) -> Config:
    """
    Config loaded from ``config_path`` (the default location when omitted).

    The result is shared until the file is created, edited or removed, or until
    ``force_reload`` is passed.
    """
    return _entry(config_path, force_reload).config


def get_fault_adapter(*, config_path: Path | None = None, force_reload: bool = False) -> FaultAdapter:
    """Fault adapter for the current config, rebuilt whenever the config is reloaded."""
    from jsonwire.faults.adapter import FaultAdapter

    entry = _entry(config_path, force_reload)
    with _lock:
        if entry.adapter is None:
            entry.adapter = FaultAdapter.from_config(entry.config)
        return entry.adapter


def clear_config_cache(*, config_path: Path | None = None) -> None:
    """Drop the cached entry for ``config_path``, or every entry."""
    with _lock:
        if config_path is None:
            _entries.clear()
            return
        _entries.pop(_resolve(config_path), None)
