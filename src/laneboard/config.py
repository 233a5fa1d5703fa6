"""Tool settings stored in the repository's git config.

Settings live in the ``[laneboard]`` section with hyphenated keys::

    [laneboard]
        branch = laneboard
        client-id = alice
        resync-on-reconnect = true
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from git import Repo

SECTION = "laneboard"

LANEBOARD_DEFAULTS: dict[str, Any] = {
    "branch": "laneboard",
    "client-id": "",
    "resync-on-reconnect": True,
}


def _python_key(git_key: str) -> str:
    """Convert git-style key (hyphenated) to Python-style (underscored)."""
    return git_key.replace("-", "_")


def _git_key(python_key: str) -> str:
    """Convert Python-style key (underscored) to git-style (hyphenated)."""
    return python_key.replace("_", "-")


def _coerce(git_key: str, raw: str) -> Any:
    """Type-coerce a value using the type of its default."""
    default = LANEBOARD_DEFAULTS.get(git_key)
    if isinstance(default, bool):
        return raw.lower() in ("true", "yes", "1", "on")
    if isinstance(default, int):
        return int(raw)
    return raw


@dataclass(frozen=True)
class Config:
    branch: str = LANEBOARD_DEFAULTS["branch"]
    client_id: str = LANEBOARD_DEFAULTS["client-id"]
    resync_on_reconnect: bool = LANEBOARD_DEFAULTS["resync-on-reconnect"]

    def session_client_id(self) -> str:
        """The configured client id, or a fresh random one."""
        return self.client_id or uuid.uuid4().hex[:8]


def read_config(repo_path: str | Path) -> Config:
    """Read the [laneboard] section, with defaults for missing keys."""
    reader = Repo(repo_path).config_reader()
    values = {_python_key(k): v for k, v in LANEBOARD_DEFAULTS.items()}
    if reader.has_section(SECTION):
        for git_k, raw in reader.items(SECTION):
            if git_k in LANEBOARD_DEFAULTS:
                values[_python_key(git_k)] = _coerce(git_k, raw)
    return Config(**values)


def write_config_key(repo_path: str | Path, key: str, value: Any) -> None:
    """Write one key to the repository config. key is python-style."""
    git_k = _git_key(key)
    if git_k not in LANEBOARD_DEFAULTS:
        raise KeyError(key)
    writer = Repo(repo_path).config_writer("repository")
    try:
        if isinstance(value, bool):
            writer.set_value(SECTION, git_k, str(value).lower())
        else:
            writer.set_value(SECTION, git_k, str(value))
    finally:
        writer.release()
