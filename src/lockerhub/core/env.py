"""
Project root and `.env` handling.

The API origin and the maps key usually live in a repo-local `.env`, and the session file is
configured as a path relative to the checkout. Both must resolve the same way whether the CLI
runs from the repo root, from `scripts/`, or from an installed console script.

Root lookup order:
1. `LOCKERHUB_PROJECT_ROOT`
2. the directory holding `LOCKERHUB_ENV_FILE`
3. the nearest ancestor (of the cwd, then of this module) with `.env`, `.git`, or
   `pyproject.toml` next to `src/lockerhub`
4. the cwd
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

_ROOT_MARKERS = (".env", ".git")


def _is_root(path: Path) -> bool:
    if any((path / marker).exists() for marker in _ROOT_MARKERS):
        return True
    return (path / "pyproject.toml").is_file() and (path / "src" / "lockerhub").is_dir()


def _search_upwards(start: Path) -> Path | None:
    start = start.resolve()
    for candidate in (start, *start.parents):
        if _is_root(candidate):
            return candidate
    return None


def _explicit_env_file() -> Path | None:
    env_file = os.getenv("LOCKERHUB_ENV_FILE")
    return Path(env_file).expanduser().resolve() if env_file else None


@lru_cache
def get_project_root() -> Path:
    """Return the project root directory (cached)."""
    override = os.getenv("LOCKERHUB_PROJECT_ROOT")
    if override:
        return Path(override).expanduser().resolve()

    env_file = _explicit_env_file()
    if env_file is not None:
        return env_file.parent

    return _search_upwards(Path.cwd()) or _search_upwards(Path(__file__).parent) or Path.cwd().resolve()


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load the project's `.env` once, without overriding variables already set.

    Returns the file that was loaded, or None.
    """
    env_path = _explicit_env_file() or get_project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    """Resolve `path` against the project root unless it is already absolute."""
    p = Path(path).expanduser()
    return p if p.is_absolute() else (get_project_root() / p).resolve()
