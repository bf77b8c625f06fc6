import json
import tomllib
from pathlib import Path

from .errors import MediaIOError


def read_bytes(path: str | Path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise MediaIOError(f"Unable to read {path}: {exc}", str(path)) from exc


def read_text(path: str | Path) -> str:
    return read_bytes(path).decode("utf-8")


def write_bytes(path: str | Path, data: bytes) -> None:
    try:
        Path(path).write_bytes(data)
    except OSError as exc:
        raise MediaIOError(f"Unable to write {path}: {exc}", str(path)) from exc


def stat_size(path: str | Path) -> int:
    try:
        return Path(path).stat().st_size
    except OSError as exc:
        raise MediaIOError(f"Unable to stat {path}: {exc}", str(path)) from exc


def make_dirs(path: str | Path) -> None:
    try:
        Path(path).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise MediaIOError(f"Unable to create {path}: {exc}", str(path)) from exc


def load_options(path: str | Path) -> dict:
    """Read a raw options mapping from a JSON or TOML file."""
    path = Path(path)
    if path.suffix.lower() == ".toml":
        return tomllib.loads(read_text(path))
    return json.loads(read_text(path))
