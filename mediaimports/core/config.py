"""Normalization of user supplied options into a ``ResolutionConfig``."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Tuple

from loguru import logger

from .errors import ConfigurationError
from .models import (
    DEFAULT_IMAGE_EXTENSIONS,
    DEFAULT_VIDEO_EXTENSIONS,
    Base64Options,
    HashOptions,
    ResolutionConfig,
)
from .storage import load_options


_ALIASES = {
    "baseDir": "base_dir",
    "pathnamePrefix": "pathname_prefix",
    "outputRoot": "output_root",
    "imageExtensions": "image_extensions",
    "videoExtensions": "video_extensions",
    "maxSize": "max_size",
}

_KNOWN_KEYS = {
    "base_dir",
    "pathname_prefix",
    "output_root",
    "image_extensions",
    "video_extensions",
    "hash",
    "md5",
    "base64",
}


def normalize_config(
    options: Mapping[str, Any] | None = None,
    cwd: str | Path | None = None,
) -> ResolutionConfig:
    """Resolve raw plugin options once into an immutable configuration.

    Accepts the camelCase names used in option files (``baseDir``) as well as
    snake_case spellings. ``hash`` falls back to the legacy ``md5`` key when
    it is not set.
    """
    raw = _canonical_keys(options or {})
    unknown = set(raw) - _KNOWN_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown option(s): {', '.join(sorted(unknown))}")

    cwd = os.path.abspath(cwd or os.getcwd())

    base_dir = raw.get("base_dir") or cwd
    if not isinstance(base_dir, (str, Path)):
        raise ConfigurationError(f"baseDir must be a path, got {base_dir!r}")

    output_root = raw.get("output_root")
    if output_root is not None and not isinstance(output_root, (str, Path)):
        raise ConfigurationError(f"outputRoot must be a path, got {output_root!r}")

    prefix = raw.get("pathname_prefix") or ""
    if not isinstance(prefix, str):
        raise ConfigurationError(f"pathnamePrefix must be a string, got {prefix!r}")

    hash_value = raw.get("hash")
    if hash_value is None:
        hash_value = raw.get("md5", False)

    config = ResolutionConfig(
        base_dir=_absolute(base_dir, cwd),
        pathname_prefix=prefix,
        output_root=_absolute(output_root, cwd) if output_root else None,
        image_extensions=_extensions(
            raw.get("image_extensions", DEFAULT_IMAGE_EXTENSIONS), "imageExtensions"
        ),
        video_extensions=_extensions(
            raw.get("video_extensions", DEFAULT_VIDEO_EXTENSIONS), "videoExtensions"
        ),
        hash=_hash_options(hash_value),
        base64=_base64_options(raw.get("base64", False)),
    )
    logger.debug(f"Normalized media import options: {config}")
    return config


def load_config(path: str | Path, cwd: str | Path | None = None) -> ResolutionConfig:
    """Load options from a JSON/TOML file.

    Relative directories inside the file are resolved against ``cwd`` (the
    file's own directory when omitted).
    """
    path = Path(path)
    options = load_options(path)
    if not isinstance(options, Mapping):
        raise ConfigurationError(f"Options file must contain a mapping: {path}", str(path))
    return normalize_config(options, cwd=cwd or path.resolve().parent)


def _canonical_keys(options: Mapping[str, Any]) -> dict[str, Any]:
    return {_ALIASES.get(key, key): value for key, value in options.items()}


def _absolute(value: str | Path, cwd: str) -> str:
    return os.path.normpath(os.path.join(cwd, os.fspath(value)))


def _extensions(values: Iterable[str], name: str) -> Tuple[str, ...]:
    if isinstance(values, str) or not isinstance(values, Iterable):
        raise ConfigurationError(f"{name} must be a list of extensions, got {values!r}")
    seen: list[str] = []
    for value in values:
        if not isinstance(value, str):
            raise ConfigurationError(f"{name} entries must be strings, got {value!r}")
        token = value.strip().lstrip(".").lower()
        if token and token not in seen:
            seen.append(token)
    return tuple(seen)


def _hash_options(value: Any) -> Optional[HashOptions]:
    if isinstance(value, bool) or value is None:
        return HashOptions() if value else None
    if isinstance(value, Mapping):
        opts = _canonical_keys(value)
        unknown = set(opts) - {"delimiter", "length", "algo"}
        if unknown:
            raise ConfigurationError(f"Unknown hash option(s): {', '.join(sorted(unknown))}")
        length = opts.get("length")
        if length is not None and (isinstance(length, bool) or not isinstance(length, int)):
            raise ConfigurationError(f"hash.length must be an integer, got {length!r}")
        return HashOptions(
            delimiter=str(opts.get("delimiter", "-")),
            length=length,
            algo=str(opts.get("algo", "md5")).lower(),
        )
    raise ConfigurationError(f"hash must be a boolean or a mapping, got {value!r}")


def _base64_options(value: Any) -> Optional[Base64Options]:
    if isinstance(value, bool) or value is None:
        return Base64Options() if value else None
    if isinstance(value, Mapping):
        opts = _canonical_keys(value)
        unknown = set(opts) - {"max_size"}
        if unknown:
            raise ConfigurationError(f"Unknown base64 option(s): {', '.join(sorted(unknown))}")
        max_size = opts.get("max_size", 8192)
        if isinstance(max_size, bool) or not isinstance(max_size, int):
            raise ConfigurationError(f"base64.maxSize must be an integer, got {max_size!r}")
        return Base64Options(max_size=max_size)
    raise ConfigurationError(f"base64 must be a boolean or a mapping, got {value!r}")
