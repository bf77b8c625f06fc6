"""Resolution of a media reference into a ``MediaDescriptor``."""

from __future__ import annotations

import base64
import hashlib
import os
import posixpath
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

from loguru import logger

from .core.errors import EmitFailed, MediaIOError, ResolutionError, UnsupportedDigestAlgorithm
from .core.models import (
    AssetClass,
    Base64Options,
    HashOptions,
    MediaDescriptor,
    ResolutionConfig,
    extension_of,
)
from .core.storage import make_dirs, read_bytes, stat_size, write_bytes
from .probing import LocalProber, MetadataProber


# Variable-length digests cannot produce a plain hex string.
_UNSUPPORTED_DIGESTS = {"shake_128", "shake_256"}


@dataclass(slots=True)
class ResolvedPath:
    source_path: str
    pathname: str


class MediaFile:
    """Source bytes of one reference, read at most once."""

    def __init__(self, path: str) -> None:
        self.path = path
        self._data: bytes | None = None

    @property
    def data(self) -> bytes:
        if self._data is None:
            self._data = read_bytes(self.path)
        return self._data

    @property
    def size(self) -> int:
        if self._data is not None:
            return len(self._data)
        return stat_size(self.path)


def resolve_path(
    raw_path: str,
    config: ResolutionConfig,
    filename: str | None = None,
    root: str | None = None,
) -> ResolvedPath:
    if raw_path.startswith("/"):
        source_path = raw_path
    else:
        context = os.path.dirname(os.path.abspath(filename)) if filename else root
        if not context:
            raise ResolutionError(
                f"Cannot resolve {raw_path!r}: no originating file and no root", raw_path
            )
        source_path = os.path.abspath(os.path.join(context, raw_path))

    pathname = source_path.replace(config.base_dir, "", 1)
    pathname = pathname.replace(os.sep, "/")
    if config.pathname_prefix:
        pathname = posixpath.normpath(f"{config.pathname_prefix}/{pathname}")
    return ResolvedPath(source_path=source_path, pathname=pathname)


def digest(data: bytes, algorithm: str, path: str | None = None) -> str:
    name = algorithm.lower()
    if name in _UNSUPPORTED_DIGESTS:
        raise UnsupportedDigestAlgorithm(algorithm, path)
    try:
        hasher = hashlib.new(name)
    except (ValueError, TypeError) as exc:
        raise UnsupportedDigestAlgorithm(algorithm, path) from exc
    hasher.update(data)
    return hasher.hexdigest()


def hash_pathname(pathname: str, media: MediaFile, options: HashOptions) -> tuple[str, str]:
    """Splice the content digest into ``pathname``; returns (pathname, hash)."""
    content_hash = digest(media.data, options.algo, media.path)
    if options.length is not None:
        content_hash = content_hash[: max(4, options.length)]

    dirname, basename = posixpath.split(pathname)
    stem, dot, rest = basename.partition(".")
    hashed = f"{stem}{options.delimiter}{content_hash}{dot}{rest}"
    return posixpath.join(dirname, hashed), content_hash


def inline_src(
    media: MediaFile,
    asset_class: AssetClass,
    type_token: str,
    options: Base64Options,
) -> str | None:
    """Return a data URI when the file is strictly smaller than ``max_size``."""
    if media.size >= options.max_size:
        return None
    payload = base64.b64encode(media.data).decode("ascii")
    return f"data:{asset_class.value}/{type_token};base64,{payload}"


def emit(pathname: str, media: MediaFile, output_root: str) -> Path:
    destination = Path(output_root) / pathname.lstrip("/")
    try:
        make_dirs(destination.parent)
        write_bytes(destination, media.data)
    except MediaIOError as exc:
        if exc.path == media.path:
            raise
        raise EmitFailed(f"Failed to emit {media.path} to {destination}: {exc}", media.path) from exc
    logger.info(f"Emitted {media.path} -> {destination}")
    return destination


def ratio(numerator: int, denominator: int) -> float:
    if not denominator:
        return 0.0
    # exact ties round up (0.3125 -> 0.313)
    value = Decimal(numerator / denominator).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    return float(value)


def create_media_descriptor(
    raw_path: str,
    config: ResolutionConfig,
    filename: str | None = None,
    root: str | None = None,
    prober: MetadataProber | None = None,
) -> MediaDescriptor:
    """Resolve one reference: classify, probe, hash, inline and emit."""
    resolved = resolve_path(raw_path, config, filename, root)
    source_path = resolved.source_path
    pathname = resolved.pathname
    media = MediaFile(source_path)

    asset_class = config.classify(source_path) or AssetClass.IMAGE
    probe = (prober or LocalProber()).probe(source_path, asset_class)
    if not probe.width or not probe.height:
        logger.warning(f"{source_path} has a zero dimension ({probe.width}x{probe.height})")

    content = None
    if extension_of(source_path) == "svg":
        content = media.data.decode("utf-8", errors="replace")

    content_hash = None
    if config.hash is not None:
        pathname, content_hash = hash_pathname(pathname, media, config.hash)

    src = pathname
    if config.base64 is not None:
        src = inline_src(media, asset_class, probe.type, config.base64) or pathname

    if config.output_root:
        emit(pathname, media, config.output_root)

    descriptor = MediaDescriptor(
        pathname=pathname,
        src=src,
        width=probe.width,
        height=probe.height,
        aspect_ratio=ratio(probe.width, probe.height),
        height_to_width_ratio=ratio(probe.height, probe.width),
        type=probe.type,
        content=content,
        hash=content_hash,
    )
    logger.debug(f"Resolved {raw_path} -> {descriptor.pathname} ({descriptor.width}x{descriptor.height})")
    return descriptor
