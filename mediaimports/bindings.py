"""
Mapping of a resolved descriptor onto the specifiers of an import/export.

The output is a list of neutral ``Binding`` records; turning them into real
declarations is left to the host (see ``core.generator``).
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from .core.models import Binding, MediaDescriptor, ResolutionConfig, Specifier, Statement
from .probing import MetadataProber
from .resolver import create_media_descriptor


_MISSING = object()


def descriptor_object(descriptor: MediaDescriptor) -> Dict[str, Any]:
    """Fields bound to a default specifier.

    Falsy values (``width: 0``, ``hash: ""``) are left out together with the
    absent ones.
    """
    return {key: value for key, value in descriptor.to_dict().items() if value}


def lookup_field(descriptor: MediaDescriptor, name: str) -> Any:
    return descriptor.to_dict().get(name, _MISSING)


def map_import(descriptor: MediaDescriptor, specifiers: Sequence[Specifier]) -> List[Binding]:
    bindings: List[Binding] = []
    default = next((s for s in specifiers if s.kind == "default"), None)
    if default is not None:
        bindings.append(Binding(name=default.local, value=descriptor_object(descriptor)))

    for spec in specifiers:
        if spec.kind != "named":
            continue
        value = lookup_field(descriptor, spec.imported)
        if value is _MISSING:
            logger.debug(f"No field {spec.imported!r} on media descriptor; dropping specifier")
            continue
        bindings.append(Binding(name=spec.local, value=value))
    return bindings


def map_export(descriptor: MediaDescriptor, specifiers: Sequence[Specifier]) -> List[Binding]:
    default = find_default_export(specifiers)
    if default is not None:
        # A default export wins over every named specifier in the statement.
        return [Binding(name=default.local, value=descriptor_object(descriptor), exported=True)]

    bindings: List[Binding] = []
    for spec in specifiers:
        if spec.kind != "named":
            continue
        value = lookup_field(descriptor, spec.imported)
        if value is _MISSING:
            logger.debug(f"No field {spec.imported!r} on media descriptor; dropping specifier")
            continue
        bindings.append(Binding(name=spec.local, value=value, exported=True))
    return bindings


def find_default_export(specifiers: Sequence[Specifier]) -> Optional[Specifier]:
    """Default-export-from specifier first, then a re-export of ``default``."""
    for spec in specifiers:
        if spec.kind == "default":
            return spec
    for spec in specifiers:
        if spec.kind == "named" and spec.imported == "default":
            return spec
    return None


def map_statement(
    statement: Statement,
    config: ResolutionConfig,
    filename: str | None = None,
    root: str | None = None,
    prober: MetadataProber | None = None,
) -> Optional[List[Binding]]:
    """Bindings replacing ``statement``.

    Returns ``None`` when the source is not a handled media extension; an
    empty list means the statement matched but no specifier produced output.
    Both leave the statement untouched.
    """
    if not config.handles(statement.source):
        logger.debug(f"Skipping {statement.kind} of {statement.source}: not a media extension")
        return None

    descriptor = create_media_descriptor(
        statement.source, config, filename=filename, root=root, prober=prober
    )
    if statement.kind == "export":
        return map_export(descriptor, statement.specifiers)
    return map_import(descriptor, statement.specifiers)
