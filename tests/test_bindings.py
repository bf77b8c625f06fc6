from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from conftest import StubProber
from mediaimports.bindings import (
    descriptor_object,
    find_default_export,
    map_export,
    map_import,
    map_statement,
)
from mediaimports.core.config import normalize_config
from mediaimports.core.models import Binding, MediaDescriptor, Specifier, Statement
from mediaimports.probing import MetadataProber


DESCRIPTOR = MediaDescriptor(
    pathname="/media-file.jpg",
    src="/media-file.jpg",
    width=280,
    height=280,
    aspect_ratio=1.0,
    height_to_width_ratio=1.0,
    type="jpeg",
)


def _default(name: str) -> Specifier:
    return Specifier(kind="default", imported="default", local=name)


def _named(name: str, alias: str | None = None) -> Specifier:
    return Specifier(kind="named", imported=name, local=alias or name)


def test_default_object_omits_absent_fields() -> None:
    obj = descriptor_object(DESCRIPTOR)
    assert list(obj) == [
        "pathname",
        "src",
        "type",
        "width",
        "height",
        "aspectRatio",
        "heightToWidthRatio",
    ]


def test_default_object_omits_falsy_fields() -> None:
    zero = MediaDescriptor(
        pathname="/z.png",
        src="/z.png",
        width=0,
        height=4,
        aspect_ratio=0.0,
        height_to_width_ratio=0.0,
        type="png",
        hash="",
    )
    obj = descriptor_object(zero)
    assert "width" not in obj
    assert "aspectRatio" not in obj
    assert "hash" not in obj
    assert obj["height"] == 4


def test_import_default_and_named_with_alias() -> None:
    bindings = map_import(DESCRIPTOR, [_default("img"), _named("width", "w"), _named("pathname")])
    assert bindings[0] == Binding(name="img", value=descriptor_object(DESCRIPTOR))
    assert bindings[1:] == [Binding(name="w", value=280), Binding(name="pathname", value="/media-file.jpg")]


def test_named_import_of_absent_field_is_dropped() -> None:
    bindings = map_import(DESCRIPTOR, [_named("content"), _named("height", "h"), _named("nope")])
    assert bindings == [Binding(name="h", value=280)]


def test_named_import_of_present_zero_still_binds() -> None:
    zero = MediaDescriptor("/z.png", "/z.png", 0, 4, 0.0, 0.0, "png")
    assert map_import(zero, [_named("width")]) == [Binding(name="width", value=0)]


def test_namespace_specifiers_produce_nothing() -> None:
    spec = Specifier(kind="namespace", imported="*", local="media")
    assert map_import(DESCRIPTOR, [spec]) == []


def test_export_named_fields() -> None:
    bindings = map_export(DESCRIPTOR, [_named("width"), _named("height", "h"), _named("content")])
    assert bindings == [
        Binding(name="width", value=280, exported=True),
        Binding(name="h", value=280, exported=True),
    ]


def test_export_default_wins_over_named_specifiers() -> None:
    bindings = map_export(DESCRIPTOR, [_named("width"), _named("default"), _named("height")])
    assert bindings == [Binding(name="default", value=descriptor_object(DESCRIPTOR), exported=True)]


def test_export_default_from_keeps_exported_name() -> None:
    bindings = map_export(DESCRIPTOR, [_default("mediaFile"), _named("width")])
    assert bindings == [Binding(name="mediaFile", value=descriptor_object(DESCRIPTOR), exported=True)]


def test_find_default_export_prefers_default_from_form() -> None:
    specs = [_named("default", "alias"), _default("media")]
    assert find_default_export(specs) == _default("media")
    assert find_default_export([_named("width")]) is None


class ExplodingProber(MetadataProber):
    def probe(self, path, asset_class):
        raise AssertionError("skipped statements must not be probed")


def test_unhandled_extension_is_skipped() -> None:
    config = normalize_config({"imageExtensions": []})
    statement = Statement(kind="import", source="media-file.jpg", specifiers=(_named("width"),))
    assert map_statement(statement, config, root="/tmp", prober=ExplodingProber()) is None


def test_non_media_source_is_skipped() -> None:
    statement = Statement(kind="import", source="react", specifiers=(_default("React"),))
    assert map_statement(statement, normalize_config(), prober=ExplodingProber()) is None


def test_matched_statement_without_usable_specifiers(media_dir: Path) -> None:
    config = normalize_config({"baseDir": str(media_dir)})
    statement = Statement(kind="import", source="media-file.jpg", specifiers=(_named("content"),))
    assert map_statement(statement, config, root=str(media_dir), prober=StubProber()) == []


def test_map_statement_routes_exports(media_dir: Path) -> None:
    config = normalize_config({"baseDir": str(media_dir)})
    statement = Statement(kind="export", source="media-file.jpg", specifiers=(_named("src", "url"),))
    bindings = map_statement(statement, config, root=str(media_dir), prober=StubProber())
    assert bindings == [Binding(name="url", value="/media-file.jpg", exported=True)]
