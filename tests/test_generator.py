from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from mediaimports.core.generator import js_literal, render_bindings
from mediaimports.core.models import Binding


def test_js_literal_scalars() -> None:
    assert js_literal(1.0) == "1"
    assert js_literal(0.667) == "0.667"
    assert js_literal(280) == "280"
    assert js_literal('say "hi"\n') == '"say \\"hi\\"\\n"'
    assert js_literal(True) == "true"


def test_js_literal_object_is_indented() -> None:
    assert js_literal({"a": 1, "b": {"c": "d"}}) == '{\n  a: 1,\n  b: {\n    c: "d"\n  }\n}'
    assert js_literal({}) == "{}"


def test_render_local_constant() -> None:
    assert render_bindings([Binding(name="w", value=280)]) == "const w = 280;"


def test_render_exported_constant_and_default() -> None:
    out = render_bindings(
        [
            Binding(name="width", value=280, exported=True),
            Binding(name="default", value={"src": "/a.png"}, exported=True),
        ]
    )
    assert out == 'export const width = 280;\nexport default {\n  src: "/a.png"\n};'


def test_markup_in_values_is_not_escaped() -> None:
    svg = '<svg width="1" height="1"></svg>'
    assert render_bindings([Binding(name="content", value=svg)]) == f"const content = {js_literal(svg)};"
    assert "&lt;" not in render_bindings([Binding(name="content", value=svg)])


def test_environment_is_shared_between_renders() -> None:
    from mediaimports.core import generator

    env = generator._ENV
    render_bindings([Binding(name="a", value=1)])
    render_bindings([Binding(name="b", value=2)])
    assert generator._ENV is env
    assert env.filters["js"] is js_literal
