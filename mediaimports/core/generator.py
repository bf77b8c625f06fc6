"""JavaScript rendering of neutral bindings."""

from __future__ import annotations

import json
import math
from typing import Any, Iterable

from jinja2 import DictLoader, Environment, select_autoescape

from .models import Binding


BINDING_TEMPLATE = (
    "{% if binding.exported and binding.name == 'default' %}"
    "export default {{ binding.value | js }};"
    "{% else %}"
    "{% if binding.exported %}export {% endif %}"
    "const {{ binding.name }} = {{ binding.value | js }};"
    "{% endif %}"
)


def js_literal(value: Any, indent: int = 0) -> str:
    if isinstance(value, dict):
        if not value:
            return "{}"
        pad = "  " * (indent + 1)
        props = [f"{pad}{key}: {js_literal(item, indent + 1)}" for key, item in value.items()]
        return "{\n" + ",\n".join(props) + "\n" + "  " * indent + "}"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, int):
        return str(value)
    if value is None:
        return "undefined"
    return json.dumps(str(value))


def _env() -> Environment:
    env = Environment(
        loader=DictLoader({"binding.js.j2": BINDING_TEMPLATE}),
        autoescape=select_autoescape(["html", "xml"]),
    )
    env.filters["js"] = js_literal
    return env


_ENV = _env()


def render_bindings(bindings: Iterable[Binding]) -> str:
    tpl = _ENV.get_template("binding.js.j2")
    return "\n".join(tpl.render(binding=binding) for binding in bindings)
