"""Rewrite media imports/exports inside ES module source text."""

from __future__ import annotations

import re
import textwrap
from dataclasses import dataclass, field
from typing import Optional, Tuple

from loguru import logger

from .bindings import map_statement
from .core.generator import render_bindings
from .core.models import ResolutionConfig, Specifier, Statement, StatementKind
from .probing import MetadataProber


STATEMENT_RE = re.compile(
    r"(?:^|(?<=;))(?P<indent>[ \t]*)(?P<kind>import|export)\s+"
    r"(?P<clause>(?:(?!\b(?:import|export)\b)[\w$*{}\s,])+?)\s+from\s*"
    r"(?P<quote>['\"])(?P<source>[^'\"\n]+)(?P=quote)[ \t]*;?",
    re.MULTILINE,
)

_IDENT = r"[A-Za-z_$][\w$]*"
CLAUSE_RE = re.compile(
    rf"(?:(?P<default>{_IDENT})\s*(?:,\s*|$))?"
    rf"(?:\{{(?P<named>[^}}]*)\}}|\*\s+as\s+(?P<ns>{_IDENT})|(?P<star>\*))?"
)
NAMED_RE = re.compile(rf"(?P<name>{_IDENT})(?:\s+as\s+(?P<alias>{_IDENT}))?")


@dataclass(slots=True)
class TransformResult:
    code: str
    statements_rewritten: int = 0
    statements_skipped: int = 0
    warnings: list[str] = field(default_factory=list)


def parse_clause(clause: str, kind: StatementKind) -> Optional[Tuple[Specifier, ...]]:
    """Turn an import/export clause into specifiers; ``None`` if unrecognized."""
    clause = clause.strip()
    match = CLAUSE_RE.fullmatch(clause)
    if not clause or match is None:
        return None

    specifiers: list[Specifier] = []
    default = match.group("default")
    if default:
        specifiers.append(Specifier(kind="default", imported="default", local=default))
    if match.group("ns"):
        specifiers.append(Specifier(kind="namespace", imported="*", local=match.group("ns")))
    if match.group("star"):
        # bare ``*`` is only valid as ``export * from``
        if kind == "import" or default:
            return None
        specifiers.append(Specifier(kind="namespace", imported="*", local="*"))
    named = match.group("named")
    if named is not None:
        for item in named.split(","):
            item = item.strip()
            if not item:
                continue
            item_match = NAMED_RE.fullmatch(item)
            if item_match is None:
                return None
            name = item_match.group("name")
            alias = item_match.group("alias") or name
            specifiers.append(Specifier(kind="named", imported=name, local=alias))
    return tuple(specifiers)


def transform_module(
    code: str,
    config: ResolutionConfig,
    filename: str | None = None,
    root: str | None = None,
    prober: MetadataProber | None = None,
) -> TransformResult:
    result = TransformResult(code=code)
    pieces: list[str] = []
    last = 0

    for match in STATEMENT_RE.finditer(code):
        kind = match.group("kind")
        source = match.group("source")
        specifiers = parse_clause(match.group("clause"), kind)
        if specifiers is None:
            result.warnings.append(f"Unrecognized {kind} clause for {source}")
            continue

        statement = Statement(kind=kind, source=source, specifiers=specifiers)
        bindings = map_statement(statement, config, filename=filename, root=root, prober=prober)
        if bindings is None:
            result.statements_skipped += 1
            continue
        if not bindings:
            result.warnings.append(f"No specifier of {kind} from {source} matched a media field")
            continue

        pieces.append(code[last:match.start()])
        rendered = render_bindings(bindings)
        lead = match.group("indent")
        if match.start() == 0 or code[match.start() - 1] == "\n":
            rendered = textwrap.indent(rendered, lead)
        else:
            # follows ``;`` on the same line: keep the separating whitespace only
            rendered = lead + rendered
        pieces.append(rendered)
        last = match.end()
        result.statements_rewritten += 1

    pieces.append(code[last:])
    result.code = "".join(pieces)
    logger.debug(
        f"Transformed {filename or '<module>'}: {result.statements_rewritten} rewritten, "
        f"{result.statements_skipped} skipped"
    )
    return result
