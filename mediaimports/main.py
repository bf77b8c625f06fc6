import argparse
import sys
from pathlib import Path

from loguru import logger

from .core.config import load_config, normalize_config
from .core.errors import MediaImportError
from .core.logging import setup_logging
from .transform import transform_module


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="media-imports",
        description="Replace media imports in an ES module with descriptor constants.",
    )
    parser.add_argument("file", type=Path, help="JavaScript module to transform")
    parser.add_argument("--config", type=Path, help="JSON or TOML options file")
    parser.add_argument("--root", help="Resolve references against this directory instead of the module's directory")
    parser.add_argument("-o", "--output", type=Path, help="Write the result here instead of stdout")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(debug_mode=args.debug)

    try:
        config = load_config(args.config) if args.config else normalize_config()
        code = args.file.read_text(encoding="utf-8")
        filename = None if args.root else str(args.file)
        result = transform_module(code, config, filename=filename, root=args.root)
    except (MediaImportError, OSError) as exc:
        logger.error(f"{args.file}: {exc}")
        return 1

    for warning in result.warnings:
        logger.warning(warning)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(result.code, encoding="utf-8")
        logger.info(f"Wrote {args.output} ({result.statements_rewritten} statement(s) rewritten)")
    else:
        sys.stdout.write(result.code)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
