"""Command line entry point: generate TypeScript for one world."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from borsh_gen_ts.builder import build_world
from borsh_gen_ts.config import GeneratorConfig
from borsh_gen_ts.errors import ResolutionDefect, UnsupportedSchema
from borsh_gen_ts.generator import generate_ts
from borsh_gen_ts.schema import SchemaValidationError, load_schema


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Generate @dao-xyz/borsh TypeScript classes from a Borsh schema"
    )
    parser.add_argument(
        "schema",
        type=Path,
        help="Path to the JSON schema container; its root must be a tuple of world types",
    )
    parser.add_argument(
        "-w", "--world",
        help="Name of the generated world file (default: schema file stem)",
    )
    parser.add_argument(
        "-o", "--out-dir",
        type=Path,
        default=None,
        help="Output directory (default: $OUT_DIR or 'outdir')",
    )
    parser.add_argument(
        "--no-fmt",
        action="store_true",
        help="Do not run the external formatter after generation",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log the resolution table and other debug output",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = dataclasses.replace(GeneratorConfig.from_env(), fmt=not args.no_fmt)
    if args.out_dir is not None:
        config = dataclasses.replace(config, out_dir=args.out_dir)
    world = args.world or args.schema.stem

    try:
        container = load_schema(args.schema)
        roots, table = build_world(container)
    except (FileNotFoundError, SchemaValidationError, ValueError) as e:
        # SchemaError and JSON decode errors are ValueErrors
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (UnsupportedSchema, ResolutionDefect) as e:
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    try:
        out_dir = config.ensure_out_dir()
        path = generate_ts(out_dir, world, roots, table, config)
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1

    print(f"Wrote {path}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
