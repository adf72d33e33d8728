"""Render a resolution table as TypeScript classes with `@dao-xyz/borsh` decorators."""

from __future__ import annotations

import logging
from pathlib import Path

from borsh_gen_ts.builder import ResolutionTable
from borsh_gen_ts.config import GeneratorConfig
from borsh_gen_ts.formatter import fmt_check
from borsh_gen_ts.types import (
    Alias,
    Field,
    PlainString,
    Record,
    Target,
    Union,
    Variant,
    WellKnown,
)

logger = logging.getLogger(__name__)

IMPORTS = """\
// GENERATED! DO NOT MODIFY MANUALLY!
// Requires TypeScript v5.0 or later.
import {
  deserialize,
  field,
  fixedArray,
  option,
  serialize,
  variant,
  vec,
} from "@dao-xyz/borsh";
"""

# Member name of the single field of transparent wrappers and variant payloads
PLACEHOLDER = "_0"

UNION_SUFFIX = "Enum"


class TypeScriptEmitter:
    """Renders targets as classes: records and aliases as plain classes, unions
    as a marker class plus one subclass per variant.

    Subclass and override `render_union` to pick another union convention.
    """

    def __init__(self, indent: str = "  ") -> None:
        self.indent = indent

    def emit(self, table: ResolutionTable) -> str:
        """Render every table entry, in table order, after the import preamble."""
        lines: list[str] = []
        for declaration, target in table.items():
            lines.extend(self.render(declaration, target))
        return IMPORTS + "".join(line + "\n" for line in lines)

    def render(self, declaration: str, target: Target) -> list[str]:
        if isinstance(target, (WellKnown, PlainString)):
            # Builtins or imports in TS, nothing to generate
            return []
        elif isinstance(target, Record):
            return self.render_record(declaration, target)
        elif isinstance(target, Alias):
            return self.render_alias(declaration, target)
        elif isinstance(target, Union):
            return self.render_union(target)
        raise TypeError(f"Cannot render {target!r}")

    def field_type(self, target: Target) -> str:
        """Borsh type descriptor for `@field({ type: ... })`."""
        if isinstance(target, WellKnown):
            if target.fixed_array is not None:
                element = self.field_type(target.inner) if target.inner is not None else f'"{target.borsh}"'
                return f"fixedArray({element}, {target.fixed_array})"
            if target.option:
                inner = self.field_type(target.inner) if target.inner is not None else f'"{target.borsh}"'
                return f"option({inner})"
            return f'"{target.borsh}"'
        elif isinstance(target, PlainString):
            return '"string"'
        # Generated classes are referenced by constructor
        return target.ts_name

    def render_field(self, name: str, target: Target, ts: str | None = None) -> list[str]:
        if ts is None:
            ts = target.ts_name
        return [
            f"{self.indent}@field({{ type: {self.field_type(target)} }})",
            f"{self.indent}{name}: {ts};",
        ]

    def _class(self, name: str, fields: list[Field]) -> list[str]:
        lines = [f"export class {name} {{"]
        for f in fields:
            lines.extend(self.render_field(f.name, f.target))
        lines.append(f"{self.indent}constructor(data: {name}) {{")
        lines.append(f"{self.indent * 2}Object.assign(this, data);")
        lines.append(f"{self.indent}}}")
        lines.append("}")
        return lines

    def render_record(self, declaration: str, record: Record) -> list[str]:
        return self._class(declaration, list(record.fields))

    def render_alias(self, declaration: str, alias: Alias) -> list[str]:
        return self._class(declaration, [Field(name=PLACEHOLDER, target=alias.target)])

    def render_union(self, union: Union) -> list[str]:
        discriminants = ", ".join(str(d) for d in union.discriminants)
        lines = [
            "",
            f"@variant([{discriminants}])",
            f"export class {union.symbol} {{}}",
        ]
        for v in union.variants:
            lines.append("")
            lines.append(f"@variant({v.discriminant})")
            lines.append(f"export class {v.symbol} extends {union.symbol} {{")
            lines.extend(self.render_payload(union, v))
            lines.append("}")
        return lines

    def render_payload(self, union: Union, variant: Variant) -> list[str]:
        payload = variant.payload
        if payload is None:
            return []
        if isinstance(payload, Record):
            # Struct like variant. Its fields go on the variant class instead of a
            # `_0` member: the record class was removed from the table, and the
            # encoded bytes are the same either way.
            lines: list[str] = []
            for f in payload.fields:
                lines.extend(self.render_field(f.name, f.target))
            return lines

        encoded = payload
        if isinstance(payload, Alias) and payload.name == payload.target.ts_name:
            # Wrapper surfaced under its inner name, its own class is never generated
            encoded = payload.target
        ts = strip_union_prefix(payload.ts_name, union.symbol)
        return self.render_field(PLACEHOLDER, encoded, ts)


def strip_union_prefix(name: str, union_symbol: str) -> str:
    """Drop the union's own name from a payload display name.

    `ActionKindEnum` with payload `ActionKindDeposit` -> `Deposit`.

    Only the displayed member type changes, the field descriptor keeps the
    full name. The stripped name need not be a generated class: payload
    `ActionKindDepositBody` shows as `DepositBody`, which nothing declares.
    """
    prefix = union_symbol
    if prefix.endswith(UNION_SUFFIX):
        prefix = prefix[: -len(UNION_SUFFIX)]
    if prefix and name.startswith(prefix) and name != prefix:
        return name[len(prefix):]
    return name


def generate_ts(
    out_dir: Path,
    world: str,
    roots: list[Target],
    table: ResolutionTable,
    config: GeneratorConfig | None = None,
    emitter: TypeScriptEmitter | None = None,
) -> Path:
    """Write `<out_dir>/<world>.ts` and kick off the formatter.

    Any previous file is replaced. The table is already in declaration order
    (see `ResolutionTable`), so no sorting happens here.

    Raises:
        OSError: If the stale file cannot be deleted or the new one created.
    """
    if config is None:
        config = GeneratorConfig(out_dir=out_dir)
    if emitter is None:
        emitter = TypeScriptEmitter()

    logger.debug("generating %s from %d roots: %r", world, len(roots), table)
    source = emitter.emit(table)

    world_path = out_dir / f"{world}.ts"
    try:
        world_path.unlink()
    except FileNotFoundError:
        pass
    with open(world_path, "x", encoding="utf-8", newline="\n") as output:
        output.write(source)
    logger.info("wrote %s", world_path)

    if config.fmt:
        fmt_check(out_dir, config.fmt_command)
    return world_path
