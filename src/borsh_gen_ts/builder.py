"""Convert a Borsh schema container into a TS generator friendly tree.

Targets a WIT like world approach: a world is a tuple of root types, and
different worlds (host vs guest, client vs server, public vs private, ...) can
provide different views of the same types.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterator

from borsh_gen_ts import schema
from borsh_gen_ts.errors import DuplicateDeclaration, Error, ResolutionDefect, SchemaError, UnsupportedSchema
from borsh_gen_ts.parsing import parse_option_type
from borsh_gen_ts.schema import SchemaContainer
from borsh_gen_ts.types import (
    PRIMITIVE_TYPE_NAMES,
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


class Parent(Enum):
    """Where the declaration being resolved is used.

    Rust <-> TS (and Rust <-> Borsh schema) have no one to one correspondence
    and TS has several ways to express the same thing, so the parent decides
    which pattern a single unnamed field wrapper turns into.
    See https://github.com/dao-xyz/borsh-ts/issues/28 for enums.
    """

    UNION = "union"
    RECORD = "record"
    UNSPECIFIED = "unspecified"


class ResolutionTable:
    """Declaration -> target, in the order resolution completed.

    Entries are only added once everything they reference has been added,
    so iteration order is a valid declaration order for the emitter.
    """

    def __init__(self) -> None:
        self._targets: dict[str, Target] = {}
        self._in_progress: set[str] = set()

    def get(self, declaration: str) -> Target | None:
        return self._targets.get(declaration)

    def insert(self, declaration: str, target: Target) -> Target:
        """Record a resolved target. Declarations are unique in Borsh schema, so a repeat is a bug."""
        if declaration in self._targets:
            raise DuplicateDeclaration(declaration)
        self._targets[declaration] = target
        return target

    def remove(self, declaration: str) -> Target:
        return self._targets.pop(declaration)

    def begin(self, declaration: str) -> None:
        """Mark a declaration as being resolved."""
        if declaration in self._in_progress:
            raise SchemaError(Error.E0004, declaration)
        self._in_progress.add(declaration)

    def end(self, declaration: str) -> None:
        self._in_progress.discard(declaration)

    def items(self) -> Iterator[tuple[str, Target]]:
        return iter(list(self._targets.items()))

    def keys(self) -> list[str]:
        return list(self._targets.keys())

    def __contains__(self, declaration: str) -> bool:
        return declaration in self._targets

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._targets))

    def __repr__(self) -> str:
        return f"ResolutionTable({self._targets!r})"


def build_world(container: SchemaContainer) -> tuple[list[Target], ResolutionTable]:
    """Resolve every root type of a world.

    The container's root declaration must be a tuple; each element is resolved
    as an independent root sharing one table.

    Raises:
        SchemaValidationError: If the container does not validate.
        ValueError: If the root is not a tuple.
    """
    container.validate()

    world = container.get_definition(container.declaration)
    if not isinstance(world, schema.Tuple):
        raise ValueError(f"World '{container.declaration}' must be a tuple, got {type(world).__name__}")

    table = ResolutionTable()
    roots: list[Target] = []
    for declaration in world.elements:
        roots.append(resolve(container, table, declaration, Parent.UNSPECIFIED))
    logger.debug("resolved %d roots into %d declarations", len(roots), len(table))
    return roots, table


def resolve(container: SchemaContainer, table: ResolutionTable, declaration: str, parent: Parent) -> Target:
    """Resolve a declaration into a target, memoized through `table`."""
    existing = table.get(declaration)
    if existing is not None:
        return existing

    if declaration in PRIMITIVE_TYPE_NAMES:
        return table.insert(declaration, WellKnown.primitive(declaration))

    table.begin(declaration)
    try:
        inner = parse_option_type(declaration)
        if inner is not None:
            inner_target = resolve(container, table, inner, Parent.UNSPECIFIED)
            return table.insert(declaration, WellKnown.optional(inner, inner_target))

        definition = container.get_definition(declaration)
        if definition is None:
            raise ResolutionDefect(f"No definition for '{declaration}'")
        target = _resolve_definition(container, table, declaration, definition, parent)
        return table.insert(declaration, target)
    finally:
        table.end(declaration)


def _resolve_definition(
    container: SchemaContainer,
    table: ResolutionTable,
    declaration: str,
    definition: schema.Definition,
    parent: Parent,
) -> Target:
    if isinstance(definition, schema.Primitive):
        raise ResolutionDefect(f"Primitive '{declaration}' has no TypeScript mapping")
    elif isinstance(definition, schema.Sequence):
        return _resolve_sequence(container, table, definition)
    elif isinstance(definition, schema.Tuple):
        raise SchemaError(Error.E0002, declaration)
    elif isinstance(definition, schema.Enum):
        return _resolve_enum(container, table, declaration, definition)
    elif isinstance(definition, schema.Struct):
        return _resolve_struct(container, table, declaration, definition, parent)
    raise ResolutionDefect(f"Unknown definition for '{declaration}': {definition!r}")


def _element_ts(target: Target) -> tuple[str, Target]:
    """Display name and encoding target for a fixed array element."""
    if isinstance(target, (WellKnown, Record)):
        return target.ts_name, target
    if isinstance(target, Alias):
        inner = target.target
        if isinstance(inner, (WellKnown, Record)):
            return inner.ts_name, inner
        raise SchemaError(Error.E0001, target.name)
    raise ResolutionDefect(f"Unsupported fixed array element {target!r}")


def _resolve_sequence(container: SchemaContainer, table: ResolutionTable, definition: schema.Sequence) -> Target:
    if not definition.is_fixed:
        return PlainString()

    element = resolve(container, table, definition.elements, Parent.UNSPECIFIED)
    ts, inner = _element_ts(element)
    fixed_length = definition.length_range[0]
    return WellKnown.fixed_length_array(definition.elements, fixed_length, ts, inner)


def _is_unit(container: SchemaContainer, declaration: str) -> bool:
    definition = container.get_definition(declaration)
    if isinstance(definition, schema.Struct):
        return isinstance(definition.fields, schema.Empty)
    if isinstance(definition, schema.Tuple):
        return not definition.elements
    return declaration == "()"


def _resolve_enum(
    container: SchemaContainer, table: ResolutionTable, declaration: str, definition: schema.Enum
) -> Union:
    if definition.tag_width != 1:
        # https://github.com/near/borsh/issues/151
        raise UnsupportedSchema(f"Enum '{declaration}' has a {definition.tag_width} byte tag")

    variants: list[Variant] = []
    for discriminant, name, payload_declaration in definition.variants:
        payload: Target | None = None
        if not _is_unit(container, payload_declaration):
            fresh = payload_declaration not in table
            payload = resolve(container, table, payload_declaration, Parent.UNION)
            # Variant payloads live inside the variant class only
            if fresh:
                table.remove(payload_declaration)
        variants.append(Variant(symbol=f"{name}Variant", discriminant=discriminant & 0xFF, payload=payload))

    return Union(symbol=f"{declaration}Enum", variants=tuple(variants))


def _resolve_struct(
    container: SchemaContainer,
    table: ResolutionTable,
    declaration: str,
    definition: schema.Struct,
    parent: Parent,
) -> Target:
    fields = definition.fields
    if isinstance(fields, schema.NamedFields):
        resolved = [
            Field(name=name, target=resolve(container, table, field_declaration, Parent.RECORD))
            for name, field_declaration in fields.fields
        ]
        return Record(symbol=declaration, fields=tuple(resolved))
    elif isinstance(fields, schema.UnnamedFields):
        if len(fields.fields) != 1:
            raise SchemaError(Error.E0010, declaration)
        inner = resolve(container, table, fields.fields[0], parent)
        if isinstance(inner, Alias):
            raise SchemaError(Error.E0001, declaration)
        name = inner.ts_name if parent is Parent.UNION else declaration
        return Alias(name=name, target=inner)
    raise SchemaError(Error.E0005, declaration)


