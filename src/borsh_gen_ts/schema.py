"""Borsh schema container: the declaration -> definition graph to generate from."""

from __future__ import annotations

import json
import logging
import typing
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from borsh_gen_ts.parsing import parse_option_type

logger = logging.getLogger(__name__)


class SchemaValidationError(ValueError):
    """The container is not a valid Borsh schema (e.g. dangling declarations)."""


@dataclass(frozen=True)
class Primitive:
    """Fixed size primitive of `size` bytes."""

    size: int


@dataclass(frozen=True)
class Sequence:
    """Sequence of `elements`.

    `length_width` is the byte width of the length prefix; zero means the
    length is fixed and `length_range` is `(N, N)`.
    """

    length_width: int
    length_range: tuple[int, int]
    elements: str

    @property
    def is_fixed(self) -> bool:
        return self.length_width == 0


@dataclass(frozen=True)
class Tuple:
    """Anonymous product of `elements`."""

    elements: tuple[str, ...]


@dataclass(frozen=True)
class Enum:
    """Tagged union. Each variant is `(discriminant, name, payload_declaration)`."""

    tag_width: int
    variants: tuple[tuple[int, str, str], ...]


@dataclass(frozen=True)
class NamedFields:
    fields: tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class UnnamedFields:
    fields: tuple[str, ...]


@dataclass(frozen=True)
class Empty:
    pass


Fields = typing.Union[NamedFields, UnnamedFields, Empty]


@dataclass(frozen=True)
class Struct:
    fields: Fields = field(default_factory=Empty)


Definition = typing.Union[Primitive, Sequence, Tuple, Enum, Struct]

# Built in declarations the Borsh library never emits definitions for
BUILTIN_DECLARATIONS = frozenset(
    ["u8", "u16", "u32", "u64", "u128", "i8", "i16", "i32", "i64", "i128", "bool", "f32", "f64", "()"]
)

MAX_WIDTH = 8


def references(definition: Definition) -> Iterator[str]:
    """Yield every declaration a definition refers to, in schema order."""
    if isinstance(definition, Sequence):
        yield definition.elements
    elif isinstance(definition, Tuple):
        yield from definition.elements
    elif isinstance(definition, Enum):
        for _, _, declaration in definition.variants:
            yield declaration
    elif isinstance(definition, Struct):
        fields = definition.fields
        if isinstance(fields, NamedFields):
            for _, declaration in fields.fields:
                yield declaration
        elif isinstance(fields, UnnamedFields):
            yield from fields.fields


class SchemaContainer:
    """Root declaration plus all definitions reachable from it."""

    def __init__(self, declaration: str, definitions: dict[str, Definition]) -> None:
        self.declaration = declaration
        self.definitions = definitions

    def get_definition(self, declaration: str) -> Definition | None:
        """Get a definition by declaration."""
        return self.definitions.get(declaration)

    def _is_known(self, declaration: str) -> bool:
        if declaration in self.definitions or declaration in BUILTIN_DECLARATIONS:
            return True
        # Hand written documents may leave out the `Option<T>` enum definitions
        inner = parse_option_type(declaration)
        return inner is not None and self._is_known(inner)

    def validate(self) -> None:
        """Check the container is well formed.

        Raises:
            SchemaValidationError: On a dangling declaration, an unknown root,
                or tag/length widths the Borsh format cannot express.
        """
        if not self._is_known(self.declaration):
            raise SchemaValidationError(f"Missing definition for root declaration '{self.declaration}'")

        for name, definition in self.definitions.items():
            if isinstance(definition, Sequence):
                width = definition.length_width
                if width > MAX_WIDTH:
                    raise SchemaValidationError(f"'{name}': length width {width} is too wide")
                if width != 0 and width & (width - 1):
                    raise SchemaValidationError(f"'{name}': length width {width} is not a power of two")
                start, end = definition.length_range
                if start > end:
                    raise SchemaValidationError(f"'{name}': empty length range {start}..={end}")
            elif isinstance(definition, Enum):
                width = definition.tag_width
                if width > MAX_WIDTH:
                    raise SchemaValidationError(f"'{name}': tag width {width} is too wide")
                if width == 0 and definition.variants:
                    raise SchemaValidationError(f"'{name}': tag width 0 cannot hold variants")

            for declaration in references(definition):
                if not self._is_known(declaration):
                    raise SchemaValidationError(
                        f"Missing definition for '{declaration}' referenced from '{name}'"
                    )

    @classmethod
    def from_dict(cls, data: Any) -> SchemaContainer:
        """Build a container from its JSON form.

        Format::

            {"declaration": "(A, B)",
             "definitions": {"(A, B)": {"kind": "tuple", "elements": ["A", "B"]}, ...}}
        """
        if not isinstance(data, dict):
            raise SchemaValidationError(f"Schema document must be an object, got {type(data).__name__}")
        try:
            declaration = data["declaration"]
            raw_definitions = data["definitions"]
        except KeyError as e:
            raise SchemaValidationError(f"Schema document is missing {e}") from e
        if not isinstance(raw_definitions, dict):
            raise SchemaValidationError(f"'definitions' must be an object, got {type(raw_definitions).__name__}")

        definitions: dict[str, Definition] = {}
        for name, raw in raw_definitions.items():
            definitions[name] = _definition_from_dict(name, raw)
        return cls(declaration, definitions)


def _fields_from_dict(name: str, raw: Any) -> Fields:
    if raw is None or raw == "empty":
        return Empty()
    if "named" in raw:
        return NamedFields(tuple((f, d) for f, d in raw["named"]))
    if "unnamed" in raw:
        return UnnamedFields(tuple(raw["unnamed"]))
    raise SchemaValidationError(f"'{name}': unknown struct fields {raw!r}")


def _definition_from_dict(name: str, raw: Any) -> Definition:
    if not isinstance(raw, dict):
        raise SchemaValidationError(f"'{name}': definition must be an object, got {type(raw).__name__}")
    kind = raw.get("kind")
    try:
        if kind == "primitive":
            return Primitive(size=int(raw["size"]))
        elif kind == "sequence":
            start, end = raw["length_range"]
            return Sequence(
                length_width=int(raw["length_width"]),
                length_range=(int(start), int(end)),
                elements=raw["elements"],
            )
        elif kind == "tuple":
            return Tuple(elements=tuple(raw["elements"]))
        elif kind == "enum":
            variants = tuple((int(d), v, p) for d, v, p in raw["variants"])
            return Enum(tag_width=int(raw["tag_width"]), variants=variants)
        elif kind == "struct":
            return Struct(fields=_fields_from_dict(name, raw.get("fields")))
    except (KeyError, TypeError, ValueError) as e:
        raise SchemaValidationError(f"'{name}': malformed {kind} definition: {e}") from e
    raise SchemaValidationError(f"'{name}': unknown definition kind {kind!r}")


def load_schema(path: Path | str) -> SchemaContainer:
    """Load a schema container from a JSON file."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")

    with open(path) as f:
        data = json.load(f)

    container = SchemaContainer.from_dict(data)
    logger.debug("loaded %d definitions from %s", len(container.definitions), path)
    return container
