"""Error taxonomy for schema shapes that have no TypeScript counterpart.

The limits are opinionated: Rust types must stay readable for TypeScript
(and any other Borsh consumer) developers. Where it is unclear what is good,
good is what WIT does.
"""

from __future__ import annotations

from enum import Enum


class Error(Enum):
    """Closed, numbered set of unsupported schema shapes."""

    E0001 = (
        "layers of unnamed struct fields like `Foo(Bar(Baz))` are not allowed. "
        "make less wrapping or write custom borsh schema"
    )
    E0002 = (
        "tuples are not to be in public API. replace with named structs or fixed size arrays. "
        "2-tuple is supported only in sequences (first item may be considered key)"
    )
    E0003 = "f32 and f64 are not supported as non deterministic types"
    # https://github.com/WebAssembly/component-model/issues/430
    E0004 = (
        "recursive types are not supported. use custom borsh serialization and schema "
        "or indexes approach to express recursion"
    )
    E0005 = "no unit or empty types"
    E0006 = (
        "wrappers like Box/Arc/Mutex/.. types are not supported. "
        "simplify, or use custom borsh serialize and schema"
    )
    E0007 = (
        "all Rust identity names must also be valid TS symbols, "
        "in specific cases (generics) canonicalization algorithm is used"
    )
    E0008 = "only one type parameter is allowed per type, exclusion is key value like usage"
    # https://github.com/WebAssembly/component-model/issues/125
    E0009 = (
        "proper universal map and set support is hard, so not supported "
        "(replace with sequence and sequence of 2-tuples)"
    )
    E0010 = "enum variant can have 0 or one non empty (unit) field. similar to tuples error"

    def __str__(self) -> str:
        return f"{self.name}: {self.value}"


class GeneratorWarning(Enum):
    """Non-fatal conditions reported during generation."""

    DENO_NOT_FOUND = (
        "W0001",
        "we use external formatter and checker for generated TS code. "
        "now it is `deno`, please add it to PATH",
    )

    def __str__(self) -> str:
        code, message = self.value
        return f"{code}: {message}"


class SchemaError(ValueError):
    """A schema shape does not map onto any supported TypeScript pattern."""

    def __init__(self, code: Error, declaration: str | None = None) -> None:
        self.code = code
        self.declaration = declaration
        if declaration is None:
            super().__init__(str(code))
        else:
            super().__init__(f"{code} (declaration '{declaration}')")


class UnsupportedSchema(NotImplementedError):
    """A schema shape reserved for future work (e.g. wide enum tags)."""


class ResolutionDefect(RuntimeError):
    """Internal invariant broken during resolution; never expected on valid input."""


class DuplicateDeclaration(ResolutionDefect):
    """A declaration was inserted into the resolution table twice."""

    def __init__(self, declaration: str) -> None:
        self.declaration = declaration
        super().__init__(f"Declaration '{declaration}' is already resolved")
