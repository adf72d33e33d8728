"""Rust/Borsh schema -> TypeScript type system reconciliation.

Holds the primitive catalog and the IR nodes (targets) the resolver builds and
the emitter renders. See https://github.com/dao-xyz/borsh-ts for the decorator
conventions the targets map onto.
"""

from __future__ import annotations

import typing
from dataclasses import dataclass, field
from enum import Enum


class PrimitiveType(Enum):
    """Borsh primitives with a direct TypeScript counterpart."""

    U8 = "u8"
    I8 = "i8"
    U16 = "u16"
    I16 = "i16"
    U32 = "u32"
    I32 = "i32"
    U64 = "u64"
    I64 = "i64"
    U128 = "u128"
    I128 = "i128"
    BOOL = "bool"

    @property
    def size_bytes(self) -> int:
        """Return the encoded size in bytes for this primitive type."""
        sizes = {
            PrimitiveType.U8: 1,
            PrimitiveType.I8: 1,
            PrimitiveType.U16: 2,
            PrimitiveType.I16: 2,
            PrimitiveType.U32: 4,
            PrimitiveType.I32: 4,
            PrimitiveType.U64: 8,
            PrimitiveType.I64: 8,
            PrimitiveType.U128: 16,
            PrimitiveType.I128: 16,
            PrimitiveType.BOOL: 1,
        }
        return sizes[self]

    @property
    def ts_type(self) -> str:
        """TypeScript type holding a decoded value.

        Anything wider than 32 bits does not fit a JS number. `bool` maps to
        `number` too, that is how values come out of the decoder today.
        """
        if self.size_bytes >= 8:
            return "bigint"
        return "number"


NON_ZERO_PREFIX = "NonZero"


def ts_non_zero(declaration: str) -> str:
    """Map a `NonZero*` declaration onto its plain Borsh primitive name.

    TS has no non zero primitives, so `NonZeroU32` is encoded as `u32`.
    """
    return declaration.replace(NON_ZERO_PREFIX, "").lower()


def _build_primitive_names() -> dict[str, PrimitiveType]:
    names: dict[str, PrimitiveType] = {}
    for pt in PrimitiveType:
        names[pt.value] = pt
        if pt is not PrimitiveType.BOOL:
            names[NON_ZERO_PREFIX + pt.value.capitalize()] = pt
    return names


# Declaration name -> primitive, including the NonZero* variants
PRIMITIVE_TYPE_NAMES: dict[str, PrimitiveType] = _build_primitive_names()


@dataclass(frozen=True)
class WellKnown:
    """Symbols that need no generated declaration: builtins or imports in TS.

    `borsh` is the Borsh primitive name for scalars and the element (or
    wrapped) declaration for fixed arrays and options; `inner` then holds the
    element or wrapped target.
    """

    borsh: str
    ts: str
    fixed_array: int | None = None
    option: bool = False
    inner: Target | None = None

    @classmethod
    def primitive(cls, declaration: str) -> WellKnown:
        """Build the descriptor for a catalog primitive (NonZero names included)."""
        pt = PRIMITIVE_TYPE_NAMES[declaration]
        return cls(borsh=ts_non_zero(declaration), ts=pt.ts_type)

    @classmethod
    def fixed_length_array(cls, declaration: str, fixed_length: int, ts: str, inner: Target) -> WellKnown:
        """Fixed size `[T; N]`; byte arrays surface as `Uint8Array`."""
        if declaration == PrimitiveType.U8.value:
            return cls(borsh=declaration, ts="Uint8Array", fixed_array=fixed_length, inner=inner)
        return cls(borsh=declaration, ts=f"{ts}[]", fixed_array=fixed_length, inner=inner)

    @classmethod
    def optional(cls, declaration: str, inner: Target) -> WellKnown:
        """`Option<T>` where `declaration` is `T`."""
        return cls(borsh=declaration, ts=f"{inner.ts_name} | undefined", option=True, inner=inner)

    @property
    def ts_name(self) -> str:
        return self.ts


@dataclass(frozen=True)
class PlainString:
    """Variable length sequence. Always special: neither primitive nor array."""

    @property
    def ts_name(self) -> str:
        return "string"


@dataclass(frozen=True)
class Field:
    """A named field of a record, pointing at its resolved target."""

    name: str
    target: Target


@dataclass(frozen=True)
class Record:
    """Named product type, emitted as a class with one decorated member per field."""

    symbol: str
    fields: tuple[Field, ...] = field(default_factory=tuple)

    @property
    def ts_name(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class Alias:
    """Single unnamed field (transparent) wrapper; TS can view these as aliases."""

    name: str
    target: Target

    @property
    def ts_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class Variant:
    """One tagged alternative of a union."""

    symbol: str
    discriminant: int
    # Inner type of data within the variant, None for unit variants
    payload: Target | None = None


@dataclass(frozen=True)
class Union:
    """Tagged choice. TS has no closed enums, so it is modelled as an open set of classes."""

    symbol: str
    variants: tuple[Variant, ...] = field(default_factory=tuple)

    @property
    def ts_name(self) -> str:
        return self.symbol

    @property
    def discriminants(self) -> list[int]:
        return [v.discriminant for v in self.variants]


Target = typing.Union[WellKnown, PlainString, Record, Alias, Union]
