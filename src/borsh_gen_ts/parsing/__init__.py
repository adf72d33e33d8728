"""Parsing module for Borsh declaration names."""

from borsh_gen_ts.parsing.type_parser import (
    ArrayType,
    PathType,
    TupleType,
    TypeParser,
    parse_option_type,
)

__all__ = [
    "ArrayType",
    "PathType",
    "TupleType",
    "TypeParser",
    "parse_option_type",
]
