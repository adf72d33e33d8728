"""borsh-gen-ts - Given a Borsh schema, generate TS types to encode/decode data."""

from borsh_gen_ts.builder import Parent, ResolutionTable, build_world, resolve
from borsh_gen_ts.config import GeneratorConfig
from borsh_gen_ts.errors import (
    DuplicateDeclaration,
    Error,
    GeneratorWarning,
    ResolutionDefect,
    SchemaError,
    UnsupportedSchema,
)
from borsh_gen_ts.generator import TypeScriptEmitter, generate_ts
from borsh_gen_ts.schema import SchemaContainer, SchemaValidationError, load_schema
from borsh_gen_ts.types import (
    Alias,
    Field,
    PlainString,
    PrimitiveType,
    Record,
    Target,
    Union,
    Variant,
    WellKnown,
)

__all__ = [
    # Main API
    "build_world",
    "generate_ts",
    "resolve",
    "load_schema",
    "GeneratorConfig",
    "Parent",
    "ResolutionTable",
    "SchemaContainer",
    "TypeScriptEmitter",
    # Targets
    "Target",
    "WellKnown",
    "PlainString",
    "Record",
    "Field",
    "Alias",
    "Union",
    "Variant",
    "PrimitiveType",
    # Errors
    "Error",
    "GeneratorWarning",
    "SchemaError",
    "SchemaValidationError",
    "UnsupportedSchema",
    "ResolutionDefect",
    "DuplicateDeclaration",
]

__version__ = "0.1.0"
