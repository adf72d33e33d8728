"""Tests for TypeScript generation."""

import logging

from borsh_gen_ts.builder import ResolutionTable, build_world
from borsh_gen_ts.config import GeneratorConfig
from borsh_gen_ts.generator import IMPORTS, TypeScriptEmitter, generate_ts, strip_union_prefix
from borsh_gen_ts.schema import Empty, Enum, NamedFields, SchemaContainer, Sequence, Struct, Tuple, UnnamedFields
from borsh_gen_ts.types import Alias, Field, PlainString, Record, Union, Variant, WellKnown


def world_container():
    """World `(EnumX, StructY)`."""
    return SchemaContainer(
        "(EnumX, StructY)",
        {
            "(EnumX, StructY)": Tuple(elements=("EnumX", "StructY")),
            "EnumX": Enum(tag_width=1, variants=((0, "A", "EnumXA"), (1, "B", "EnumXB"))),
            "EnumXA": Struct(fields=Empty()),
            "EnumXB": Struct(fields=UnnamedFields(("u32",))),
            "StructY": Struct(fields=NamedFields((("id", "u64"), ("tag", "Option<u8>")))),
        },
    )


EXPECTED_WORLD = IMPORTS + """
@variant([0, 1])
export class EnumXEnum {}

@variant(0)
export class AVariant extends EnumXEnum {
}

@variant(1)
export class BVariant extends EnumXEnum {
  @field({ type: "u32" })
  _0: number;
}
export class StructY {
  @field({ type: "u64" })
  id: bigint;
  @field({ type: option("u8") })
  tag: number | undefined;
  constructor(data: StructY) {
    Object.assign(this, data);
  }
}
"""


def no_fmt(out_dir):
    return GeneratorConfig(out_dir=out_dir, fmt=False)


class TestFieldType:
    """Tests for Borsh field descriptors."""

    def test_primitive(self):
        emitter = TypeScriptEmitter()
        assert emitter.field_type(WellKnown.primitive("u64")) == '"u64"'
        assert emitter.field_type(WellKnown.primitive("NonZeroU64")) == '"u64"'

    def test_string(self):
        assert TypeScriptEmitter().field_type(PlainString()) == '"string"'

    def test_fixed_bytes(self):
        u8 = WellKnown.primitive("u8")
        target = WellKnown.fixed_length_array("u8", 33, u8.ts, u8)
        assert TypeScriptEmitter().field_type(target) == 'fixedArray("u8", 33)'

    def test_fixed_records(self):
        point = Record(symbol="Point")
        target = WellKnown.fixed_length_array("Point", 3, point.ts_name, point)
        assert TypeScriptEmitter().field_type(target) == "fixedArray(Point, 3)"

    def test_option(self):
        target = WellKnown.optional("NonZeroU128", WellKnown.primitive("NonZeroU128"))
        assert TypeScriptEmitter().field_type(target) == 'option("u128")'

    def test_compound(self):
        emitter = TypeScriptEmitter()
        assert emitter.field_type(Record(symbol="Margins")) == "Margins"
        assert emitter.field_type(Union(symbol="SideEnum")) == "SideEnum"
        assert emitter.field_type(Alias(name="RegistrationKey", target=PlainString())) == "RegistrationKey"


class TestRender:
    """Tests for rendering single table entries."""

    def test_well_known_renders_nothing(self):
        emitter = TypeScriptEmitter()
        assert emitter.render("u8", WellKnown.primitive("u8")) == []
        assert emitter.render("Vec<u8>", PlainString()) == []

    def test_record(self):
        record = Record(
            symbol="Margins",
            fields=(
                Field(name="imf_bps", target=WellKnown.primitive("u16")),
                Field(name="label", target=PlainString()),
            ),
        )
        lines = TypeScriptEmitter().render("Margins", record)
        assert lines == [
            "export class Margins {",
            '  @field({ type: "u16" })',
            "  imf_bps: number;",
            '  @field({ type: "string" })',
            "  label: string;",
            "  constructor(data: Margins) {",
            "    Object.assign(this, data);",
            "  }",
            "}",
        ]

    def test_alias(self):
        u8 = WellKnown.primitive("u8")
        alias = Alias(name="RegistrationKey", target=WellKnown.fixed_length_array("u8", 33, u8.ts, u8))
        lines = TypeScriptEmitter().render("RegistrationKey", alias)
        assert lines == [
            "export class RegistrationKey {",
            '  @field({ type: fixedArray("u8", 33) })',
            "  _0: Uint8Array;",
            "  constructor(data: RegistrationKey) {",
            "    Object.assign(this, data);",
            "  }",
            "}",
        ]

    def test_union_marker(self):
        union = Union(
            symbol="SideEnum",
            variants=(Variant(symbol="AskVariant", discriminant=0), Variant(symbol="BidVariant", discriminant=1)),
        )
        lines = TypeScriptEmitter().render("Side", union)
        assert lines[:3] == ["", "@variant([0, 1])", "export class SideEnum {}"]
        assert "export class AskVariant extends SideEnum {" in lines
        assert "@variant(1)" in lines
        assert not any("_0" in line for line in lines)

    def test_union_record_payload(self):
        record = Record(symbol="CreateSession")
        union = Union(
            symbol="ActionKindEnum",
            variants=(
                Variant(
                    symbol="CreateSessionVariant",
                    discriminant=0,
                    payload=Alias(name="CreateSession", target=record),
                ),
            ),
        )
        lines = TypeScriptEmitter().render("ActionKind", union)
        assert lines[-3:] == [
            "  @field({ type: CreateSession })",
            "  _0: CreateSession;",
            "}",
        ]

    def test_union_struct_like_payload(self):
        payload = Record(
            symbol="EMove",
            fields=(Field(name="x", target=WellKnown.primitive("i32")),),
        )
        union = Union(symbol="EEnum", variants=(Variant(symbol="MoveVariant", discriminant=0, payload=payload),))
        lines = TypeScriptEmitter().render("E", union)
        assert lines[-3:] == ['  @field({ type: "i32" })', "  x: number;", "}"]
        assert not any("_0" in line for line in lines)


class TestStripUnionPrefix:
    """Tests for payload display name cleanup."""

    def test_strip(self):
        assert strip_union_prefix("ActionKindDeposit", "ActionKindEnum") == "Deposit"

    def test_unrelated(self):
        assert strip_union_prefix("number", "ActionKindEnum") == "number"
        assert strip_union_prefix("Deposit", "ActionKindEnum") == "Deposit"

    def test_exact_name_kept(self):
        assert strip_union_prefix("ActionKind", "ActionKindEnum") == "ActionKind"

    def test_only_leading_prefix_removed(self):
        assert strip_union_prefix("ActionKindDepositBody", "ActionKindEnum") == "DepositBody"
        assert strip_union_prefix("DepositActionKind", "ActionKindEnum") == "DepositActionKind"


class TestGenerateTs:
    """Tests for writing world files."""

    def test_end_to_end(self, tmp_path):
        roots, table = build_world(world_container())
        path = generate_ts(tmp_path, "nord", roots, table, no_fmt(tmp_path))

        assert path == tmp_path / "nord.ts"
        assert path.read_text() == EXPECTED_WORLD

    def test_starts_with_preamble(self, tmp_path):
        roots, table = build_world(world_container())
        path = generate_ts(tmp_path, "nord", roots, table, no_fmt(tmp_path))

        assert path.read_text().startswith('// GENERATED! DO NOT MODIFY MANUALLY!\n')
        assert 'from "@dao-xyz/borsh";' in path.read_text()

    def test_regeneration_replaces_stale_file(self, tmp_path):
        stale = tmp_path / "nord.ts"
        stale.write_text("stale contents")

        roots, table = build_world(world_container())
        generate_ts(tmp_path, "nord", roots, table, no_fmt(tmp_path))
        first = stale.read_bytes()

        roots, table = build_world(world_container())
        generate_ts(tmp_path, "nord", roots, table, no_fmt(tmp_path))

        assert b"stale" not in first
        assert stale.read_bytes() == first

    def test_dependency_order(self, tmp_path):
        container = SchemaContainer(
            "(Action,)",
            {
                "(Action,)": Tuple(elements=("Action",)),
                "Action": Struct(fields=NamedFields((("kind", "ActionKind"), ("key", "RegistrationKey")))),
                "ActionKind": Enum(tag_width=1, variants=((0, "Deposit", "ActionKindDeposit"),)),
                "ActionKindDeposit": Struct(fields=UnnamedFields(("Deposit",))),
                "Deposit": Struct(fields=NamedFields((("amount", "u64"),))),
                "RegistrationKey": Struct(fields=UnnamedFields(("[u8; 33]",))),
                "[u8; 33]": Sequence(length_width=0, length_range=(33, 33), elements="u8"),
            },
        )
        roots, table = build_world(container)
        source = generate_ts(tmp_path, "actions", roots, table, no_fmt(tmp_path)).read_text()

        assert source.index("export class Deposit {") < source.index("export class ActionKindEnum {}")
        assert source.index("export class ActionKindEnum {}") < source.index("export class Action {")
        assert source.index("export class RegistrationKey {") < source.index("export class Action {")
        assert "export class ActionKindDeposit" not in source
        assert "  @field({ type: ActionKindEnum })\n  kind: ActionKindEnum;" in source
        assert "  @field({ type: Deposit })\n  _0: Deposit;" in source

    def test_missing_formatter_warns(self, tmp_path, caplog):
        config = GeneratorConfig(out_dir=tmp_path, fmt_command=("borsh-gen-ts-no-such-formatter",))
        roots, table = build_world(world_container())

        with caplog.at_level(logging.WARNING, logger="borsh_gen_ts.formatter"):
            path = generate_ts(tmp_path, "nord", roots, table, config)

        assert path.exists()
        assert "W0001" in caplog.text

    def test_empty_table(self, tmp_path):
        path = generate_ts(tmp_path, "empty", [], ResolutionTable(), no_fmt(tmp_path))
        assert path.read_text() == IMPORTS
