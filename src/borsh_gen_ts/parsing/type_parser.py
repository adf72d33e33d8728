"""Parser for Borsh declaration names.

Only the shapes Borsh actually produces for declarations are understood:
paths with generic arguments, fixed arrays and tuples. This is enough to spot
`Option<T>` without pulling in a full Rust type grammar.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

import ply.yacc as yacc

from borsh_gen_ts.errors import Error, SchemaError
from borsh_gen_ts.parsing.type_lexer import TypeLexer

OPTION = "Option"


@dataclass
class PathType:
    """`a::b::Name` with optional generic arguments."""

    segments: list[str]
    args: list[TypeExpr] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.segments[-1]

    def __str__(self) -> str:
        path = "::".join(self.segments)
        if not self.args:
            return path
        return f"{path}<{', '.join(str(a) for a in self.args)}>"


@dataclass
class ArrayType:
    """`[T; N]`."""

    element: TypeExpr
    length: int

    def __str__(self) -> str:
        return f"[{self.element}; {self.length}]"


@dataclass
class TupleType:
    """`(A, B, ...)`, `()` being the unit type."""

    elements: list[TypeExpr] = field(default_factory=list)

    def __str__(self) -> str:
        return f"({', '.join(str(e) for e in self.elements)})"


TypeExpr = Union[PathType, ArrayType, TupleType]


class TypeParser:
    """Parser for declaration names."""

    tokens = TypeLexer.tokens

    def __init__(self) -> None:
        self.lexer = TypeLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_type_path(self, p: yacc.YaccProduction) -> None:
        """type : path"""
        p[0] = PathType(segments=p[1])

    def p_type_generic(self, p: yacc.YaccProduction) -> None:
        """type : path LT type_list GT"""
        p[0] = PathType(segments=p[1], args=p[3])

    def p_type_array(self, p: yacc.YaccProduction) -> None:
        """type : LBRACKET type SEMI INTEGER RBRACKET"""
        p[0] = ArrayType(element=p[2], length=p[4])

    def p_type_tuple(self, p: yacc.YaccProduction) -> None:
        """type : LPAREN type_list RPAREN
                | LPAREN type_list COMMA RPAREN"""
        p[0] = TupleType(elements=p[2])

    def p_type_unit(self, p: yacc.YaccProduction) -> None:
        """type : LPAREN RPAREN"""
        p[0] = TupleType(elements=[])

    def p_path_single(self, p: yacc.YaccProduction) -> None:
        """path : IDENTIFIER"""
        p[0] = [p[1]]

    def p_path_multiple(self, p: yacc.YaccProduction) -> None:
        """path : path DCOLON IDENTIFIER"""
        p[0] = p[1] + [p[3]]

    def p_type_list_single(self, p: yacc.YaccProduction) -> None:
        """type_list : type"""
        p[0] = [p[1]]

    def p_type_list_multiple(self, p: yacc.YaccProduction) -> None:
        """type_list : type_list COMMA type"""
        p[0] = p[1] + [p[3]]

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> TypeExpr:
        """Parse a declaration name into a type expression."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)
        return self.parser.parse(data, lexer=self.lexer.lexer)


_parser: TypeParser | None = None


def parse_option_type(declaration: str) -> str | None:
    """Check if a declaration is `Option<T>` and return `T`.

    Names that do not parse as a type are simply not options.

    Raises:
        SchemaError: E0008 for `Option` with more than one type parameter.
    """
    global _parser
    if _parser is None:
        _parser = TypeParser()

    try:
        parsed = _parser.parse(declaration)
    except SyntaxError:
        return None

    if not isinstance(parsed, PathType) or parsed.name != OPTION or not parsed.args:
        return None
    if len(parsed.args) != 1:
        raise SchemaError(Error.E0008, declaration)
    return str(parsed.args[0])
