"""Lexer for Borsh declaration names (`Option<u8>`, `[u8; 32]`, `(A, B)`)."""

import ply.lex as lex


class TypeLexer:
    """Lexer for tokenizing declaration names."""

    # Token list
    tokens = [
        "IDENTIFIER",
        "INTEGER",
        "LT",
        "GT",
        "LBRACKET",
        "RBRACKET",
        "LPAREN",
        "RPAREN",
        "SEMI",
        "COMMA",
        "DCOLON",
    ]

    # Simple tokens
    t_LT = r"<"
    t_GT = r">"
    t_LBRACKET = r"\["
    t_RBRACKET = r"\]"
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_SEMI = r";"
    t_COMMA = r","
    t_DCOLON = r"::"

    t_ignore = " \t"

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    def t_INTEGER(self, t: lex.LexToken) -> lex.LexToken:
        r"\d+"
        t.value = int(t.value)
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_][a-zA-Z0-9_]*"
        return t

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
