"""
DSL Parser
==========

Lexer and recursive descent parser for language tables:

    LanguageEnum: Language
    greeting {
        English: "Hello"
        Spanish: "Hola"
    }
    farewell(name) {
        English: "Goodbye, {name}"
    }
    date(day: int, month: int, year: int) {
        English: "{month}/{day}/{year}"
    }
    dummy { }

The parser only checks structure. Variants, defaults and placeholders are
checked by the resolver and the template analyzer.
"""

import ast
import keyword
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from language_atlas.config.logging import get_logger
from language_atlas.core.exceptions import DSLSyntaxError
from language_atlas.models.schemas import FieldDef, GenerationUnit, ParamDef

logger = get_logger(__name__)

HEADER_KEYWORD = "LanguageEnum"


class TokenType(Enum):
    # Symbols
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    COLON = ":"
    COMMA = ","
    DOT = "."
    PIPE = "|"

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Special
    EOF = "EOF"


@dataclass
class Token:
    type: TokenType
    value: Any
    line: int
    column: int
    start: int
    end: int

    def describe(self) -> str:
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.STRING:
            return f"string {self.value!r}"
        return f"'{self.value}'"


class Lexer:
    """Split DSL text into tokens."""

    SYMBOLS = {
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        "{": TokenType.LBRACE,
        "}": TokenType.RBRACE,
        "[": TokenType.LBRACKET,
        "]": TokenType.RBRACKET,
        ":": TokenType.COLON,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        "|": TokenType.PIPE,
    }

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        while True:
            self._skip_whitespace_and_comments()
            if self.pos >= len(self.source):
                tokens.append(Token(TokenType.EOF, None, self.line, self.column, self.pos, self.pos))
                return tokens

            ch = self._peek()
            if ch == '"':
                tokens.append(self._read_string())
            elif ch.isdigit():
                tokens.append(self._read_number())
            elif ch == "_" or ch.isalpha():
                tokens.append(self._read_identifier())
            elif ch in self.SYMBOLS:
                tokens.append(self._read_symbol())
            else:
                raise DSLSyntaxError(
                    f"unexpected character {ch!r}", self.line, self.column, token=ch
                )

    def _peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _skip_whitespace_and_comments(self) -> None:
        while self.pos < len(self.source):
            ch = self._peek()
            if ch.isspace():
                self._advance()
            elif ch == "#" or (ch == "/" and self._peek(1) == "/"):
                while self.pos < len(self.source) and self._peek() != "\n":
                    self._advance()
            else:
                break

    def _read_string(self) -> Token:
        start, line, column = self.pos, self.line, self.column
        self._advance()  # opening quote
        while True:
            ch = self._peek()
            if ch == "" or ch == "\n":
                raise DSLSyntaxError(
                    "unterminated string literal", line, column, expected="closing '\"'"
                )
            if ch == "\\":
                self._advance()
                if self._peek() in ("", "\n"):
                    raise DSLSyntaxError("unterminated string literal", line, column)
                self._advance()
                continue
            self._advance()
            if ch == '"':
                break

        raw = self.source[start:self.pos]
        try:
            with warnings.catch_warnings():
                # Unknown escapes such as "\d" only warn in Python; reject them here
                warnings.simplefilter("error")
                value = ast.literal_eval(raw)
        except (ValueError, SyntaxError, Warning) as e:
            raise DSLSyntaxError(f"invalid string literal {raw}: {e}", line, column, token=raw)
        return Token(TokenType.STRING, value, line, column, start, self.pos)

    def _read_number(self) -> Token:
        start, line, column = self.pos, self.line, self.column
        while self._peek().isalnum() or self._peek() == "_":
            self._advance()
        return Token(TokenType.NUMBER, self.source[start:self.pos], line, column, start, self.pos)

    def _read_identifier(self) -> Token:
        start, line, column = self.pos, self.line, self.column
        while self._peek().isalnum() or self._peek() == "_":
            self._advance()
        text = self.source[start:self.pos]
        if not text.isidentifier():
            raise DSLSyntaxError(f"invalid identifier '{text}'", line, column, token=text)
        return Token(TokenType.IDENTIFIER, text, line, column, start, self.pos)

    def _read_symbol(self) -> Token:
        start, line, column = self.pos, self.line, self.column
        ch = self._advance()
        return Token(self.SYMBOLS[ch], ch, line, column, start, self.pos)


class Parser:
    """Build a GenerationUnit from a token stream."""

    def __init__(self, tokens: List[Token], source: str = ""):
        self.tokens = tokens
        self.source = source
        self.current = 0
        self.logger: Any = logger.bind(component="parser")  # structlog.BoundLoggerBase

    def parse(self) -> GenerationUnit:
        header = self._consume(TokenType.IDENTIFIER, f"'{HEADER_KEYWORD}' header")
        if header.value != HEADER_KEYWORD:
            self._fail(header, f"'{HEADER_KEYWORD}' header")
        self._consume(TokenType.COLON, f"':' after '{HEADER_KEYWORD}'")
        target = self._consume(TokenType.IDENTIFIER, "enum type name")

        fields: List[FieldDef] = []
        seen: Dict[str, int] = {}
        while not self._is_at_end():
            start = self._peek()
            field = self._parse_field()
            if field.name in seen:
                raise DSLSyntaxError(
                    f"duplicate field '{field.name}' (first defined on line {seen[field.name]})",
                    start.line,
                    start.column,
                    token=field.name,
                )
            seen[field.name] = field.line
            fields.append(field)

        self.logger.debug("Parsed unit", target=target.value, field_count=len(fields))
        return GenerationUnit(target_type=target.value, fields=fields)

    def _parse_field(self) -> FieldDef:
        name = self._consume(TokenType.IDENTIFIER, "field name")
        self._check_name(name, "field")

        params: Optional[List[ParamDef]] = None
        if self._check(TokenType.LPAREN):
            self._advance()
            params = self._parse_params()

        opening = self._consume(TokenType.LBRACE, f"'{{' to open the body of field '{name.value}'")
        templates: Dict[str, str] = {}
        while not self._check(TokenType.RBRACE):
            if self._is_at_end():
                raise DSLSyntaxError(
                    f"unterminated body of field '{name.value}'",
                    opening.line,
                    opening.column,
                    expected="'}'",
                )
            tag = self._consume(TokenType.IDENTIFIER, "variant tag or '}'")
            self._consume(TokenType.COLON, f"':' after variant '{tag.value}'")
            value = self._consume(TokenType.STRING, f"template string for variant '{tag.value}'")
            if tag.value in templates:
                raise DSLSyntaxError(
                    f"duplicate variant '{tag.value}' in field '{name.value}'",
                    tag.line,
                    tag.column,
                    token=tag.value,
                )
            templates[tag.value] = value.value
            if self._check(TokenType.COMMA):
                self._advance()
        self._advance()

        return FieldDef(name=name.value, params=params, templates=templates, line=name.line)

    def _parse_params(self) -> List[ParamDef]:
        if self._check(TokenType.RPAREN):
            self._fail(self._peek(), "parameter name (omit the parentheses for no parameters)")

        params: List[ParamDef] = []
        while True:
            name = self._consume(TokenType.IDENTIFIER, "parameter name")
            self._check_name(name, "parameter")
            if name.value == "self":
                raise DSLSyntaxError(
                    "parameter cannot be named 'self'", name.line, name.column, token="self"
                )
            if any(param.name == name.value for param in params):
                raise DSLSyntaxError(
                    f"duplicate parameter '{name.value}'", name.line, name.column, token=name.value
                )

            type_hint = None
            if self._check(TokenType.COLON):
                self._advance()
                type_hint = self._parse_type_hint()
            params.append(ParamDef(name=name.value, type_hint=type_hint))

            if self._check(TokenType.COMMA):
                self._advance()
                continue
            self._consume(TokenType.RPAREN, "',' or ')'")
            return params

    def _parse_type_hint(self) -> str:
        """Take the source text of a balanced token run up to ',' or ')'."""
        first = self._peek()
        last: Optional[Token] = None
        depth = 0
        while True:
            token = self._peek()
            if token.type in (TokenType.EOF, TokenType.LBRACE, TokenType.RBRACE):
                self._fail(token, "')' to close the parameter list")
            if depth == 0 and token.type in (TokenType.COMMA, TokenType.RPAREN):
                break
            if token.type in (TokenType.LPAREN, TokenType.LBRACKET):
                depth += 1
            elif token.type in (TokenType.RPAREN, TokenType.RBRACKET):
                depth -= 1
                if depth < 0:
                    self._fail(token, "type hint")
            last = self._advance()

        if last is None:
            self._fail(first, "type hint")
        assert last is not None
        text = self.source[first.start:last.end]
        try:
            ast.parse(text, mode="eval")
        except SyntaxError:
            raise DSLSyntaxError(
                f"invalid type hint '{text}'", first.line, first.column, token=text, expected="type hint"
            )
        return text

    def _check_name(self, token: Token, kind: str) -> None:
        if keyword.iskeyword(token.value):
            raise DSLSyntaxError(
                f"{kind} name '{token.value}' is a Python keyword",
                token.line,
                token.column,
                token=token.value,
            )

    def _fail(self, token: Token, expected: str) -> None:
        raise DSLSyntaxError(
            f"expected {expected}, found {token.describe()}",
            token.line,
            token.column,
            token=None if token.type == TokenType.EOF else str(token.value),
            expected=expected,
        )

    def _is_at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        return self.tokens[self.current]

    def _check(self, token_type: TokenType) -> bool:
        return self._peek().type == token_type

    def _advance(self) -> Token:
        token = self.tokens[self.current]
        if token.type != TokenType.EOF:
            self.current += 1
        return token

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        if self._check(token_type):
            return self._advance()
        self._fail(self._peek(), expected)
        raise AssertionError("unreachable")


def parse_unit(source: str) -> GenerationUnit:
    """
    Parse DSL text into a GenerationUnit.

    Args:
        source: Raw DSL text

    Returns:
        Parsed generation unit

    Raises:
        DSLSyntaxError: If the text is not a well-formed unit
    """
    if not source or not source.strip():
        raise DSLSyntaxError("empty DSL content", 1, 1, expected=f"'{HEADER_KEYWORD}' header")

    tokens = Lexer(source).tokenize()
    return Parser(tokens, source).parse()


def validate_dsl_syntax(source: str) -> bool:
    """
    Validate DSL structure without resolving it against an enum.

    Args:
        source: Raw DSL text

    Returns:
        True if the structure is valid, False otherwise
    """
    try:
        parse_unit(source)
        return True
    except DSLSyntaxError:
        return False


def get_validation_suggestions(source: str, errors: List[str]) -> List[str]:
    """
    Generate suggestions based on DSL content and reported errors.

    Args:
        source: Raw DSL text
        errors: Error messages produced while checking the unit

    Returns:
        List of suggestions for fixing errors
    """
    suggestions: List[str] = []

    for error in errors:
        if "string literal" in error or "template string" in error:
            suggestions.append("Write every template as a double-quoted string on a single line")
        elif "duplicate variant" in error:
            suggestions.append("Give each variant at most one template per field")
        elif "duplicate field" in error:
            suggestions.append("Field names become method names and must be unique")
        elif "unknown variant" in error:
            suggestions.append("Use the member names of the target enum as variant tags")
        elif "default variant" in error:
            suggestions.append("Every non-empty field needs a template for the enum's first member")
        elif "unknown parameter" in error:
            suggestions.append("Declare every placeholder in the field's parameter list, or drop the list to infer it")
        elif "brace" in error:
            suggestions.append("Write '{{' and '}}' for literal braces inside templates")

    if HEADER_KEYWORD not in source:
        suggestions.append(f"Start the unit with '{HEADER_KEYWORD}: <EnumName>'")

    if source.count("{") != source.count("}"):
        suggestions.append("Check for unmatched curly braces")

    # Remove duplicates while preserving order
    unique_suggestions: List[str] = []
    for suggestion in suggestions:
        if suggestion not in unique_suggestions:
            unique_suggestions.append(suggestion)

    return unique_suggestions[:5]
