# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The `LanguageProfile` model: one language's structural rules.

A profile is plain data plus a closed set of recognizer predicates. Adding a
language means building a new profile value and registering it; the scanner and
the boundary detector read everything language-specific from here.

Example:
    >>> profile = LanguageProfile(
    ...     name="zig",
    ...     extensions=(".zig",),
    ...     line_comments=("//",),
    ...     string_delimiters=(StringDelimiter('"', '"'),),
    ...     declaration_keywords={"fn": ChunkKind.FUNCTION, "struct": ChunkKind.STRUCT},
    ... )
    >>> register_profile(profile)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated, Any, NamedTuple

from pydantic import Field, NonNegativeInt, field_validator

from codeseam.core.chunks import ChunkKind
from codeseam.core.types.enum import BaseEnum
from codeseam.core.types.models import FROZEN_BASEDMODEL_CONFIG, BasedModel


if TYPE_CHECKING:
    from codeseam.engine.chunker.scanner import CodeView


class BlockStyle(str, BaseEnum):
    """How a language delimits declaration bodies."""

    BRACE = "brace"
    INDENTATION = "indentation"
    KEYWORD_END = "keyword_end"
    """Bodies close with a keyword, as in Ruby's `def ... end`."""


class LanguageFamily(str, BaseEnum):
    """Groups of languages that share block and comment conventions."""

    C_STYLE = "c_style"
    PYTHON_STYLE = "python_style"
    RUBY_STYLE = "ruby_style"

    @property
    def block_style(self) -> BlockStyle:
        if self is LanguageFamily.PYTHON_STYLE:
            return BlockStyle.INDENTATION
        if self is LanguageFamily.RUBY_STYLE:
            return BlockStyle.KEYWORD_END
        return BlockStyle.BRACE


class CharLiteralStyle(str, BaseEnum):
    """How single-quoted literals are read."""

    NONE = "none"
    """`'` is not a char delimiter (it may still be a string delimiter)."""
    STRICT = "strict"
    """Only well-formed one-character literals; otherwise `'` is code (Rust lifetimes)."""
    LENIENT = "lenient"
    """Anything up to the closing quote; an unclosed literal runs to end of line."""


class RawStringStyle(str, BaseEnum):
    """Raw string literal syntaxes, which ignore escapes."""

    NONE = "none"
    CPP = "cpp"
    """`R"delim(...)delim"`, optionally prefixed with u8, u, U or L."""
    RUST = "rust"
    """`r#"..."#` with any number of hashes, optionally prefixed with b."""


class StringDelimiter(NamedTuple):
    """One string literal syntax."""

    open: str
    close: str
    escape: str | None = "\\"
    multiline: bool = False
    """Whether the literal may span lines. Single-line literals end at a newline, truncated."""


class Recognized(NamedTuple):
    """A special form found by a recognizer."""

    name: str
    end: int
    """Index of the first code token after the recognized form."""


type Recognizer = Callable[[CodeView, int, int], Recognized | None]
"""`(view, index, limit) -> Recognized | None`: does the form start at `index`?"""


class Recognizers(NamedTuple):
    """Special-construct recognizers a profile may supply.

    - `operator_overload`: index points at the `operator` keyword; the result's
      `end` is the index of the parameter list's opening parenthesis.
    - `lambda_binding`: index points at a statement start; `end` is the index
      where the lambda body begins.
    - `function_pointer_alias`: index points after `typedef`; `end` is past the
      terminating `;`.
    - `attribute_prefix`: index points at a possible attribute or decorator;
      `end` is the first token after it. The name is the attribute's name.
    """

    operator_overload: Callable[..., Recognized | None] | None = None
    lambda_binding: Callable[..., Recognized | None] | None = None
    function_pointer_alias: Callable[..., Recognized | None] | None = None
    attribute_prefix: Callable[..., Recognized | None] | None = None


class LanguageProfile(BasedModel):
    """Structural rules for one language. Read-only once constructed."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    name: Annotated[
        str, Field(min_length=1, description="Canonical lowercase language tag, e.g. `cpp`.")
    ]
    aliases: Annotated[
        tuple[str, ...], Field(description="Other tags that select this profile, e.g. `c++`.")
    ] = ()
    extensions: Annotated[
        tuple[str, ...], Field(description="File extensions, with the leading dot.")
    ] = ()
    family: Annotated[LanguageFamily, Field(description="The language family.")] = (
        LanguageFamily.C_STYLE
    )
    line_comments: Annotated[tuple[str, ...], Field(description="Line comment openers.")] = ()
    block_comments: Annotated[
        tuple[tuple[str, str], ...], Field(description="Block comment delimiter pairs. Never nested.")
    ] = ()
    string_delimiters: Annotated[
        tuple[StringDelimiter, ...], Field(description="String literal syntaxes.")
    ] = ()
    char_literals: CharLiteralStyle = CharLiteralStyle.NONE
    raw_strings: RawStringStyle = RawStringStyle.NONE
    directive_prefix: Annotated[
        str | None,
        Field(description="Marker of a preprocessor line when it starts a line, e.g. `#`."),
    ] = None
    tag_markers: Annotated[
        tuple[str, ...],
        Field(
            description="Markers that switch into or out of code anywhere on a line, such as PHP's `<?php` and `?>`. They are scanned as directives."
        ),
    ] = ()
    trailing_declarators: Annotated[
        bool,
        Field(description="Whether names may follow a type body before `;`: `struct { ... } p1, p2;`."),
    ] = False
    digit_separators: Annotated[
        bool, Field(description="Whether `'` may separate digits in numeric literals.")
    ] = False
    regex_literals: Annotated[
        bool, Field(description="Whether `/.../` in operand position is a regular expression literal.")
    ] = False
    declaration_keywords: Annotated[
        dict[str, ChunkKind],
        Field(
            default_factory=dict,
            description="Keywords that introduce a declaration, tagged with their chunk kind.",
        ),
    ]
    alias_keywords: Annotated[
        frozenset[str],
        Field(description="Keywords introducing type aliases: typedef, using, type."),
    ] = frozenset()
    template_keywords: Annotated[
        frozenset[str], Field(description="Keywords that prefix a generic declaration.")
    ] = frozenset()
    qualifiers: Annotated[
        frozenset[str],
        Field(description="Words absorbed into the signature of the declaration they prefix."),
    ] = frozenset()
    access_labels: Annotated[
        frozenset[str], Field(description="Labels such as `public:` that are not declarations.")
    ] = frozenset()
    control_keywords: Annotated[
        frozenset[str], Field(description="Statement keywords that never start a declaration.")
    ] = frozenset()
    binding_keywords: Annotated[
        frozenset[str], Field(description="Variable binding words that may bind a lambda.")
    ] = frozenset()
    implicit_functions: Annotated[
        bool,
        Field(description="Whether functions may be declared without a keyword: `int add(int x) {`."),
    ] = False
    bare_methods: Annotated[
        bool,
        Field(description="Whether class members may be methods without a return type: `run() {`."),
    ] = False
    constructor_initializers: Annotated[
        bool, Field(description="Whether a `:` after parameters opens a member initializer list.")
    ] = False
    newline_terminates: Annotated[
        bool, Field(description="Whether a newline may end a statement (automatic semicolons).")
    ] = False
    expression_bodies: Annotated[
        bool,
        Field(
            description="Whether a function body may be an expression after `=` and a declaration header ends with its statement: `def f(x: Int): Int = x + 1`."
        ),
    ] = False
    block_keywords: Annotated[
        frozenset[str],
        Field(
            description="Keywords other than declaration keywords that open a block closed by `block_end`: `if`, `do`, `begin`."
        ),
    ] = frozenset()
    modifier_keywords: Annotated[
        frozenset[str],
        Field(
            description="Block keywords that only open a block at the start of a statement. Elsewhere they modify the statement before them: `return if done`."
        ),
    ] = frozenset()
    loop_keywords: Annotated[
        frozenset[str],
        Field(
            description="Block keywords whose own line may carry a `do` that belongs to them: `while x do`."
        ),
    ] = frozenset()
    block_end: Annotated[
        str | None, Field(description="The keyword closing keyword-delimited blocks, e.g. `end`.")
    ] = None
    docstrings: Annotated[
        bool, Field(description="Whether a leading string in a body documents the declaration.")
    ] = False
    doc_blank_line_tolerance: Annotated[
        NonNegativeInt,
        Field(description="Blank lines allowed between a doc comment and its declaration."),
    ] = 0
    recognizers: Recognizers = Recognizers()

    @field_validator("name", "aliases", mode="after")
    @classmethod
    def _lowercase(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lower()
        return tuple(v.lower() for v in value)

    @field_validator("extensions", mode="after")
    @classmethod
    def _normalize_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in value)

    @property
    def block_style(self) -> BlockStyle:
        return self.family.block_style

    @property
    def tags(self) -> tuple[str, ...]:
        """Every tag that selects this profile."""
        return (self.name, *self.aliases)

    @property
    def lexical_key(self) -> tuple[Any, ...]:
        """The fields the scanner depends on, as a hashable key."""
        return (
            self.line_comments,
            self.block_comments,
            self.string_delimiters,
            self.char_literals,
            self.raw_strings,
            self.directive_prefix,
            self.tag_markers,
            self.digit_separators,
            self.regex_literals,
        )

    def keyword_kind(self, word: str) -> ChunkKind | None:
        return self.declaration_keywords.get(word)

    def __hash__(self) -> int:
        return hash((self.name, self.lexical_key))


__all__ = (
    "BlockStyle",
    "CharLiteralStyle",
    "LanguageFamily",
    "LanguageProfile",
    "RawStringStyle",
    "Recognized",
    "Recognizer",
    "Recognizers",
    "StringDelimiter",
)
