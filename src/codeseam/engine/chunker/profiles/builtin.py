# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Built-in language profiles."""

from __future__ import annotations

from codeseam.core.chunks import ChunkKind
from codeseam.engine.chunker.profiles.profile import (
    CharLiteralStyle,
    LanguageFamily,
    LanguageProfile,
    RawStringStyle,
    Recognizers,
    StringDelimiter,
)
from codeseam.engine.chunker.profiles.recognizers import (
    at_annotation,
    c_function_pointer_alias,
    cpp_attribute,
    cpp_lambda_binding,
    cpp_operator_overload,
    js_lambda_binding,
    php_closure_binding,
    python_decorator,
    rust_attribute,
)


K = ChunkKind

C_COMMENTS = {"line_comments": ("//",), "block_comments": (("/*", "*/"),)}
DOUBLE_QUOTED = StringDelimiter('"', '"')
SINGLE_QUOTED = StringDelimiter("'", "'")

C_CONTROL = frozenset({
    "if", "else", "for", "while", "do", "switch", "case", "default", "return", "goto",
    "break", "continue", "sizeof", "throw", "try", "catch", "new", "delete", "co_return",
    "co_await", "co_yield", "static_assert", "alignof", "decltype", "typeid",
})  # fmt: skip

C_QUALIFIERS = frozenset({
    "static", "inline", "extern", "const", "volatile", "register", "restrict", "_Noreturn",
    "__inline", "__inline__", "__forceinline", "__stdcall", "__cdecl", "thread_local",
})  # fmt: skip

C = LanguageProfile(
    name="c",
    extensions=(".c", ".h"),
    **C_COMMENTS,
    string_delimiters=(DOUBLE_QUOTED,),
    char_literals=CharLiteralStyle.LENIENT,
    directive_prefix="#",
    declaration_keywords={
        "struct": K.STRUCT,
        "union": K.UNION,
        "enum": K.ENUM,
    },
    alias_keywords=frozenset({"typedef"}),
    qualifiers=C_QUALIFIERS,
    control_keywords=C_CONTROL,
    implicit_functions=True,
    trailing_declarators=True,
    recognizers=Recognizers(
        function_pointer_alias=c_function_pointer_alias, attribute_prefix=cpp_attribute
    ),
)

CPP = LanguageProfile(
    name="cpp",
    aliases=("c++", "cxx", "cc", "hpp"),
    extensions=(".cpp", ".cc", ".cxx", ".c++", ".hpp", ".hxx", ".hh", ".h++", ".ipp", ".tpp"),
    **C_COMMENTS,
    string_delimiters=(DOUBLE_QUOTED,),
    char_literals=CharLiteralStyle.LENIENT,
    raw_strings=RawStringStyle.CPP,
    directive_prefix="#",
    digit_separators=True,
    declaration_keywords={
        "class": K.CLASS,
        "struct": K.STRUCT,
        "union": K.UNION,
        "enum": K.ENUM,
        "namespace": K.NAMESPACE,
        "concept": K.OTHER_DECLARATION,
    },
    alias_keywords=frozenset({"typedef", "using"}),
    template_keywords=frozenset({"template"}),
    qualifiers=C_QUALIFIERS
    | frozenset({
        "virtual", "explicit", "friend", "constexpr", "consteval", "constinit", "mutable",
        "export", "typename",
    }),  # fmt: skip
    access_labels=frozenset({"public", "private", "protected", "signals", "slots"}),
    control_keywords=C_CONTROL,
    implicit_functions=True,
    trailing_declarators=True,
    constructor_initializers=True,
    recognizers=Recognizers(
        operator_overload=cpp_operator_overload,
        lambda_binding=cpp_lambda_binding,
        function_pointer_alias=c_function_pointer_alias,
        attribute_prefix=cpp_attribute,
    ),
)

JAVA = LanguageProfile(
    name="java",
    extensions=(".java",),
    **C_COMMENTS,
    string_delimiters=(StringDelimiter('"""', '"""', multiline=True), DOUBLE_QUOTED),
    char_literals=CharLiteralStyle.LENIENT,
    declaration_keywords={
        "class": K.CLASS,
        "interface": K.CLASS,
        "record": K.CLASS,
        "enum": K.ENUM,
    },
    qualifiers=frozenset({
        "public", "private", "protected", "static", "final", "abstract", "synchronized",
        "native", "strictfp", "transient", "volatile", "default", "sealed",
    }),  # fmt: skip
    control_keywords=frozenset({
        "if", "else", "for", "while", "do", "switch", "case", "return", "throw", "try",
        "catch", "finally", "new", "break", "continue", "assert", "yield", "package", "import",
    }),  # fmt: skip
    implicit_functions=True,
    recognizers=Recognizers(attribute_prefix=at_annotation),
)

_JS_KEYWORDS = {"class": K.CLASS, "function": K.FUNCTION}
_JS_QUALIFIERS = frozenset({"export", "default", "async", "static", "get", "set", "declare"})
_JS_CONTROL = frozenset({
    "if", "else", "for", "while", "do", "switch", "case", "return", "throw", "try", "catch",
    "finally", "new", "delete", "typeof", "instanceof", "await", "yield", "import", "void",
    "super", "with",
})  # fmt: skip
_JS_STRINGS = (DOUBLE_QUOTED, SINGLE_QUOTED, StringDelimiter("`", "`", multiline=True))

JAVASCRIPT = LanguageProfile(
    name="javascript",
    aliases=("js", "jsx", "node"),
    extensions=(".js", ".jsx", ".mjs", ".cjs"),
    **C_COMMENTS,
    string_delimiters=_JS_STRINGS,
    regex_literals=True,
    declaration_keywords=dict(_JS_KEYWORDS),
    qualifiers=_JS_QUALIFIERS,
    control_keywords=_JS_CONTROL,
    binding_keywords=frozenset({"const", "let", "var"}),
    bare_methods=True,
    newline_terminates=True,
    recognizers=Recognizers(lambda_binding=js_lambda_binding, attribute_prefix=at_annotation),
)

TYPESCRIPT = LanguageProfile(
    name="typescript",
    aliases=("ts", "tsx"),
    extensions=(".ts", ".tsx", ".mts", ".cts"),
    **C_COMMENTS,
    string_delimiters=_JS_STRINGS,
    regex_literals=True,
    declaration_keywords={
        **_JS_KEYWORDS,
        "interface": K.CLASS,
        "enum": K.ENUM,
        "namespace": K.NAMESPACE,
        "module": K.NAMESPACE,
    },
    alias_keywords=frozenset({"type"}),
    qualifiers=_JS_QUALIFIERS
    | frozenset({"public", "private", "protected", "readonly", "abstract", "override", "const"}),
    control_keywords=_JS_CONTROL,
    binding_keywords=frozenset({"const", "let", "var"}),
    bare_methods=True,
    newline_terminates=True,
    recognizers=Recognizers(lambda_binding=js_lambda_binding, attribute_prefix=at_annotation),
)

GO = LanguageProfile(
    name="go",
    aliases=("golang",),
    extensions=(".go",),
    **C_COMMENTS,
    string_delimiters=(DOUBLE_QUOTED, StringDelimiter("`", "`", escape=None, multiline=True)),
    char_literals=CharLiteralStyle.LENIENT,
    declaration_keywords={"func": K.FUNCTION},
    alias_keywords=frozenset({"type"}),
    control_keywords=frozenset({
        "if", "else", "for", "switch", "case", "default", "return", "go", "defer", "select",
        "break", "continue", "goto", "fallthrough", "package", "import",
    }),  # fmt: skip
    newline_terminates=True,
)

RUST = LanguageProfile(
    name="rust",
    aliases=("rs",),
    extensions=(".rs",),
    **C_COMMENTS,
    string_delimiters=(StringDelimiter('"', '"', multiline=True),),
    char_literals=CharLiteralStyle.STRICT,
    raw_strings=RawStringStyle.RUST,
    declaration_keywords={
        "fn": K.FUNCTION,
        "struct": K.STRUCT,
        "union": K.UNION,
        "enum": K.ENUM,
        "trait": K.CLASS,
        "impl": K.CLASS,
        "mod": K.NAMESPACE,
    },
    alias_keywords=frozenset({"type"}),
    qualifiers=frozenset({"pub", "async", "const", "unsafe", "extern", "default", "crate"}),
    control_keywords=frozenset({
        "if", "else", "for", "while", "loop", "match", "return", "let", "break", "continue",
        "use", "macro_rules",
    }),  # fmt: skip
    recognizers=Recognizers(attribute_prefix=rust_attribute),
)

PYTHON = LanguageProfile(
    name="python",
    aliases=("py", "python3"),
    extensions=(".py", ".pyi", ".pyw"),
    family=LanguageFamily.PYTHON_STYLE,
    line_comments=("#",),
    string_delimiters=(
        StringDelimiter('"""', '"""', multiline=True),
        StringDelimiter("'''", "'''", multiline=True),
        DOUBLE_QUOTED,
        SINGLE_QUOTED,
    ),
    declaration_keywords={"def": K.FUNCTION, "class": K.CLASS},
    qualifiers=frozenset({"async"}),
    docstrings=True,
    recognizers=Recognizers(attribute_prefix=python_decorator),
)

PHP = LanguageProfile(
    name="php",
    extensions=(".php", ".phtml"),
    line_comments=("//", "#"),
    block_comments=(("/*", "*/"),),
    string_delimiters=(
        StringDelimiter('"', '"', multiline=True),
        StringDelimiter("'", "'", multiline=True),
    ),
    tag_markers=("<?php", "<?=", "?>"),
    declaration_keywords={
        "function": K.FUNCTION,
        "class": K.CLASS,
        "interface": K.CLASS,
        "trait": K.CLASS,
        "enum": K.ENUM,
        "namespace": K.NAMESPACE,
    },
    qualifiers=frozenset({
        "abstract", "final", "public", "private", "protected", "static", "readonly",
    }),  # fmt: skip
    control_keywords=frozenset({
        "if", "else", "elseif", "for", "foreach", "while", "do", "switch", "case", "default",
        "return", "throw", "try", "catch", "finally", "new", "echo", "print", "use", "const",
        "match", "fn", "require", "require_once", "include", "include_once", "global",
        "yield", "break", "continue", "declare", "unset", "isset", "list",
    }),  # fmt: skip
    recognizers=Recognizers(lambda_binding=php_closure_binding),
)

SCALA = LanguageProfile(
    name="scala",
    extensions=(".scala", ".sc"),
    **C_COMMENTS,
    string_delimiters=(
        StringDelimiter('"""', '"""', escape=None, multiline=True),
        DOUBLE_QUOTED,
    ),
    char_literals=CharLiteralStyle.STRICT,
    declaration_keywords={
        "def": K.FUNCTION,
        "class": K.CLASS,
        "trait": K.CLASS,
        "object": K.NAMESPACE,
        "enum": K.ENUM,
    },
    alias_keywords=frozenset({"type"}),
    qualifiers=frozenset({
        "abstract", "case", "final", "sealed", "implicit", "lazy", "override", "private",
        "protected", "inline", "opaque", "open", "transparent", "package",
    }),  # fmt: skip
    control_keywords=frozenset({
        "if", "else", "for", "while", "do", "match", "return", "throw", "try", "catch",
        "finally", "new", "yield", "import", "export", "given", "val", "var", "then",
    }),  # fmt: skip
    newline_terminates=True,
    expression_bodies=True,
    recognizers=Recognizers(attribute_prefix=at_annotation),
)

_RUBY_MODIFIERS = frozenset({"if", "unless", "while", "until"})

RUBY = LanguageProfile(
    name="ruby",
    aliases=("rb",),
    extensions=(".rb", ".rake", ".gemspec", ".ru"),
    family=LanguageFamily.RUBY_STYLE,
    line_comments=("#",),
    block_comments=(("=begin", "=end"),),
    string_delimiters=(
        StringDelimiter('"', '"', multiline=True),
        StringDelimiter("'", "'", multiline=True),
        StringDelimiter("`", "`", multiline=True),
    ),
    regex_literals=True,
    declaration_keywords={"def": K.FUNCTION, "class": K.CLASS, "module": K.NAMESPACE},
    qualifiers=frozenset({
        "private", "protected", "public", "private_class_method", "public_class_method",
        "module_function",
    }),  # fmt: skip
    control_keywords=_RUBY_MODIFIERS | frozenset({"case", "for"}),
    block_keywords=_RUBY_MODIFIERS | frozenset({"case", "for", "begin", "do"}),
    modifier_keywords=_RUBY_MODIFIERS,
    loop_keywords=frozenset({"while", "until", "for"}),
    block_end="end",
    newline_terminates=True,
)

BUILTIN_PROFILES: tuple[LanguageProfile, ...] = (
    C,
    CPP,
    JAVA,
    JAVASCRIPT,
    TYPESCRIPT,
    GO,
    RUST,
    PYTHON,
    PHP,
    SCALA,
    RUBY,
)

# Header markers used to tell C from C++ by content.
CPP_MARKERS: tuple[str, ...] = (
    "class ",
    "namespace ",
    "template<",
    "template <",
    "::",
    "std::",
    "public:",
    "private:",
    "protected:",
    "typename ",
    "constexpr ",
    "nullptr",
    "virtual ",
    "override",
    "final",
    "delete",
    " new ",
)
C_MARKERS: tuple[str, ...] = ("struct ", "typedef ", "void ", "int ", "char ", "#include <")


__all__ = (
    "BUILTIN_PROFILES",
    "C",
    "CPP",
    "CPP_MARKERS",
    "C_MARKERS",
    "GO",
    "JAVA",
    "JAVASCRIPT",
    "PHP",
    "PYTHON",
    "RUBY",
    "RUST",
    "SCALA",
    "TYPESCRIPT",
)
