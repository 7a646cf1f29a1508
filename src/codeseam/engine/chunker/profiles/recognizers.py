# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Special-construct recognizers used by the built-in profiles.

Each recognizer looks at the code view at one index and either recognizes its
form there, returning the extracted name and where the form ends, or returns
None. Recognizers never look past `limit`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from codeseam.engine.chunker.profiles.profile import Recognized


if TYPE_CHECKING:
    from codeseam.engine.chunker.scanner import CodeView


_ATTRIBUTE_CALLS = frozenset({"__attribute__", "__declspec", "alignas", "_Alignas"})
_JS_BINDINGS = frozenset({"const", "let", "var"})


def _is_word(text: str) -> bool:
    return bool(text) and (text[0].isalnum() or text[0] in "_$")


# ===========================================================================
# *  Operator overloads
# ===========================================================================


def cpp_operator_overload(view: CodeView, i: int, limit: int) -> Recognized | None:
    """`operator<<(`, `operator()(`, `operator[](`, `operator new[](`, `operator bool(`."""
    if view.text(i) != "operator":
        return None
    j = i + 1
    parts: list[str] = []
    if view.text(j) == "(" and view.text(j + 1) == ")":
        parts, j = ["()"], j + 2
    else:
        while j < limit and view.text(j) not in ("(", ";", "{", "}"):
            if view.text(j) == "[" and view.text(j + 1) == "]":
                parts.append("[]")
                j += 2
                continue
            parts.append(view.text(j))
            j += 1
    if not parts or view.text(j) != "(":
        return None
    symbol = ""
    for part in parts:
        if symbol and _is_word(symbol[-1]) and _is_word(part):
            symbol += " "
        symbol += part
    separator = " " if _is_word(symbol) else ""
    return Recognized(f"operator{separator}{symbol}", j)


# ===========================================================================
# *  Function pointer aliases
# ===========================================================================


def c_function_pointer_alias(view: CodeView, i: int, limit: int) -> Recognized | None:
    """`typedef int (*BinaryOp)(int, int);`, with `i` just past `typedef`."""
    end = view.find(i, limit, ";")
    if end == -1:
        return None
    for j in range(i, end):
        if view.text(j) != "(" or view.text(j + 1) not in ("*", "^", "&"):
            continue
        close = view.close_of(j, end)
        if view.text(close + 1) != "(":
            continue
        if names := [k for k in range(j + 2, close) if view.is_identifier(k)]:
            return Recognized(view.text(names[-1]), end + 1)
    return None


# ===========================================================================
# *  Attribute and decorator prefixes
# ===========================================================================


def cpp_attribute(view: CodeView, i: int, limit: int) -> Recognized | None:
    """`[[nodiscard]]`, `__attribute__((packed))`, `alignas(16)`."""
    if view.text(i) == "[" and view.text(i + 1) == "[":
        return Recognized(view.text(i + 2), view.close_of(i, limit) + 1)
    if view.text(i) in _ATTRIBUTE_CALLS and view.text(i + 1) == "(":
        return Recognized(view.text(i), view.close_of(i + 1, limit) + 1)
    return None


def at_annotation(view: CodeView, i: int, limit: int) -> Recognized | None:
    """Java annotations and TypeScript decorators: `@Override`, `@Component({...})`."""
    if view.text(i) != "@" or not view.is_identifier(i + 1) or view.text(i + 1) == "interface":
        return None
    j = i + 2
    while view.text(j) == "." and view.is_identifier(j + 1):
        j += 2
    name = view.join(i + 1, j)
    if view.text(j) == "(":
        j = view.close_of(j, limit) + 1
    return Recognized(name, min(j, limit))


def rust_attribute(view: CodeView, i: int, limit: int) -> Recognized | None:
    """`#[derive(Debug)]` and inner `#![allow(dead_code)]`."""
    if view.text(i) != "#":
        return None
    j = i + 2 if view.text(i + 1) == "!" else i + 1
    if view.text(j) != "[":
        return None
    return Recognized(view.text(j + 1), view.close_of(j, limit) + 1)


def python_decorator(view: CodeView, i: int, limit: int) -> Recognized | None:
    """A decorator line: `@` through the end of its (possibly bracketed) line."""
    if view.text(i) != "@" or not view.starts_line(i):
        return None
    j = i + 1
    while j < limit and not view.newline_before(j):
        j = view.close_of(j, limit) + 1 if view.text(j) in ("(", "[", "{") else j + 1
    return Recognized(view.join(i + 1, min(j, i + 2)), min(j, limit))


# ===========================================================================
# *  Lambda bindings
# ===========================================================================


def cpp_lambda_binding(view: CodeView, i: int, limit: int) -> Recognized | None:
    """`auto multiply = [factor](int x) { ... };`; `end` is the body's `{`."""
    equals = view.find(i, limit, "=", ";", "{")
    if equals <= i + 1 or view.text(equals) != "=" or view.text(equals + 1) != "[":
        return None
    if not view.is_identifier(equals - 1):
        return None
    j = view.close_of(equals + 1, limit) + 1
    if view.text(j) == "(":
        j = view.close_of(j, limit) + 1
    body = view.find(j, limit, "{", ";")
    if body == -1 or view.text(body) != "{":
        return None
    return Recognized(view.text(equals - 1), body)


def js_lambda_binding(view: CodeView, i: int, limit: int) -> Recognized | None:
    """`const f = (a) => {`, `let f = async x => x`, `handler = function () {`.

    `end` is the index where the function body begins: a `{`, or the first
    token of an expression body.
    """
    j = i + 1 if view.text(i) in _JS_BINDINGS else i
    if not view.is_identifier(j):
        return None
    name = view.text(j)
    j += 1
    if view.text(j) in (":", "!"):
        j = view.find(j, limit, "=", ";")
        if j == -1:
            return None
    if view.text(j) != "=":
        return None
    j += 1
    if view.text(j) == "async":
        j += 1
    if view.text(j) == "function":
        j += 1
        if view.text(j) == "*":
            j += 1
        if view.is_identifier(j):
            j += 1
        if view.text(j) != "(":
            return None
        body = view.find(view.close_of(j, limit) + 1, limit, "{", ";")
        return Recognized(name, body) if body != -1 and view.text(body) == "{" else None
    if view.text(j) == "(":
        j = view.close_of(j, limit) + 1
        if view.text(j) == ":":
            j = view.find(j, limit, "=>", ";", "{")
            if j == -1:
                return None
    elif view.is_identifier(j):
        j += 1
    else:
        return None
    if view.text(j) != "=>":
        return None
    return Recognized(name, j + 1) if j + 1 < limit else None


def php_closure_binding(view: CodeView, i: int, limit: int) -> Recognized | None:
    """`$double = function ($x) use ($k) {`, `$square = fn($x) => $x ** 2;`.

    The name drops its `$`. `end` is the body's `{`, or the first token after
    the arrow of an arrow function.
    """
    variable = view.text(i)
    if len(variable) < 2 or variable[0] != "$" or view.text(i + 1) != "=":
        return None
    j = i + 2
    if view.text(j) == "static":
        j += 1
    word = view.text(j)
    if word not in ("function", "fn"):
        return None
    j += 1
    if view.text(j) == "&":
        j += 1
    if view.text(j) != "(":
        return None
    j = view.close_of(j, limit) + 1
    if word == "fn":
        arrow = view.find(j, limit, "=>", ";", "{")
        if arrow == -1 or view.text(arrow) != "=>" or arrow + 1 >= limit:
            return None
        return Recognized(variable[1:], arrow + 1)
    body = view.find(j, limit, "{", ";")
    return Recognized(variable[1:], body) if body != -1 and view.text(body) == "{" else None


__all__ = (
    "at_annotation",
    "c_function_pointer_alias",
    "cpp_attribute",
    "cpp_lambda_binding",
    "cpp_operator_overload",
    "js_lambda_binding",
    "php_closure_binding",
    "python_decorator",
    "rust_attribute",
)
