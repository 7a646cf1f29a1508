# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Boundary detection: find declarations in a token stream and nest them.

The detector walks the code view of a token stream one statement at a time.
At each statement start it tries, in order:

1. a keyword declaration (`class`, `struct`, `fn`, `func`, `def`, ...),
2. a type alias (`typedef`, `using X =`, `type X`),
3. a lambda bound to a name (`auto f = [](...) {`, `const f = () =>`),
4. an implicit function whose header is `type name(params)` followed by a
   body or a terminating `;`.

Attribute, decorator, qualifier and template prefixes are absorbed into the
declaration they precede. Anything else is skipped as an ordinary statement;
blocks inside skipped statements are searched too, so local functions and
classes are still found.

Bodies are brace-delimited, indentation-delimited for the Python family, or
closed by a keyword for the Ruby family. An opening brace or keyword with no
partner runs the declaration to the end of its enclosing region and flags it
incomplete.
"""

from __future__ import annotations

import bisect
import logging

from typing import NamedTuple

from codeseam.core.chunks import ChunkFlag, ChunkKind, ChunkSpan
from codeseam.core.spans import ByteRange
from codeseam.core.tokens import TokenKind
from codeseam.engine.chunker.profiles.profile import BlockStyle, LanguageProfile
from codeseam.engine.chunker.scanner import OPENERS, CodeView, TokenStream


logger = logging.getLogger(__name__)

DEFAULT_MAX_NESTING_DEPTH = 100
# Each nesting level costs up to five interpreter frames; this keeps a full
# descent well inside the default recursion limit.
MAX_NESTING_DEPTH = 128

_TYPE_HEADER_CONTINUATIONS = frozenset({
    ":", "extends", "implements", "final", "sealed", "permits", "where", "with", "(",
})  # fmt: skip
_HEADER_BREAKERS = frozenset({"=", ";", "{", "}", ".", "->", "?", ",", "=>", "return"})
_BODYLESS_MARKERS = frozenset({"default", "delete", "0"})
# After these, a modifier keyword opens a block instead: `x = if ready`.
_BLOCK_STATEMENT_STARTS = frozenset(
    "; = ( [ { , | || && and or then do else => << += -= *= /=".split()
)
_LOOP_BODY = "do"
_TYPEDEF_TAGS = {
    "struct": ChunkKind.STRUCT,
    "union": ChunkKind.UNION,
    "enum": ChunkKind.ENUM,
    "class": ChunkKind.CLASS,
}
_ALIAS_BODY_KINDS = {
    "struct": ChunkKind.STRUCT,
    "interface": ChunkKind.CLASS,
    "union": ChunkKind.UNION,
    "enum": ChunkKind.ENUM,
}
_CONTINUATION_TAIL = frozenset(
    "( [ { , . = + - * / % & | ^ ! ~ < > ? : => == != === !== && || ?? += -= *= /= %= &= |= ^= ** -> :=".split()
)
_CONTINUATION_HEAD = frozenset(
    ") ] } . ?. , = == != === !== && || ?? + * / % & | ^ ? : => -> += -= *= /=".split()
)


class _Scope(NamedTuple):
    """Where a region sits: the chunk enclosing it and how deep we are."""

    kind: ChunkKind | None
    name: str
    in_function: bool
    depth: int
    """Depth of chunks found directly in this region."""
    level: int
    """Bracket nesting of this region, counting skipped blocks too."""

    @property
    def owns_methods(self) -> bool:
        return self.kind is not None and self.kind.owns_methods


_TOP = _Scope(None, "", in_function=False, depth=0, level=0)


def _simple_name(name: str) -> str:
    """`ns::Container<T>` -> `Container`; `Box<T>::get` -> `get`."""
    depth = 0
    kept: list[str] = []
    for char in name:
        if char == "<":
            depth += 1
        elif char == ">" and depth:
            depth -= 1
        elif not depth:
            kept.append(char)
    return "".join(kept).rsplit("::", 1)[-1].strip()


class _Found(NamedTuple):
    span: ChunkSpan
    next: int


class BoundaryDetector:
    """Finds declaration boundaries for one language profile.

    The detector holds no per-input state; `detect` may be called from many
    threads at once.
    """

    def __init__(
        self, profile: LanguageProfile, *, max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    ) -> None:
        self.profile = profile
        self.max_nesting_depth = min(max_nesting_depth, MAX_NESTING_DEPTH)

    def detect(self, stream: TokenStream) -> tuple[ChunkSpan, ...]:
        """Return the top-level declarations of `stream`, each carrying its children."""
        detection = _Detection(self.profile, stream, self.max_nesting_depth)
        return tuple(detection.run())


class _Detection:
    """One detection pass over one token stream."""

    def __init__(self, profile: LanguageProfile, stream: TokenStream, max_depth: int) -> None:
        self.profile = profile
        self.stream = stream
        self.view: CodeView = stream.code_view()
        self.max_depth = max_depth
        self.source_length = len(stream.source)
        self.truncated = stream.truncated_offsets
        self.recognizers = profile.recognizers
        self.block_openers: frozenset[int] = frozenset()
        self.block_ends: dict[int, int] = {}

    def run(self) -> list[ChunkSpan]:
        if not len(self.view):
            return []
        if self.profile.block_style is BlockStyle.INDENTATION:
            return self.indented_region(0, len(self.view), _TOP)
        if self.profile.block_style is BlockStyle.KEYWORD_END:
            self.block_openers, self.block_ends = self.pair_blocks()
            return self.keyword_region(0, len(self.view), _TOP)
        return self.region(0, len(self.view), _TOP)

    # ===========================================================================
    # *  Shared helpers
    # ===========================================================================

    def offset_before(self, hi: int) -> int:
        """Byte offset where a region ending at code index `hi` stops."""
        if hi >= len(self.view):
            return self.source_length
        return self.view.start(hi)

    def flags_for(self, full_range: ByteRange, *, incomplete: bool = False) -> frozenset[ChunkFlag]:
        flags: set[ChunkFlag] = set()
        if incomplete:
            flags.add(ChunkFlag.INCOMPLETE)
        at = bisect.bisect_left(self.truncated, full_range.start)
        if at < len(self.truncated) and self.truncated[at] < full_range.end:
            flags.add(ChunkFlag.TRUNCATED_LITERAL)
        return frozenset(flags)

    def angle_close(self, i: int, hi: int) -> int:
        """Index of the `>` closing the `<` at `i`, or -1 if it is not a generic list."""
        view = self.view
        depth = 0
        j = i
        while j < hi:
            text = view.text(j)
            if text == "<":
                depth += 1
            elif text == ">":
                depth -= 1
                if depth == 0:
                    return j
            elif text in ("(", "["):
                j = view.close_of(j, hi)
            elif text in (";", "{", "}", ")", "]"):
                return -1
            j += 1
        return -1

    def skip_attributes(self, j: int, hi: int) -> int:
        if (recognize := self.recognizers.attribute_prefix) is None:
            return j
        while j < hi and (found := recognize(self.view, j, hi)) is not None and found.end > j:
            j = found.end
        return j

    def qualified_name_end(self, j: int, hi: int) -> int:
        """Past `a::b::c`, or PHP's `a\\b\\c`, starting at identifier `j`."""
        view = self.view
        j += 1
        while j + 1 < hi and view.text(j) in ("::", "\\") and view.is_identifier(j + 1):
            j += 2
        return j

    def qualifier_start(self, i: int, lo: int) -> int:
        """Back over `ns::Box<T>::` before the name at `i`, not past `lo`."""
        view = self.view
        while i - 2 >= lo and view.text(i - 1) == "::":
            j = i - 2
            if view.text(j) == ">":
                depth = 0
                while j >= lo:
                    if view.text(j) == ">":
                        depth += 1
                    elif view.text(j) == "<":
                        depth -= 1
                        if depth == 0:
                            break
                    j -= 1
                j -= 1
            if j < lo or not view.is_identifier(j):
                break
            i = j
        return i

    def child_scope(self, scope: _Scope, kind: ChunkKind, name: str) -> _Scope:
        return _Scope(
            kind,
            _simple_name(name),
            in_function=kind.is_callable or scope.in_function,
            depth=scope.depth + 1,
            level=scope.level + 1,
        )

    def make_span(
        self,
        kind: ChunkKind,
        name: str,
        start: int,
        end_offset: int,
        scope: _Scope,
        *,
        body: ByteRange | None = None,
        signature_end: int | None = None,
        children: tuple[ChunkSpan, ...] = (),
        incomplete: bool = False,
    ) -> ChunkSpan:
        view = self.view
        full = ByteRange(view.start(start), end_offset)
        sig_end = signature_end if signature_end is not None else end_offset
        signature = self.stream.source[full.start : sig_end].decode("utf-8", errors="replace")
        return ChunkSpan(
            kind=kind,
            name=name,
            full_range=full,
            body_range=body,
            signature=signature.strip(),
            children=children,
            flags=self.flags_for(full, incomplete=incomplete),
            depth=scope.depth,
            first_token=view.stream_index[start],
        )

    def braced(
        self,
        kind: ChunkKind,
        name: str,
        start: int,
        open_index: int,
        hi: int,
        scope: _Scope,
    ) -> _Found:
        """A declaration whose body is the brace group at `open_index`."""
        view = self.view
        close = view.match[open_index]
        incomplete = not open_index < close < hi
        if incomplete:
            logger.debug("Unbalanced body for %s %r; running it to the region end", kind, name)
            body_end = self.offset_before(hi)
            inner_hi = hi
            end_offset = body_end
            nxt = hi
        else:
            body_end = view.end(close)
            inner_hi = close
            end_offset = body_end
            nxt = close + 1
        children: tuple[ChunkSpan, ...] = ()
        inner = self.child_scope(scope, kind, name)
        if inner.level <= self.max_depth:
            children = tuple(self.region(open_index + 1, inner_hi, inner))
        else:
            logger.debug("Nesting limit reached inside %s %r", kind, name)
        return _Found(
            self.make_span(
                kind,
                name,
                start,
                end_offset,
                scope,
                body=ByteRange(view.start(open_index), body_end),
                signature_end=view.start(open_index),
                children=children,
                incomplete=incomplete,
            ),
            nxt,
        )

    def bodyless(self, kind: ChunkKind, name: str, start: int, last: int, scope: _Scope) -> _Found:
        """A declaration without a body ending at code token `last` (usually `;`)."""
        view = self.view
        signature_end = view.start(last) if view.text(last) == ";" else view.end(last)
        return _Found(
            self.make_span(
                kind, name, start, view.end(last), scope, signature_end=signature_end
            ),
            last + 1,
        )

    def extend_through_semicolon(self, found: _Found, hi: int) -> _Found:
        """Absorb a trailing `;`, and for C-like languages `} name, *other;`."""
        view = self.view
        j = found.next
        if j >= hi:
            return found
        if view.text(j) != ";":
            if not self.profile.trailing_declarators:
                return found
            end = view.find(j, hi, ";", "{", "}", "(")
            if end == -1 or view.text(end) != ";":
                return found
            if any(
                not (view.is_identifier(k) or view.text(k) in ("*", "&", ",", "[", "]", "="))
                for k in range(j, end)
            ):
                return found
            j = end
        span = found.span
        return _Found(span._replace(full_range=ByteRange(span.full_range.start, view.end(j))), j + 1)

    def content_start(self, after: int) -> int:
        """Start of the first code or literal token following code token `after`."""
        stream = self.stream
        for index in range(self.view.stream_index[after] + 1, len(stream)):
            token = stream[index]
            if token.is_code or token.kind.is_literal:
                return token.start
        return self.source_length

    def content_end(self, after: int, stop: int) -> int | None:
        """End of the last code or literal token between code tokens `after` and `stop`."""
        stream = self.stream
        lo = self.view.stream_index[after] + 1
        hi = self.view.stream_index[stop] if stop < len(self.view) else len(stream)
        for index in range(hi - 1, lo - 1, -1):
            token = stream[index]
            if token.is_code or token.kind.is_literal:
                return token.end
        return None

    def declarator_name(self, lo: int, hi: int) -> str:
        """The first plain identifier in `[lo, hi)`: `} User;` -> `User`."""
        return next((self.view.text(k) for k in range(lo, hi) if self.view.is_identifier(k)), "")

    def last_identifier(self, lo: int, hi: int) -> str:
        """The last identifier in `[lo, hi)` outside bracket groups."""
        view = self.view
        name = ""
        k = lo
        while k < hi:
            if view.is_identifier(k):
                name = view.text(k)
            k = view.close_of(k, hi) + 1 if view.text(k) in OPENERS else k + 1
        return name

    # ===========================================================================
    # *  Brace regions
    # ===========================================================================

    def region(self, lo: int, hi: int, scope: _Scope) -> list[ChunkSpan]:
        """Declarations in code tokens `[lo, hi)`."""
        view = self.view
        labels = self.profile.access_labels
        spans: list[ChunkSpan] = []
        i = lo
        while i < hi:
            text = view.text(i)
            if text == ";":
                i += 1
                continue
            if text in labels and view.text(i + 1) == ":":
                i += 2
                continue
            if (found := self.declaration(i, hi, scope)) is not None:
                spans.append(found.span)
                i = max(found.next, i + 1)
                continue
            i = self.skip_statement(i, hi, scope, spans)
        return spans

    def prefixes(self, i: int, hi: int) -> tuple[int, bool]:
        """Skip attributes, template headers and qualifiers. Returns (index, templated)."""
        view = self.view
        profile = self.profile
        recognize = self.recognizers.attribute_prefix
        templated = False
        k = i
        while k < hi:
            if recognize is not None and (found := recognize(view, k, hi)) is not None and found.end > k:
                k = found.end
                continue
            text = view.text(k)
            if text in profile.template_keywords and view.text(k + 1) == "<":
                close = self.angle_close(k + 1, hi)
                if close == -1:
                    break
                k = close + 1
                templated = True
                continue
            if text in profile.qualifiers:
                following = view.text(k + 1)
                if text == "pub" and following == "(":
                    k = view.close_of(k + 1, hi) + 1
                    continue
                if following and following not in ("(", "=", ":", ";", ",", ")", "{", "}", "?", "!", "<"):
                    k += 1
                    continue
            break
        return k, templated

    def declaration(self, i: int, hi: int, scope: _Scope) -> _Found | None:
        view = self.view
        profile = self.profile
        k, templated = self.prefixes(i, hi)
        if k >= hi:
            return None
        word = view.text(k)
        if word in profile.control_keywords:
            return None
        found: _Found | None = None
        if (kind := profile.keyword_kind(word)) is not None:
            found = self.keyword_declaration(i, k, hi, scope, kind)
        elif word in profile.alias_keywords:
            found = self.alias_declaration(i, k, hi, scope)
        if found is None and (recognize := self.recognizers.lambda_binding) is not None:
            if (binding := recognize(view, k, hi)) is not None:
                found = self.lambda_declaration(i, binding.name, binding.end, hi, scope)
        if found is None and self.implicit_allowed(scope):
            found = self.implicit_function(i, k, hi, scope)
        if found is None and templated:
            found = self.template_declaration(i, k, hi, scope)
        if found is not None and templated and found.span.kind is ChunkKind.OTHER_DECLARATION:
            found = found._replace(span=found.span._replace(kind=ChunkKind.TEMPLATE))
        return found

    def implicit_allowed(self, scope: _Scope) -> bool:
        if scope.in_function:
            return False
        return self.profile.implicit_functions or (self.profile.bare_methods and scope.owns_methods)

    # ===========================================================================
    # *  Keyword declarations
    # ===========================================================================

    def keyword_declaration(
        self, start: int, k: int, hi: int, scope: _Scope, kind: ChunkKind
    ) -> _Found | None:
        view = self.view
        word = view.text(k)
        if kind.is_callable:
            if self.profile.expression_bodies:
                return self.expression_function(start, k, hi, scope)
            return self.keyword_function(start, k, hi, scope)
        j = k + 1
        if kind is ChunkKind.OTHER_DECLARATION:
            end = self.statement_end(j, hi) - 1
            if end < j or view.text(end) != ";":
                return None
            return self.bodyless(kind, view.text(j) if view.is_identifier(j) else "", start, end, scope)
        if word == "impl":
            return self.impl_block(start, k, hi, scope)
        if kind is ChunkKind.ENUM and view.text(j) in ("class", "struct"):
            j += 1
        j = self.skip_attributes(j, hi)
        name = ""
        if view.is_identifier(j):
            name_lo = j
            j = self.qualified_name_end(j, hi)
            if view.text(j) == "<":
                close = self.angle_close(j, hi)
                if close == -1:
                    return None
                j = close + 1
            elif view.text(j) == "[" and self.profile.expression_bodies:
                j = view.close_of(j, hi) + 1
            name = view.join(name_lo, j)
        after = view.text(j)
        if after == "{":
            return self.type_body(kind, name, start, j, hi, scope)
        if not name:
            return None
        if after == ";":
            return self.bodyless(kind, name, start, j, scope)
        if self.profile.expression_bodies:
            return self.type_header(kind, name, start, j, hi, scope)
        if after in _TYPE_HEADER_CONTINUATIONS:
            open_index = view.find(j, hi, "{", ";")
            if open_index == -1:
                return None
            if view.text(open_index) == ";":
                return self.bodyless(kind, name, start, open_index, scope)
            return self.type_body(kind, name, start, open_index, hi, scope)
        # `struct Point p;` or `struct Point make_point(...)`: a use, not a definition.
        return None

    def type_body(
        self, kind: ChunkKind, name: str, start: int, open_index: int, hi: int, scope: _Scope
    ) -> _Found:
        return self.extend_through_semicolon(
            self.braced(kind, name, start, open_index, hi, scope), hi
        )

    def type_header(
        self, kind: ChunkKind, name: str, start: int, j: int, hi: int, scope: _Scope
    ) -> _Found:
        """A header bounded by its statement: `case class P(x: Int) extends T`, with or without a body."""
        stop = self.statement_stop(j, hi)
        open_index = self.view.find(j, stop, "{")
        if open_index != -1:
            return self.type_body(kind, name, start, open_index, hi, scope)
        return self.bodyless(kind, name, start, stop - 1, scope)

    def impl_block(self, start: int, k: int, hi: int, scope: _Scope) -> _Found | None:
        view = self.view
        j = k + 1
        if view.text(j) == "<":
            close = self.angle_close(j, hi)
            if close == -1:
                return None
            j = close + 1
        open_index = view.find(j, hi, "{", ";")
        if open_index == -1 or view.text(open_index) != "{":
            return None
        stop = view.find(j, open_index, "where")
        name = view.join(j, open_index if stop == -1 else stop)
        return self.braced(ChunkKind.CLASS, name, start, open_index, hi, scope)

    def keyword_function(self, start: int, k: int, hi: int, scope: _Scope) -> _Found | None:
        """`function f(`, `fn f(`, `func (r *T) f(`, `function* gen(`."""
        view = self.view
        j = k + 1
        receiver = False
        if view.text(j) in ("*", "&"):
            j += 1
        if view.text(j) == "(" and view.is_identifier(view.close_of(j, hi) + 1):
            # Go method receiver.
            j = view.close_of(j, hi) + 1
            receiver = True
        name = ""
        if view.is_identifier(j):
            name = view.text(j)
            j += 1
        if view.text(j) == "<":
            close = self.angle_close(j, hi)
            if close == -1:
                return None
            j = close + 1
        elif view.text(j) == "[":
            j = view.close_of(j, hi) + 1
        if view.text(j) != "(":
            return None
        params_close = view.close_of(j, hi)
        if params_close >= hi:
            return None
        end = view.find(params_close + 1, hi, "{", ";")
        kind = ChunkKind.METHOD if receiver or scope.owns_methods else ChunkKind.FUNCTION
        if end == -1:
            if self.profile.newline_terminates and name:
                return self.bodyless(kind, name, start, params_close, scope)
            return None
        if view.text(end) == ";":
            return self.bodyless(kind, name, start, end, scope)
        return self.braced(kind, name, start, end, hi, scope)

    def expression_function(self, start: int, k: int, hi: int, scope: _Scope) -> _Found | None:
        """`def f(x: Int): Int = {`, `def f: Int = x + 1`, `def +(p: P): P = ...`, abstract `def f(): T`."""
        view = self.view
        name_index = k + 1
        if name_index >= hi or view.newline_before(name_index) or view.text(name_index) in OPENERS:
            return None
        name = view.text(name_index)
        kind = ChunkKind.METHOD if scope.owns_methods else ChunkKind.FUNCTION
        stop = self.statement_stop(name_index + 1, hi)
        equals = view.find(name_index + 1, stop, "=", "{")
        if equals == -1:
            return self.bodyless(kind, name, start, stop - 1, scope)
        if view.text(equals) == "{":
            return self.braced(kind, name, start, equals, hi, scope)
        if equals + 1 < stop and view.text(equals + 1) == "{":
            return self.braced(kind, name, start, equals + 1, hi, scope)
        last = stop - 1
        terminated = view.text(last) == ";" and last > equals
        body_start = self.content_start(equals)
        body_end = self.content_end(equals, last if terminated else stop)
        if body_end is None or body_end <= body_start:
            return self.bodyless(kind, name, start, last, scope)
        span = self.make_span(
            kind,
            name,
            start,
            view.end(last) if terminated else body_end,
            scope,
            body=ByteRange(body_start, body_end),
            signature_end=view.start(equals),
        )
        return _Found(span, stop)

    # ===========================================================================
    # *  Aliases
    # ===========================================================================

    def alias_declaration(self, start: int, k: int, hi: int, scope: _Scope) -> _Found | None:
        word = self.view.text(k)
        if word == "typedef":
            return self.typedef(start, k, hi, scope)
        if word == "using":
            return self.using_alias(start, k, hi, scope)
        return self.type_alias(start, k, hi, scope)

    def typedef(self, start: int, k: int, hi: int, scope: _Scope) -> _Found | None:
        view = self.view
        j = k + 1
        while view.text(j) in self.profile.qualifiers:
            j += 1
        if (tag_kind := _TYPEDEF_TAGS.get(view.text(j))) is not None:
            t = self.skip_attributes(j + 1, hi)
            tag = ""
            if view.is_identifier(t):
                tag = view.text(t)
                t = self.qualified_name_end(t, hi)
            open_index = t if view.text(t) == "{" else -1
            if view.text(t) == ":":
                open_index = view.find(t, hi, "{", ";")
            if open_index != -1 and view.text(open_index) == "{":
                found = self.braced(tag_kind, tag, start, open_index, hi, scope)
                semicolon = view.find(found.next, hi, ";")
                if semicolon == -1:
                    return found
                name = self.declarator_name(found.next, semicolon) or tag
                span = found.span._replace(
                    name=name,
                    full_range=ByteRange(found.span.full_range.start, view.end(semicolon)),
                )
                return _Found(span, semicolon + 1)
        if (recognize := self.recognizers.function_pointer_alias) is not None:
            if (alias := recognize(view, k + 1, hi)) is not None:
                return self.bodyless(
                    ChunkKind.OTHER_DECLARATION, alias.name, start, alias.end - 1, scope
                )
        semicolon = view.find(k + 1, hi, ";")
        if semicolon == -1:
            return None
        return self.bodyless(
            ChunkKind.OTHER_DECLARATION, self.last_identifier(k + 1, semicolon), start, semicolon, scope
        )

    def using_alias(self, start: int, k: int, hi: int, scope: _Scope) -> _Found | None:
        view = self.view
        if not view.is_identifier(k + 1) or view.text(k + 1) == "namespace":
            return None
        j = self.skip_attributes(k + 2, hi)
        if view.text(j) != "=":
            return None
        semicolon = view.find(j, hi, ";")
        if semicolon == -1:
            return None
        return self.bodyless(ChunkKind.OTHER_DECLARATION, view.text(k + 1), start, semicolon, scope)

    def type_alias(self, start: int, k: int, hi: int, scope: _Scope) -> _Found | None:
        """`type X struct {`, `type X = ...;`, `type X<T> = { ... }`."""
        view = self.view
        j = k + 1
        if not view.is_identifier(j):
            return None
        name = view.text(j)
        j += 1
        if view.text(j) == "<":
            close = self.angle_close(j, hi)
            if close == -1:
                return None
            j = close + 1
        elif view.text(j) == "[":
            j = view.close_of(j, hi) + 1
        if view.text(j) == "=":
            j += 1
        body_kind = _ALIAS_BODY_KINDS.get(view.text(j))
        if body_kind is not None and view.text(j + 1) == "{" and k + 2 <= j:
            return self.braced(body_kind, name, start, j + 1, hi, scope)
        end = self.statement_end(k + 1, hi)
        if end <= k + 1:
            return None
        return self.bodyless(ChunkKind.OTHER_DECLARATION, name, start, end - 1, scope)

    # ===========================================================================
    # *  Lambdas, templates and implicit functions
    # ===========================================================================

    def lambda_declaration(
        self, start: int, name: str, body: int, hi: int, scope: _Scope
    ) -> _Found | None:
        view = self.view
        kind = ChunkKind.METHOD if scope.owns_methods else ChunkKind.FUNCTION
        if body >= hi:
            return None
        if view.text(body) == "{":
            found = self.braced(kind, name, start, body, hi, scope)
            if found.next < hi and view.text(found.next) == ";":
                return self.extend_through_semicolon(found, hi)
            return found
        body_start = self.content_start(body - 1)
        literal_end = self.content_end(body - 1, body)
        if (
            self.profile.newline_terminates
            and literal_end is not None
            and self.stream.source.find(b"\n", literal_end, view.start(body)) != -1
            and view.text(body) not in _CONTINUATION_HEAD
        ):
            # `const f = () => "text"` ends with its literal line.
            end = body
        else:
            end = self.statement_end(body, hi)
        last = end - 1
        terminated = view.text(last) == ";" and last >= body
        body_end = self.content_end(body - 1, last if terminated else end)
        if body_end is None or body_end <= body_start:
            return None
        span = self.make_span(
            kind,
            name,
            start,
            view.end(last) if terminated else body_end,
            scope,
            body=ByteRange(body_start, body_end),
            signature_end=body_start,
        )
        return _Found(span, end)

    def template_declaration(self, start: int, k: int, hi: int, scope: _Scope) -> _Found | None:
        """A template that is not a function or type: `template<class T> constexpr T pi = ...;`."""
        view = self.view
        end = self.statement_end(k, hi)
        if end <= k:
            return None
        last = end - 1
        stop = view.find(k, last + 1, "=", ";")
        name = self.last_identifier(k, stop if stop != -1 else last + 1)
        return self.bodyless(ChunkKind.TEMPLATE, name, start, last, scope)

    def call_like(self, paren: int) -> bool:
        """Whether the first thing inside the parenthesis at `paren` is a literal."""
        stream = self.stream
        for index in range(self.view.stream_index[paren] + 1, len(stream)):
            token = stream[index]
            if token.kind is TokenKind.WHITESPACE or token.kind.is_comment:
                continue
            if token.kind.is_literal:
                return True
            return token.is_code and token.text[:1].isdigit()
        return False

    def implicit_function(self, start: int, k: int, hi: int, scope: _Scope) -> _Found | None:  # noqa: C901
        """`int add(int a, int b) {`, `Foo::Foo() : x(0) {`, `virtual ~Foo() = default;`."""
        view = self.view
        profile = self.profile
        j = k
        paren = -1
        name = ""
        name_start = -1
        overload = False
        while j < hi:
            text = view.text(j)
            if text == "operator" and (recognize := self.recognizers.operator_overload) is not None:
                if (recognized := recognize(view, j, hi)) is None:
                    return None
                name_start, paren = self.qualifier_start(j, k), recognized.end
                name = f"{view.join(name_start, j)}{recognized.name}"
                overload = True
                break
            if text == "(":
                if j == k or not view.is_identifier(j - 1):
                    return None
                paren = j
                name_start = j - 1
                if name_start - 1 >= k and view.text(name_start - 1) == "~":
                    name_start -= 1
                name_start = self.qualifier_start(name_start, k)
                name = view.join(name_start, j)
                break
            if text in _HEADER_BREAKERS:
                return None
            if text == "<" and j > k and view.is_identifier(j - 1):
                close = self.angle_close(j, hi)
                if close == -1:
                    return None
                j = close + 1
                continue
            if text == "[":
                j = view.close_of(j, hi) + 1
                continue
            j += 1
        if paren == -1:
            return None
        simple = _simple_name(name)
        if simple in profile.control_keywords or simple in profile.qualifiers:
            return None
        if profile.keyword_kind(simple) is not None:
            return None
        return_type = [t for t in range(k, name_start) if view.text(t) not in profile.qualifiers]
        qualifier = name.rsplit("::", 1)[0] if "::" in name else ""
        is_constructor = (
            simple.startswith("~")
            or (scope.owns_methods and simple == scope.name)
            or (bool(qualifier) and _simple_name(qualifier) == simple.lstrip("~"))
        )
        bare = profile.bare_methods and scope.owns_methods
        if not return_type and not (is_constructor or bare or overload):
            return None
        if self.call_like(paren):
            return None
        close = view.close_of(paren, hi)
        if close >= hi:
            return None
        tail = self.function_tail(close + 1, hi)
        if tail is None:
            return None
        end, has_body = tail
        kind = ChunkKind.METHOD if scope.owns_methods else ChunkKind.FUNCTION
        if has_body:
            return self.braced(kind, name, start, end, hi, scope)
        return self.bodyless(kind, name, start, end, scope)

    def function_tail(self, j: int, hi: int) -> tuple[int, bool] | None:
        """From after the parameter list to the body `{` (True) or the closing `;` (False)."""
        view = self.view
        init_list = False
        throws = False
        while j < hi:
            text = view.text(j)
            if text == "{":
                if init_list and (view.is_identifier(j - 1) or view.text(j - 1) == ">"):
                    j = view.close_of(j, hi) + 1
                    continue
                return j, True
            if text == ";":
                return j, False
            if text == "=":
                if view.text(j + 1) in _BODYLESS_MARKERS and view.text(j + 2) == ";":
                    return j + 2, False
                return None
            if text == ":" and self.profile.constructor_initializers:
                init_list = True
            elif text in ("(", "["):
                j = view.close_of(j, hi)
            elif text == ",":
                if not (init_list or throws):
                    return None
            elif text in ("}", ")", "]", "=>"):
                return None
            elif text == "throws":
                throws = True
            j += 1
        return None

    # ===========================================================================
    # *  Statements
    # ===========================================================================

    def continues(self, prev: int, nxt: int) -> bool:
        """Whether a line break between code tokens `prev` and `nxt` continues the statement.

        A literal closing the line stands in for `prev`: `x = "done"` ends there.
        """
        view = self.view
        if view.text(nxt) in _CONTINUATION_HEAD:
            return True
        literal_end = self.content_end(prev, nxt)
        if literal_end is not None and self.stream.source.find(b"\n", literal_end, view.start(nxt)) != -1:
            return False
        return view.text(prev) in _CONTINUATION_TAIL

    def statement_stop(self, j: int, hi: int) -> int:
        """Index just past the statement continuing at `j`, or `j` when a line break ends it there."""
        if j >= hi or (self.view.newline_before(j) and not self.continues(j - 1, j)):
            return j
        return self.statement_end(j, hi)

    def statement_end(self, i: int, hi: int) -> int:
        """Index just past the statement starting at `i`, without searching nested blocks."""
        return self.skip_statement(i, hi, _TOP, None)

    def skip_statement(
        self, i: int, hi: int, scope: _Scope, sink: list[ChunkSpan] | None
    ) -> int:
        """Skip one ordinary statement, adding declarations in its blocks to `sink`."""
        view = self.view
        newline_terminates = self.profile.newline_terminates
        control = view.text(i) in self.profile.control_keywords
        assigned = False
        j = i
        while j < hi:
            text = view.text(j)
            if text == ";":
                return j + 1
            if text in ("}", ")", "]"):
                return j + 1
            if text in ("(", "["):
                j = view.close_of(j, hi) + 1
            elif text == "{":
                close = view.close_of(j, hi)
                if sink is not None and not assigned:
                    self.search_block(j, close, scope, sink, control=control)
                j = close + 1
                if not assigned:
                    return j
            else:
                if text == "=":
                    assigned = True
                j += 1
            if newline_terminates and j < hi and view.newline_before(j) and not self.continues(j - 1, j):
                return j
        return hi

    def search_block(
        self, open_index: int, close: int, scope: _Scope, sink: list[ChunkSpan], *, control: bool
    ) -> None:
        """Look for declarations inside a block that is not itself a declaration."""
        if control and not scope.in_function:
            return
        if scope.level + 1 > self.max_depth:
            return
        inner = scope._replace(
            in_function=scope.in_function or scope.owns_methods, level=scope.level + 1
        )
        sink.extend(self.region(open_index + 1, close, inner))

    # ===========================================================================
    # *  Indentation regions
    # ===========================================================================

    def indented_region(self, lo: int, hi: int, scope: _Scope) -> list[ChunkSpan]:
        view = self.view
        spans: list[ChunkSpan] = []
        i = lo
        while i < hi:
            if view.starts_line(i) and (found := self.indented_declaration(i, hi, scope)) is not None:
                spans.append(found.span)
                i = max(found.next, i + 1)
                continue
            i = view.close_of(i, hi) + 1 if view.text(i) in OPENERS else i + 1
        return spans

    def indented_declaration(self, i: int, hi: int, scope: _Scope) -> _Found | None:
        view = self.view
        k = self.skip_attributes(i, hi)
        if k >= hi or (k > i and not view.starts_line(k)):
            return None
        while view.text(k) in self.profile.qualifiers:
            k += 1
        kind = self.profile.keyword_kind(view.text(k))
        if kind is None:
            return None
        name = view.text(k + 1) if view.is_identifier(k + 1) else ""
        colon = view.find(k + 1, hi, ":")
        if colon == -1:
            return None
        if kind is ChunkKind.FUNCTION and scope.owns_methods:
            kind = ChunkKind.METHOD
        header_indent = view.indent(i)
        j = colon + 1
        while j < hi:
            if view.newline_before(j) and view.starts_line(j) and view.indent(j) <= header_indent:
                break
            j = view.close_of(j, hi) + 1 if view.text(j) in OPENERS else j + 1
        j = min(j, hi)
        body_end = self.indented_body_end(colon, j, header_indent)
        incomplete = body_end is None
        if body_end is None:
            body_end = view.end(colon)
        inner = self.child_scope(scope, kind, name)
        children: tuple[ChunkSpan, ...] = ()
        if inner.level <= self.max_depth:
            children = tuple(self.indented_region(colon + 1, j, inner))
        span = self.make_span(
            kind,
            name,
            i,
            body_end,
            scope,
            body=ByteRange(view.end(colon), body_end),
            signature_end=view.end(colon),
            children=children,
            incomplete=incomplete,
        )
        return _Found(span, j)

    def indented_body_end(self, colon: int, stop: int, header_indent: int) -> int | None:
        """End of the last token of the body between `colon` and code token `stop`.

        Literals count, so a body holding only a docstring is still a body.
        Comments and literals dedented to the header's column do not.
        """
        view = self.view
        stream = self.stream
        lo = view.stream_index[colon] + 1
        hi = view.stream_index[stop] if stop < len(view) else len(stream)
        for index in range(hi - 1, lo - 1, -1):
            token = stream[index]
            if token.is_code:
                return token.end
            if not token.kind.is_literal:
                continue
            if view.line_begins_at(token.start) and view.indent_at(token.start) <= header_indent:
                continue
            return token.end
        return None

    # ===========================================================================
    # *  Keyword-delimited regions
    # ===========================================================================

    def is_keyword(self, i: int) -> bool:
        """Whether the word at `i` is a keyword rather than a method call, symbol or label."""
        view = self.view
        if i > 0:
            prev = view.text(i - 1)
            if prev in (".", "::") or (prev == ":" and view.end(i - 1) == view.start(i)):
                return False
        return not (view.text(i + 1) == ":" and view.end(i) == view.start(i + 1))

    def opens_statement(self, i: int) -> bool:
        view = self.view
        return i == 0 or view.newline_before(i) or view.text(i - 1) in _BLOCK_STATEMENT_STARTS

    def glued_end(self, j: int, hi: int) -> int:
        """Past the tokens written without spaces from `j`, up to a `(`: `self.create`, `valid?`."""
        view = self.view
        if j >= hi:
            return j
        k = j + 1
        while k < hi and view.text(k) != "(" and view.start(k) == view.end(k - 1):
            k += 1
        return k

    def endless_method(self, i: int) -> bool:
        """`def area = width * height` closes on its own line."""
        view = self.view
        hi = len(view)
        j = self.glued_end(i + 1, hi)
        if view.text(j) == "(":
            j = view.close_of(j, hi) + 1
        return j < hi and view.text(j) == "=" and not view.newline_before(j)

    def pair_blocks(self) -> tuple[frozenset[int], dict[int, int]]:
        """Pair block-opening keywords with the keyword that closes them.

        Returns the indices of every opener and, for each closed opener, the
        index of its closing keyword. Blocks left open have no entry.
        """
        view = self.view
        profile = self.profile
        openers: set[int] = set()
        ends: dict[int, int] = {}
        stack: list[int] = []
        loop = -1
        for i, text in enumerate(view.texts):
            kind = profile.keyword_kind(text)
            closing = text == profile.block_end
            if not (closing or kind is not None or text in profile.block_keywords):
                continue
            if not self.is_keyword(i):
                continue
            if closing:
                if stack:
                    ends[stack.pop()] = i
                continue
            if text == _LOOP_BODY and loop != -1 and view.source.find(b"\n", view.end(loop), view.start(i)) == -1:
                loop = -1
                continue
            if text in profile.modifier_keywords and not self.opens_statement(i):
                continue
            if kind is not None and kind.is_callable and self.endless_method(i):
                continue
            openers.add(i)
            stack.append(i)
            if text in profile.loop_keywords:
                loop = i
        if stack:
            logger.debug("%d %s block(s) never closed", len(stack), profile.name)
        return frozenset(openers), ends

    def keyword_region(self, lo: int, hi: int, scope: _Scope) -> list[ChunkSpan]:
        """Declarations in code tokens `[lo, hi)` of a language whose blocks close with a keyword."""
        view = self.view
        profile = self.profile
        spans: list[ChunkSpan] = []
        i = lo
        while i < hi:
            if i not in self.block_openers:
                i = view.close_of(i, hi) + 1 if view.text(i) in OPENERS else i + 1
                continue
            close = min(self.block_ends.get(i, hi), hi)
            if (kind := profile.keyword_kind(view.text(i))) is not None:
                spans.append(self.keyword_block(kind, i, lo, close, hi, scope))
            elif scope.level < self.max_depth and (
                scope.in_function or view.text(i) not in profile.control_keywords
            ):
                inner = scope._replace(
                    in_function=scope.in_function or scope.owns_methods, level=scope.level + 1
                )
                spans.extend(self.keyword_region(i + 1, close, inner))
            i = close + 1
        return spans

    def header_end(self, i: int, limit: int) -> int:
        """Index past the header starting at keyword `i`: up to a line break or `;`."""
        view = self.view
        j = i + 1
        while j < limit and not view.newline_before(j) and view.text(j) != ";":
            j = view.close_of(j, limit) + 1 if view.text(j) in OPENERS else j + 1
        return min(j, limit)

    def keyword_block(
        self, kind: ChunkKind, i: int, lo: int, close: int, hi: int, scope: _Scope
    ) -> ChunkSpan:
        """`def name ... end`, `class Name < Base ... end`, `module Name ... end`."""
        view = self.view
        start = i
        if i > lo and view.text(i - 1) in self.profile.qualifiers and not view.newline_before(i):
            start = i - 1
        header = self.header_end(i, close)
        if kind.is_callable:
            name_end = self.glued_end(i + 1, header)
            if scope.owns_methods:
                kind = ChunkKind.METHOD
        elif view.is_identifier(i + 1):
            name_end = self.qualified_name_end(i + 1, header)
        else:
            name_end = header
        name = view.join(i + 1, min(name_end, header))
        incomplete = close >= hi
        if incomplete:
            logger.debug("No closing keyword for %s %r; running it to the region end", kind, name)
        end_offset = self.offset_before(hi) if incomplete else view.end(close)
        signature_end = view.end(header - 1)
        children: tuple[ChunkSpan, ...] = ()
        inner = self.child_scope(scope, kind, name)
        if inner.level <= self.max_depth:
            children = tuple(self.keyword_region(header, close, inner))
        return self.make_span(
            kind,
            name,
            start,
            end_offset,
            scope,
            body=ByteRange(signature_end, end_offset),
            signature_end=signature_end,
            children=children,
            incomplete=incomplete,
        )


__all__ = ("DEFAULT_MAX_NESTING_DEPTH", "MAX_NESTING_DEPTH", "BoundaryDetector")
