# SPDX-License-Identifier: MIT
"""Conditional-compilation values and expressions.

A toolchain reports the predicates active for a target with ``--print=cfg``,
one per line, in one of two forms:

- Names: ``unix``, ``debug_assertions``
- Key/value pairs: ``target_os = "linux"``, ``target_feature="sse2"``

Build configuration can select on those predicates with cfg expressions:

- ``unix``
- ``target_os = "macos"``
- ``all(unix, target_arch = "x86_64")``
- ``any(windows, target_env = "msvc")``
- ``not(debug_assertions)``
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from targetinfo.core.errors import CfgParseError

# =============================================================================
# Values
# =============================================================================


@dataclass(frozen=True)
class Cfg:
    """A single cfg predicate.

    Attributes:
        name: The predicate name (e.g. ``unix`` or ``target_os``).
        value: The value for key/value predicates, None for plain names.
    """

    name: str
    value: str | None = None

    @classmethod
    def parse(cls, text: str) -> Cfg:
        """Parse one cfg line as printed by the toolchain.

        Raises:
            CfgParseError: If the text is not a name or a key/value pair.
        """
        parser = _Parser(text)
        cfg = parser.cfg()
        if not parser.at_end():
            raise CfgParseError(
                f"malformed cfg value or key/value pair: `{text}`", text
            )
        return cfg

    def __str__(self) -> str:
        if self.value is None:
            return self.name
        return f'{self.name} = "{self.value}"'


@dataclass(frozen=True)
class Not:
    expr: CfgExpr

    def __str__(self) -> str:
        return f"not({self.expr})"


@dataclass(frozen=True)
class All:
    exprs: tuple[CfgExpr, ...]

    def __str__(self) -> str:
        return f"all({', '.join(str(e) for e in self.exprs)})"


@dataclass(frozen=True)
class Any:
    exprs: tuple[CfgExpr, ...]

    def __str__(self) -> str:
        return f"any({', '.join(str(e) for e in self.exprs)})"


CfgExpr = Cfg | Not | All | Any


def parse_cfg_expr(text: str) -> CfgExpr:
    """Parse a cfg expression such as ``all(unix, not(target_os = "macos"))``.

    Raises:
        CfgParseError: If the expression is malformed or has trailing input.
    """
    parser = _Parser(text)
    expr = parser.expr()
    if not parser.at_end():
        raise CfgParseError(
            "can only have one cfg-expression, consider using all() or any() "
            f"explicitly: `{text}`",
            text,
        )
    return expr


def matches(expr: CfgExpr, cfgs: Iterable[Cfg]) -> bool:
    """Return True if ``expr`` holds for the given active cfg predicates."""
    active = cfgs if isinstance(cfgs, (set, frozenset)) else set(cfgs)
    return _matches(expr, active)


def _matches(expr: CfgExpr, active: set[Cfg] | frozenset[Cfg]) -> bool:
    if isinstance(expr, Not):
        return not _matches(expr.expr, active)
    if isinstance(expr, All):
        return all(_matches(e, active) for e in expr.exprs)
    if isinstance(expr, Any):
        return any(_matches(e, active) for e in expr.exprs)
    return expr in active


# =============================================================================
# Tokenizer and parser
# =============================================================================

_TOKEN_PATTERN = re.compile(
    r"\s*(?:"
    r"(?P<punct>[(),=])"  # Parens, comma, equals
    r'|"(?P<string>[^"]*)"'  # Quoted string
    r"|(?P<ident>[A-Za-z_][A-Za-z0-9_]*)"  # Identifier
    r"|(?P<unterminated>\"[^\"]*$)"  # Opening quote with no close
    r")"
)


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str


def _tokenize(text: str) -> Iterator[_Token]:
    pos = 0
    end = len(text)
    while pos < end:
        if text[pos:].strip() == "":
            return
        match = _TOKEN_PATTERN.match(text, pos)
        if match is None or match.end() == pos:
            raise CfgParseError(
                f"unexpected character in cfg `{text}`, expected parens, "
                "a comma, an identifier, or a string",
                text,
            )
        if match.group("unterminated") is not None:
            raise CfgParseError(f"unterminated string in cfg `{text}`", text)
        pos = match.end()
        for kind in ("punct", "string", "ident"):
            value = match.group(kind)
            if value is not None:
                yield _Token(kind, value)
                break


class _Parser:
    """Recursive-descent parser over the cfg token stream."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._tokens = list(_tokenize(text))
        self._pos = 0

    def at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def _peek(self) -> _Token | None:
        if self.at_end():
            return None
        return self._tokens[self._pos]

    def _next(self) -> _Token | None:
        token = self._peek()
        if token is not None:
            self._pos += 1
        return token

    def _try_punct(self, punct: str) -> bool:
        token = self._peek()
        if token is not None and token.kind == "punct" and token.text == punct:
            self._pos += 1
            return True
        return False

    def _expect_punct(self, punct: str) -> None:
        token = self._next()
        if token is None or token.kind != "punct" or token.text != punct:
            found = "nothing" if token is None else f"`{token.text}`"
            raise CfgParseError(
                f"expected `{punct}`, found {found} in cfg `{self._text}`",
                self._text,
            )

    def expr(self) -> CfgExpr:
        token = self._peek()
        if token is not None and token.kind == "ident":
            following = (
                self._tokens[self._pos + 1]
                if self._pos + 1 < len(self._tokens)
                else None
            )
            is_call = (
                following is not None
                and following.kind == "punct"
                and following.text == "("
            )
            if is_call and token.text in ("all", "any"):
                self._pos += 2
                exprs: list[CfgExpr] = []
                while not self._try_punct(")"):
                    exprs.append(self.expr())
                    if not self._try_punct(","):
                        self._expect_punct(")")
                        break
                if token.text == "all":
                    return All(tuple(exprs))
                return Any(tuple(exprs))
            if is_call and token.text == "not":
                self._pos += 2
                inner = self.expr()
                self._expect_punct(")")
                return Not(inner)
        return self.cfg()

    def cfg(self) -> Cfg:
        token = self._next()
        if token is None:
            raise CfgParseError(
                f"expected identifier, found nothing in cfg `{self._text}`",
                self._text,
            )
        if token.kind != "ident":
            raise CfgParseError(
                f"expected identifier, found `{token.text}` in cfg `{self._text}`",
                self._text,
            )
        if self._try_punct("="):
            value = self._next()
            if value is None or value.kind != "string":
                found = "nothing" if value is None else f"`{value.text}`"
                raise CfgParseError(
                    f"expected a string, found {found} in cfg `{self._text}`",
                    self._text,
                )
            return Cfg(token.text, value.text)
        return Cfg(token.text)
