"""SPDX license normalization, expression parsing and validation.

Expressions follow the SPDX grammar subset used on npm::

    expression := term ("OR" term)*
    term       := factor ("AND" factor)*
    factor     := "(" expression ")" | license ["WITH" exception]

Operators are matched case-insensitively. A ``license`` may span several
words ("MIT License") and is passed through the alias table.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from pkghealth.exceptions import ParseError
from pkghealth.licenses.blue_oak import RATED_LICENSES
from pkghealth.licenses.catalog import KNOWN_LICENSE_IDS, SPDX_EXCEPTIONS

_ALIASES: dict[str, str] = {
    "MIT License": "MIT",
    "The MIT License": "MIT",
    "Apache License 2.0": "Apache-2.0",
    "Apache License, Version 2.0": "Apache-2.0",
    "Apache-2": "Apache-2.0",
    "Apache 2.0": "Apache-2.0",
    "Apache 2": "Apache-2.0",
    "BSD": "BSD-3-Clause",
    "BSD License": "BSD-3-Clause",
    "BSD-3": "BSD-3-Clause",
    "BSD-2": "BSD-2-Clause",
    "3-Clause BSD": "BSD-3-Clause",
    "2-Clause BSD": "BSD-2-Clause",
    "ISC License": "ISC",
    "GPL-1.0": "GPL-1.0-only",
    "GPL-2.0": "GPL-2.0-only",
    "GPL-3.0": "GPL-3.0-only",
    "GPL-3": "GPL-3.0-only",
    "GPL-2": "GPL-2.0-only",
    "GPL-1": "GPL-1.0-only",
    "GPLv3": "GPL-3.0-only",
    "GPLv2": "GPL-2.0-only",
    "GPLv1": "GPL-1.0-only",
    "GNU GPL v3": "GPL-3.0-only",
    "GNU GPL v2": "GPL-2.0-only",
    "GNU GPL v1": "GPL-1.0-only",
    "GPL-2.0+": "GPL-2.0-or-later",
    "GPL-3.0+": "GPL-3.0-or-later",
    "LGPL-2.0": "LGPL-2.0-only",
    "LGPL-2.1": "LGPL-2.1-only",
    "LGPL-3.0": "LGPL-3.0-only",
    "LGPL-3": "LGPL-3.0-only",
    "LGPL-2": "LGPL-2.0-only",
    "LGPLv3": "LGPL-3.0-only",
    "LGPLv2.1": "LGPL-2.1-only",
    "LGPLv2": "LGPL-2.0-only",
    "LGPL-2.1+": "LGPL-2.1-or-later",
    "LGPL-3.0+": "LGPL-3.0-or-later",
    "AGPL-1.0": "AGPL-1.0-only",
    "AGPL-3.0": "AGPL-3.0-only",
    "AGPL-3": "AGPL-3.0-only",
    "AGPL-1": "AGPL-1.0-only",
    "AGPLv3": "AGPL-3.0-only",
    "AGPLv1": "AGPL-1.0-only",
    "MPL-2": "MPL-2.0",
    "MPL 2.0": "MPL-2.0",
    "CC0": "CC0-1.0",
    "Public Domain": "Unlicense",
    "Unlicensed": "UNLICENSED",
}
_ALIASES_LOWER = {k.lower(): v for k, v in _ALIASES.items()}

_KNOWN = KNOWN_LICENSE_IDS | RATED_LICENSES
_CANONICAL = {spdx_id.lower(): spdx_id for spdx_id in _KNOWN}

_INVALID = frozenset({"", "UNLICENSED", "SEE LICENSE IN", "UNKNOWN", "NONE", "N/A"})

_TOKEN_RE = re.compile(r"\(|\)|[^\s()]+")
_OPERATORS = frozenset({"AND", "OR", "WITH"})


@dataclass(frozen=True)
class LicenseRef:
    id: str
    exception: str | None = None


@dataclass(frozen=True)
class CompoundExpression:
    operator: Literal["AND", "OR"]
    operands: tuple[LicenseExpression, ...]


LicenseExpression = LicenseRef | CompoundExpression


def normalize_license_id(raw: str) -> str:
    """Map one license name to its SPDX id via aliases, then canonical casing."""
    stripped = raw.strip()
    lowered = stripped.lower()
    alias = _ALIASES_LOWER.get(lowered)
    if alias is not None:
        return alias
    return _CANONICAL.get(lowered, stripped)


def _is_operator(token: str) -> bool:
    return token.upper() in _OPERATORS


def _combine(operator: Literal["AND", "OR"], operands: list[LicenseExpression]) -> LicenseExpression:
    if len(operands) == 1:
        return operands[0]
    flat: list[LicenseExpression] = []
    for operand in operands:
        if isinstance(operand, CompoundExpression) and operand.operator == operator:
            flat.extend(operand.operands)
        else:
            flat.append(operand)
    return CompoundExpression(operator, tuple(flat))


class _Parser:
    def __init__(self, text: str) -> None:
        self._text = text
        self._tokens = _TOKEN_RE.findall(text)
        self._pos = 0

    def parse(self) -> LicenseExpression:
        expr = self._or()
        if self._pos != len(self._tokens):
            raise ParseError(
                f"unexpected token {self._tokens[self._pos]!r} in license expression {self._text!r}"
            )
        return expr

    def _peek(self) -> str | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _next(self) -> str | None:
        token = self._peek()
        if token is not None:
            self._pos += 1
        return token

    def _at_operator(self, operator: str) -> bool:
        token = self._peek()
        return token is not None and token.upper() == operator

    def _or(self) -> LicenseExpression:
        operands = [self._and()]
        while self._at_operator("OR"):
            self._pos += 1
            operands.append(self._and())
        return _combine("OR", operands)

    def _and(self) -> LicenseExpression:
        operands = [self._factor()]
        while self._at_operator("AND"):
            self._pos += 1
            operands.append(self._factor())
        return _combine("AND", operands)

    def _factor(self) -> LicenseExpression:
        token = self._next()
        if token is None:
            raise ParseError(f"unexpected end of license expression {self._text!r}")
        if token == "(":
            expr = self._or()
            if self._next() != ")":
                raise ParseError(f"unbalanced parentheses in license expression {self._text!r}")
            return expr
        if token == ")" or _is_operator(token):
            raise ParseError(f"unexpected token {token!r} in license expression {self._text!r}")

        words = [token]
        while True:
            nxt = self._peek()
            if nxt is None or nxt in "()" or _is_operator(nxt):
                break
            words.append(nxt)
            self._pos += 1
        license_id = normalize_license_id(" ".join(words))

        exception = None
        if self._at_operator("WITH"):
            self._pos += 1
            exception = self._next()
            if exception is None or exception in "()" or _is_operator(exception):
                raise ParseError(f"missing exception after WITH in {self._text!r}")
        return LicenseRef(license_id, exception)


def parse_license_expression(text: str) -> LicenseExpression:
    """Parse *text* into an expression tree; raises :class:`ParseError`."""
    return _Parser(text.strip()).parse()


def license_refs(expr: LicenseExpression) -> list[LicenseRef]:
    """All leaf licenses in left-to-right order."""
    if isinstance(expr, LicenseRef):
        return [expr]
    refs: list[LicenseRef] = []
    for operand in expr.operands:
        refs.extend(license_refs(operand))
    return refs


def render_expression(expr: LicenseExpression, nested: bool = False) -> str:
    if isinstance(expr, LicenseRef):
        return f"{expr.id} WITH {expr.exception}" if expr.exception else expr.id
    inner = f" {expr.operator} ".join(render_expression(o, nested=True) for o in expr.operands)
    return f"({inner})" if nested else inner


def normalize_license(text: str) -> str:
    """Canonical form of a license string. Idempotent.

    Whole-string aliases win; otherwise the string is parsed and every leaf id
    normalized. Unparseable input is returned stripped.
    """
    stripped = text.strip()
    alias = _ALIASES_LOWER.get(stripped.lower())
    if alias is not None:
        return alias
    try:
        expr = parse_license_expression(stripped)
    except ParseError:
        return stripped
    return render_expression(expr)


def is_known_license(spdx_id: str) -> bool:
    return spdx_id in _KNOWN


def is_valid_spdx(text: str) -> bool:
    """True when every license (and exception) in *text* is a catalogued SPDX id."""
    trimmed = text.strip()
    upper = trimmed.upper()
    if upper in _INVALID or upper.startswith("SEE LICENSE IN"):
        return False
    try:
        expr = parse_license_expression(trimmed)
    except ParseError:
        return False
    return all(
        is_known_license(ref.id) and (ref.exception is None or ref.exception in SPDX_EXCEPTIONS)
        for ref in license_refs(expr)
    )
