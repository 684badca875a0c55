"""Basic regular expression (BRE) patterns and match enumeration.

Purpose
-------
Let users filter the live trace with grep-style basic regular expressions while
the implementation relies on :mod:`re`. Patterns are translated once at
startup and matched against the flattened bytes of every rendered block.

Contents
--------
* :class:`PatternError` – raised for malformed patterns.
* :func:`translate_bre` – BRE to :mod:`re` syntax translation.
* :class:`PatternSpec` – compiled pattern or the "match everything" sentinel.
* :func:`match_all` – non-overlapping ``(offset, length)`` spans.

System Role
-----------
Content patterns drive the dispatcher's drop/highlight decision; filename
patterns decide which sources the ingestion layer subscribes to.

Alignment Notes
---------------
``.`` matches any byte including newlines and ``^``/``$`` anchor at line
boundaries, so a pattern can span the lines of one rendered block.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from string import punctuation

_FLAGS = re.MULTILINE | re.DOTALL

_POSIX_CLASSES: dict[str, str] = {
    "alpha": "a-zA-Z",
    "digit": "0-9",
    "alnum": "a-zA-Z0-9",
    "upper": "A-Z",
    "lower": "a-z",
    "space": " \\t\\n\\r\\f\\v",
    "blank": " \\t",
    "punct": "".join("\\" + char for char in punctuation),
    "print": "\\x20-\\x7e",
    "graph": "\\x21-\\x7e",
    "cntrl": "\\x00-\\x1f\\x7f",
    "xdigit": "0-9A-Fa-f",
}

_INTERVAL = re.compile(r"(\d+)(,(\d*))?")

_PASSTHROUGH_ESCAPES = {
    "w": "\\w",
    "W": "\\W",
    "s": "\\s",
    "S": "\\S",
    "b": "\\b",
    "B": "\\B",
    "<": "\\b(?=\\w)",
    ">": "\\b(?<=\\w)",
}


class PatternError(ValueError):
    """Raised when a basic regular expression cannot be compiled."""


class _BreTranslator:
    """Single-pass translator keeping the BRE context-dependent rules."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.out: list[str] = []
        self.pos = 0
        self.open_groups: list[int] = []
        self.closed_groups: set[int] = set()
        self.group_count = 0
        # ``*`` is literal and ``^`` is an anchor at the start of an expression.
        self.at_start = True
        self.has_operand = False
        self.after_repeat = False

    def translate(self) -> str:
        while self.pos < len(self.source):
            char = self.source[self.pos]
            if char == "\\":
                self._escape()
            elif char == "[":
                self._atom(self._bracket())
            elif char == "*":
                self._star()
            elif char == "^" and self.at_start and not self.has_operand:
                self.out.append("^")
                self.pos += 1
            elif char == "$" and self._at_expression_end(self.pos + 1):
                self._emit_anchor("$")
                self.pos += 1
            elif char == ".":
                self._atom(".")
                self.pos += 1
            else:
                self._atom(re.escape(char))
                self.pos += 1
        if self.open_groups:
            raise PatternError(f"unmatched \\( in pattern {self.source!r}")
        return "".join(self.out)

    def _atom(self, text: str) -> None:
        self.out.append(text)
        self.at_start = False
        self.has_operand = True
        self.after_repeat = False

    def _emit_anchor(self, text: str) -> None:
        self.out.append(text)
        self.at_start = False
        self.has_operand = False
        self.after_repeat = False

    def _repeat(self, text: str) -> None:
        self.out.append(text)
        self.has_operand = False
        self.after_repeat = True

    def _at_expression_end(self, index: int) -> bool:
        return index == len(self.source) or self.source.startswith("\\)", index)

    def _star(self) -> None:
        self.pos += 1
        if self.after_repeat:
            return
        if self.at_start or not self.has_operand:
            self._atom("\\*")
            return
        self._repeat("*")

    def _escape(self) -> None:
        if self.pos + 1 >= len(self.source):
            raise PatternError(f"trailing backslash in pattern {self.source!r}")
        char = self.source[self.pos + 1]
        self.pos += 2
        if char == "(":
            self.group_count += 1
            self.open_groups.append(self.group_count)
            self.out.append("(")
            self.at_start = True
            self.has_operand = False
            self.after_repeat = False
        elif char == ")":
            if not self.open_groups:
                raise PatternError(f"unmatched \\) in pattern {self.source!r}")
            self.closed_groups.add(self.open_groups.pop())
            self._atom(")")
        elif char == "{":
            self._interval()
        elif char == "}":
            raise PatternError(f"unmatched \\}} in pattern {self.source!r}")
        elif char in "123456789":
            if int(char) not in self.closed_groups:
                raise PatternError(f"invalid back reference \\{char} in pattern {self.source!r}")
            self._atom("\\" + char)
        elif char in _PASSTHROUGH_ESCAPES:
            translated = _PASSTHROUGH_ESCAPES[char]
            if char in "bB<>":
                self._emit_anchor(translated)
            else:
                self._atom(translated)
        else:
            self._atom(re.escape(char))

    def _interval(self) -> None:
        end = self.source.find("\\}", self.pos)
        if end == -1:
            raise PatternError(f"unmatched \\{{ in pattern {self.source!r}")
        body = self.source[self.pos : end]
        match = _INTERVAL.fullmatch(body)
        if match is None:
            raise PatternError(f"invalid interval \\{{{body}\\}} in pattern {self.source!r}")
        low = int(match.group(1))
        high = match.group(3)
        if high and int(high) < low:
            raise PatternError(f"invalid interval \\{{{body}\\}} in pattern {self.source!r}")
        if not self.has_operand:
            raise PatternError(f"interval without operand in pattern {self.source!r}")
        self.pos = end + 2
        self._repeat("{" + body + "}")

    def _bracket(self) -> str:
        source = self.source
        index = self.pos + 1
        parts = ["["]
        if index < len(source) and source[index] == "^":
            parts.append("^")
            index += 1
        first = True
        while True:
            if index >= len(source):
                raise PatternError(f"unmatched [ in pattern {source!r}")
            char = source[index]
            if char == "]" and not first:
                index += 1
                break
            if char == "[" and index + 1 < len(source) and source[index + 1] in ":.=":
                kind = source[index + 1]
                close = source.find(kind + "]", index + 2)
                if close == -1:
                    raise PatternError(f"unterminated [{kind} in pattern {source!r}")
                name = source[index + 2 : close]
                parts.append(self._bracket_item(kind, name))
                index = close + 2
            else:
                parts.append("-" if char == "-" else re.escape(char))
                index += 1
            first = False
        parts.append("]")
        self.pos = index
        return "".join(parts)

    def _bracket_item(self, kind: str, name: str) -> str:
        if kind == ":":
            try:
                return _POSIX_CLASSES[name]
            except KeyError as exc:
                raise PatternError(f"unknown character class [:{name}:] in pattern {self.source!r}") from exc
        if len(name) != 1:
            raise PatternError(f"unsupported collating element [{kind}{name}{kind}] in pattern {self.source!r}")
        return re.escape(name)


def translate_bre(source: str) -> str:
    """Translate a POSIX basic regular expression into :mod:`re` syntax.

    Examples
    --------
    >>> translate_bre(r"\\(ab\\)*c+")
    '(ab)*c\\\\+'
    >>> translate_bre("*a{1}")
    '\\\\*a\\\\{1\\\\}'
    >>> translate_bre(r"x\\{2,3\\}")
    'x{2,3}'
    """

    return _BreTranslator(source).translate()


@dataclass(slots=True, frozen=True)
class PatternSpec:
    """Compiled content or filename pattern.

    ``regex`` is ``None`` for the "match everything" sentinel, which callers
    short-circuit instead of matching.
    """

    source: str
    regex: re.Pattern[bytes] | None = None
    name_regex: re.Pattern[str] | None = None

    @classmethod
    def match_everything(cls) -> "PatternSpec":
        return cls(source="")

    @classmethod
    def compile(cls, source: str | None) -> "PatternSpec":
        """Compile ``source`` with BRE semantics; empty input matches everything.

        Examples
        --------
        >>> PatternSpec.compile("").is_everything
        True
        >>> PatternSpec.compile("set").is_everything
        False
        """

        if not source:
            return cls.match_everything()
        translated = translate_bre(source)
        try:
            regex = re.compile(translated.encode("utf-8"), _FLAGS)
            name_regex = re.compile(translated, _FLAGS)
        except re.error as exc:
            raise PatternError(f"invalid pattern {source!r}: {exc}") from exc
        return cls(source=source, regex=regex, name_regex=name_regex)

    @property
    def is_everything(self) -> bool:
        return self.regex is None

    def search_name(self, name: str) -> bool:
        """Return ``True`` when ``name`` contains a match (always for match-everything)."""

        if self.name_regex is None:
            return True
        return self.name_regex.search(name) is not None

    def __str__(self) -> str:
        return self.source


def match_all(plain_text: bytes, pattern: PatternSpec) -> list[tuple[int, int]]:
    """Return every non-overlapping match of ``pattern`` as ``(offset, length)``.

    Matches are ordered left to right. The match-everything sentinel is a
    caller error because the dispatcher skips matching entirely for it.

    Examples
    --------
    >>> match_all(b"banana", PatternSpec.compile("a"))
    [(1, 1), (3, 1), (5, 1)]
    """

    if pattern.regex is None:
        raise ValueError("match_all() requires a compiled pattern, not match-everything")
    return [(found.start(), found.end() - found.start()) for found in pattern.regex.finditer(plain_text)]


__all__ = ["PatternError", "PatternSpec", "match_all", "translate_bre"]
