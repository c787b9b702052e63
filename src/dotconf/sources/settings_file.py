"""Settings file source: the format written by ``Configuration.save``.

A settings file is a list of assignment statements::

    // Database
    Configuration['Database']['Host'] = 'localhost';
    Configuration['Database']['Port'] = '5432';
    Configuration['Plugins'] = ['Tagging', 'Flagging'];

The first identifier of a statement names a root mapping. Reading the file
returns one mapping per root name.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..core.errors import SettingsSyntaxError

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>[ \t\r\n]+)
  | (?P<comment>(?://|\#)[^\n]*)
  | (?P<sq>'(?:\\.|[^'\\])*')
  | (?P<dq>"(?:\\.|[^"\\])*")
  | (?P<number>-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?)
  | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<op>[\[\]=;,])
    """,
    re.VERBOSE | re.DOTALL,
)

_SQ_ESCAPES = {"\\": "\\", "'": "'"}
_DQ_ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}

Token = Tuple[str, str, int]


def _unescape(body: str, table: Dict[str, str]) -> str:
    return re.sub(
        r"\\(.)",
        lambda m: table.get(m.group(1), m.group(0)),
        body,
        flags=re.DOTALL,
    )


def tokenize(text: str) -> Iterator[Token]:
    """Yield ``(kind, text, lineno)`` tokens, skipping blanks and comments."""
    pos = 0
    lineno = 1
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            raise SettingsSyntaxError(f"Unexpected character {text[pos]!r}", lineno)
        kind = m.lastgroup or ""
        value = m.group()
        if kind not in ("ws", "comment"):
            yield kind, value, lineno
        lineno += value.count("\n")
        pos = m.end()


class _Parser:
    def __init__(self, text: str):
        self._tokens: List[Token] = list(tokenize(text))
        self._pos = 0

    def _peek(self) -> Optional[Token]:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _next(self, expected: str = "") -> Token:
        tok = self._peek()
        if tok is None:
            last_line = self._tokens[-1][2] if self._tokens else 1
            raise SettingsSyntaxError(
                f"Unexpected end of file{', expected ' + repr(expected) if expected else ''}",
                last_line,
            )
        self._pos += 1
        return tok

    def _expect_op(self, op: str) -> None:
        kind, value, lineno = self._next(op)
        if kind != "op" or value != op:
            raise SettingsSyntaxError(f"Expected {op!r}, found {value!r}", lineno)

    def _at_op(self, op: str) -> bool:
        tok = self._peek()
        return tok is not None and tok[0] == "op" and tok[1] == op

    def parse(self) -> Dict[str, Any]:
        roots: Dict[str, Any] = {}
        while self._peek() is not None:
            self._statement(roots)
        return roots

    def _statement(self, roots: Dict[str, Any]) -> None:
        kind, name, lineno = self._next()
        if kind != "name":
            raise SettingsSyntaxError(f"Expected a root name, found {name!r}", lineno)
        keys: List[str] = []
        while self._at_op("["):
            self._next()
            keys.append(self._key())
            self._expect_op("]")
        self._expect_op("=")
        value = self._literal()
        self._expect_op(";")
        self._assign(roots, name, keys, value)

    def _key(self) -> str:
        kind, value, lineno = self._next("key")
        if kind in ("sq", "dq"):
            return self._string(kind, value)
        if kind == "number":
            return value
        raise SettingsSyntaxError(f"Invalid key {value!r}", lineno)

    @staticmethod
    def _string(kind: str, token: str) -> str:
        table = _SQ_ESCAPES if kind == "sq" else _DQ_ESCAPES
        return _unescape(token[1:-1], table)

    def _literal(self) -> Any:
        kind, value, lineno = self._next("value")
        if kind in ("sq", "dq"):
            return self._string(kind, value)
        if kind == "number":
            return float(value) if any(c in value for c in ".eE") else int(value)
        if kind == "name":
            word = value.lower()
            if word == "true":
                return True
            if word == "false":
                return False
            if word == "null":
                return None
            raise SettingsSyntaxError(f"Unknown bare word {value!r}", lineno)
        if kind == "op" and value == "[":
            items: List[Any] = []
            while not self._at_op("]"):
                items.append(self._literal())
                if not self._at_op("]"):
                    self._expect_op(",")
            self._next()
            return items
        raise SettingsSyntaxError(f"Unexpected {value!r}", lineno)

    @staticmethod
    def _assign(roots: Dict[str, Any], name: str, keys: List[str], value: Any) -> None:
        if not keys:
            roots[name] = value
            return
        node = roots.get(name)
        if not isinstance(node, dict):
            node = roots[name] = {}
        for key in keys[:-1]:
            child = node.get(key)
            if not isinstance(child, dict):
                child = node[key] = {}
            node = child
        node[keys[-1]] = value


def parse_settings(text: str) -> Dict[str, Any]:
    """Parse settings file text into ``{root name: value}``.

    Raises:
        SettingsSyntaxError: If the text is not a valid settings file.
    """
    return _Parser(text).parse()


class SettingsFileSource:
    """Reads a settings file from disk."""

    def __init__(self, path: Path, name: Optional[str] = None):
        self.path = Path(path)
        self.name = name or f"settings:{self.path.name}"
        self.id = str(self.path.resolve())
        self.location: Optional[Path] = self.path

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> Dict[str, Any]:
        with open(self.path, "r", encoding="utf-8") as f:
            return parse_settings(f.read())
