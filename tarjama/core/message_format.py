"""A small ICU MessageFormat compiler.

Handles the subset translators actually use in ``*_MF`` keys::

    {count, plural, =0 {No replies} one {# reply} other {# replies}}
    {gender, select, female {her post} other {their post}}

Nested arguments, ``offset:N`` and apostrophe quoting are supported.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .errors import MessageFormatError
from .plural import categories

Node = Union[str, "Argument", "Hash", "Plural", "Select"]
Compiled = Callable[[Mapping[str, Any]], str]


def _render_number(n: float) -> str:
    return str(int(n)) if float(n).is_integer() else str(n)


def _as_number(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise MessageFormatError(f"'{name}' must be a number")
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        raise MessageFormatError(f"'{name}' must be a number, got {value!r}") from None


def _required(args: Mapping[str, Any], name: str) -> Any:
    if name not in args or args[name] is None:
        raise MessageFormatError(f"Message requires argument '{name}'")
    return args[name]


class Argument:
    def __init__(self, name: str) -> None:
        self.name = name

    def render(self, args: Mapping[str, Any], locale: str, number: Optional[float]) -> str:
        value = _required(args, self.name)
        if isinstance(value, float):
            return _render_number(value)
        return str(value)


class Hash:
    def render(self, args: Mapping[str, Any], locale: str, number: Optional[float]) -> str:
        return "#" if number is None else _render_number(number)


class Plural:
    def __init__(self, name: str, offset: float, branches: Dict[str, List[Node]]) -> None:
        self.name = name
        self.offset = offset
        self.branches = branches

    def render(self, args: Mapping[str, Any], locale: str, number: Optional[float]) -> str:
        value = _as_number(self.name, _required(args, self.name))
        exact = self.branches.get(f"={_render_number(value)}")
        shifted = value - self.offset
        if exact is None:
            for key in categories(locale, shifted) + ["other"]:
                if key in self.branches:
                    exact = self.branches[key]
                    break
        return _render(exact or [], args, locale, shifted)


class Select:
    def __init__(self, name: str, branches: Dict[str, List[Node]]) -> None:
        self.name = name
        self.branches = branches

    def render(self, args: Mapping[str, Any], locale: str, number: Optional[float]) -> str:
        value = _required(args, self.name)
        branch = self.branches.get(str(value), self.branches["other"])
        return _render(branch, args, locale, number)


def _render(nodes: List[Node], args: Mapping[str, Any], locale: str, number: Optional[float]) -> str:
    out = []
    for node in nodes:
        if isinstance(node, str):
            out.append(node)
        else:
            out.append(node.render(args, locale, number))
    return "".join(out)


class _Parser:
    def __init__(self, source: str) -> None:
        self.src = source
        self.pos = 0

    def error(self, message: str) -> MessageFormatError:
        return MessageFormatError(f"{message} at position {self.pos} in {self.src!r}")

    def peek(self, offset: int = 0) -> str:
        i = self.pos + offset
        return self.src[i] if i < len(self.src) else ""

    def skip_ws(self) -> None:
        while self.peek() and self.peek().isspace():
            self.pos += 1

    def expect(self, ch: str) -> None:
        self.skip_ws()
        if self.peek() != ch:
            raise self.error(f"Expected {ch!r}")
        self.pos += 1

    def word(self) -> str:
        self.skip_ws()
        start = self.pos
        while self.peek() and not self.peek().isspace() and self.peek() not in ",{}":
            self.pos += 1
        if start == self.pos:
            raise self.error("Expected a name")
        return self.src[start:self.pos]

    def message(self, depth: int, in_plural: bool) -> List[Node]:
        nodes: List[Node] = []
        buf: List[str] = []

        def flush() -> None:
            if buf:
                nodes.append("".join(buf))
                buf.clear()

        while self.pos < len(self.src):
            ch = self.peek()
            if ch == "'":
                nxt = self.peek(1)
                if nxt == "'":
                    buf.append("'")
                    self.pos += 2
                elif nxt in ("{", "}") or (nxt == "#" and in_plural):
                    self.pos += 1
                    buf.append(self.quoted())
                else:
                    buf.append("'")
                    self.pos += 1
            elif ch == "{":
                flush()
                nodes.append(self.argument(depth, in_plural))
            elif ch == "}":
                if depth == 0:
                    raise self.error("Unmatched '}'")
                break
            elif ch == "#" and in_plural:
                flush()
                nodes.append(Hash())
                self.pos += 1
            else:
                buf.append(ch)
                self.pos += 1
        else:
            if depth > 0:
                raise self.error("Unclosed '{'")
        flush()
        return nodes

    def quoted(self) -> str:
        out = []
        while self.pos < len(self.src):
            ch = self.peek()
            if ch == "'":
                if self.peek(1) == "'":
                    out.append("'")
                    self.pos += 2
                    continue
                self.pos += 1
                return "".join(out)
            out.append(ch)
            self.pos += 1
        return "".join(out)

    def argument(self, depth: int, in_plural: bool) -> Node:
        self.pos += 1  # "{"
        name = self.word()
        self.skip_ws()
        if self.peek() == "}":
            self.pos += 1
            return Argument(name)
        self.expect(",")
        kind = self.word()
        if kind not in ("plural", "select"):
            raise self.error(f"Unsupported argument type {kind!r}")
        self.expect(",")

        offset = 0.0
        branches: Dict[str, List[Node]] = {}
        while True:
            self.skip_ws()
            if self.peek() == "}":
                self.pos += 1
                break
            if not self.peek():
                raise self.error("Unclosed '{'")
            if kind == "plural" and self.src.startswith("offset:", self.pos):
                self.pos += len("offset:")
                try:
                    offset = float(self.word())
                except ValueError:
                    raise self.error("Invalid offset") from None
                continue
            selector = self.word()
            self.expect("{")
            branches[selector] = self.message(depth + 1, in_plural or kind == "plural")
            self.expect("}")

        if "other" not in branches:
            raise self.error(f"'{name}' {kind} has no 'other' branch")
        if kind == "plural":
            return Plural(name, offset, branches)
        return Select(name, branches)


def parse(source: str) -> List[Node]:
    return _Parser(source).message(0, False)


def compile_message(source: str, locale: str) -> Compiled:
    nodes = parse(source)

    def formatter(args: Mapping[str, Any]) -> str:
        return _render(nodes, args, locale, None)

    return formatter
