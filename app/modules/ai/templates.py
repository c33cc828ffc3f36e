"""Mustache-style prompt templates bound to typed input models.

Supported syntax:

- ``{{field}}`` and ``{{{field}}}``: verbatim substitution (no escaping).
- ``{{#if field}}...{{else}}...{{/if}}``: branch on truthiness.
- ``{{#each field}}...{{this}}...{{/each}}``: repeat once per list element.

Field names are checked against the input model when the template is
defined, and a placeholder whose value is missing at render time raises
``TemplateError`` instead of rendering as an empty string. Names inside an
``#each`` body other than ``this`` resolve against the root record.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Generic, Iterator, TypeVar, Union

from pydantic import BaseModel

InputT = TypeVar("InputT", bound=BaseModel)

_TAG = re.compile(r"\{\{\{\s*(.+?)\s*\}\}\}|\{\{\s*(.+?)\s*\}\}")
_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_THIS = "this"


class TemplateError(ValueError):
    """Raised for malformed templates and unresolved placeholders."""


@dataclass
class _Text:
    text: str


@dataclass
class _Var:
    name: str


@dataclass
class _If:
    name: str
    then: list["_Node"] = field(default_factory=list)
    otherwise: list["_Node"] = field(default_factory=list)


@dataclass
class _Each:
    name: str
    body: list["_Node"] = field(default_factory=list)


_Node = Union[_Text, _Var, _If, _Each]


def _checked_name(name: str, tag: str) -> str:
    if not _NAME.match(name):
        raise TemplateError(f"Invalid name in tag '{tag}'")
    return name


def _parse(source: str) -> list[_Node]:
    root: list[_Node] = []
    # (open block or None for the root, list currently receiving nodes)
    stack: list[tuple[Union[_If, _Each, None], list[_Node]]] = [(None, root)]
    pos = 0
    for m in _TAG.finditer(source):
        if m.start() > pos:
            stack[-1][1].append(_Text(source[pos : m.start()]))
        pos = m.end()
        tag = (m.group(1) or m.group(2)).strip()
        block, nodes = stack[-1]

        if tag.startswith("#"):
            keyword, _, name = tag[1:].partition(" ")
            name = _checked_name(name.strip(), tag)
            if keyword == "if":
                node: Union[_If, _Each] = _If(name)
                nodes.append(node)
                stack.append((node, node.then))
            elif keyword == "each":
                node = _Each(name)
                nodes.append(node)
                stack.append((node, node.body))
            else:
                raise TemplateError(f"Unknown block helper '#{keyword}'")
        elif tag == "else":
            if not isinstance(block, _If) or nodes is block.otherwise:
                raise TemplateError("'else' used outside of an 'if' block")
            stack[-1] = (block, block.otherwise)
        elif tag.startswith("/"):
            keyword = tag[1:].strip()
            if isinstance(block, _If):
                expected = "if"
            elif isinstance(block, _Each):
                expected = "each"
            else:
                expected = None
            if keyword != expected:
                raise TemplateError(f"Unexpected closing tag '/{keyword}'")
            stack.pop()
        else:
            nodes.append(_Var(_checked_name(tag, tag)))

    if len(stack) > 1:
        open_block = stack[-1][0]
        raise TemplateError(f"Unclosed block for '{open_block.name}'")  # type: ignore[union-attr]
    if pos < len(source):
        root.append(_Text(source[pos:]))
    return root


def _walk(nodes: list[_Node]) -> Iterator[tuple[_Node, bool]]:
    """Yield every non-text node with a flag telling if it sits in an each body."""

    def _inner(items: list[_Node], in_each: bool) -> Iterator[tuple[_Node, bool]]:
        for node in items:
            if isinstance(node, _Text):
                continue
            yield node, in_each
            if isinstance(node, _If):
                yield from _inner(node.then, in_each)
                yield from _inner(node.otherwise, in_each)
            elif isinstance(node, _Each):
                yield from _inner(node.body, True)

    return _inner(nodes, False)


class PromptTemplate(Generic[InputT]):
    """A named template compiled against ``input_type``."""

    def __init__(self, name: str, source: str, input_type: type[InputT]) -> None:
        self.name = name
        self.source = source
        self.input_type = input_type
        self._nodes = _parse(source)

        known = set(input_type.model_fields)
        for node, in_each in _walk(self._nodes):
            if node.name == _THIS:
                if not in_each or isinstance(node, _Each):
                    raise TemplateError(
                        f"Template '{name}' uses 'this' outside of an 'each' block"
                    )
                continue
            if node.name not in known:
                raise TemplateError(
                    f"Template '{name}' references unknown field '{node.name}' "
                    f"of {input_type.__name__}"
                )

    @property
    def fields(self) -> set[str]:
        """Input fields referenced anywhere in the template."""
        return {node.name for node, _ in _walk(self._nodes) if node.name != _THIS}

    def render(self, record: InputT) -> str:
        if not isinstance(record, self.input_type):
            raise TemplateError(
                f"Template '{self.name}' expects {self.input_type.__name__}, "
                f"got {type(record).__name__}"
            )
        out: list[str] = []
        self._render(self._nodes, record, None, out)
        return "".join(out)

    def _lookup(self, name: str, record: InputT, current: Any) -> Any:
        if name == _THIS:
            return current
        return getattr(record, name, None)

    def _render(
        self, nodes: list[_Node], record: InputT, current: Any, out: list[str]
    ) -> None:
        for node in nodes:
            if isinstance(node, _Text):
                out.append(node.text)
            elif isinstance(node, _Var):
                value = self._lookup(node.name, record, current)
                if value is None:
                    raise TemplateError(
                        f"Unresolved placeholder '{node.name}' in template '{self.name}'"
                    )
                out.append(value if isinstance(value, str) else str(value))
            elif isinstance(node, _If):
                branch = node.then if self._lookup(node.name, record, current) else node.otherwise
                self._render(branch, record, current, out)
            else:
                items = self._lookup(node.name, record, current)
                if items is None:
                    continue
                if not isinstance(items, (list, tuple)):
                    raise TemplateError(
                        f"'{node.name}' is not a list in template '{self.name}'"
                    )
                for item in items:
                    self._render(node.body, record, item, out)
