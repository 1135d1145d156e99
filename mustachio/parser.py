"""Template AST and the builder that assembles it from tokens."""

from dataclasses import dataclass
from typing import Union

from .errors import UnclosedSectionError
from .tokenizer import (
    DEFAULT_DELIMITER,
    CommentToken,
    Delimiter,
    LineInfo,
    PartialToken,
    SectionClose,
    SectionOpen,
    TextToken,
    Token,
    VariableToken,
    tokenize,
)


@dataclass(frozen=True)
class Text:
    """Literal text."""

    content: str


@dataclass(frozen=True)
class Variable:
    """{{name}} - HTML escaped."""

    name: str


@dataclass(frozen=True)
class UnescapedVariable:
    """{{{name}}} or {{&name}}."""

    name: str


@dataclass(frozen=True)
class Section:
    """{{#name}}...{{/name}}"""

    name: str
    children: tuple["Node", ...] = ()


@dataclass(frozen=True)
class InvertedSection:
    """{{^name}}...{{/name}}"""

    name: str
    children: tuple["Node", ...] = ()


@dataclass(frozen=True)
class Comment:
    """{{!comment}} - kept in the tree, never rendered."""

    content: str


@dataclass(frozen=True)
class Partial:
    """{{>name}} with the indentation of its line when standalone."""

    name: str
    indentation: str = ""


Node = Union[Text, Variable, UnescapedVariable, Section, InvertedSection, Comment, Partial]


def _find_close(tokens: list[Token], start: int, name: str) -> int:
    """Index of the SectionClose matching a section opened just before start."""
    depth = 0
    for i in range(start, len(tokens)):
        token = tokens[i]
        if isinstance(token, SectionOpen) and token.name == name:
            depth += 1
        elif isinstance(token, SectionClose) and token.name == name:
            if depth == 0:
                return i
            depth -= 1
    raise UnclosedSectionError(name)


def _trim_before_close(body: list[Token], close: LineInfo) -> list[Token]:
    """Drop the indentation sharing a line with a standalone closing tag."""
    if not (close.standalone and close.preceding_whitespace):
        return body
    if not body or not isinstance(body[-1], TextToken):
        return body

    last = body[-1]
    trimmed = last.content.removesuffix(close.preceding_whitespace)
    if not trimmed:
        return body[:-1]
    return body[:-1] + [TextToken(trimmed, last.line)]


def build(tokens: list[Token]) -> list[Node]:
    """Build an AST from tokens.

    Raises:
        UnclosedSectionError: If a section has no matching close tag
    """
    nodes: list[Node] = []
    i = 0

    while i < len(tokens):
        token = tokens[i]

        if isinstance(token, TextToken):
            nodes.append(Text(token.content))

        elif isinstance(token, VariableToken):
            if token.escape:
                nodes.append(Variable(token.name))
            else:
                nodes.append(UnescapedVariable(token.name))

        elif isinstance(token, SectionOpen):
            end = _find_close(tokens, i + 1, token.name)
            body = _trim_before_close(tokens[i + 1 : end], tokens[end].line)
            children = tuple(build(body))
            if token.inverted:
                nodes.append(InvertedSection(token.name, children))
            else:
                nodes.append(Section(token.name, children))
            i = end  # skip the closing tag

        elif isinstance(token, CommentToken):
            if not token.line.standalone:
                nodes.append(Comment(token.content))

        elif isinstance(token, PartialToken):
            indentation = token.line.preceding_whitespace if token.line.standalone else ""
            nodes.append(Partial(token.name, indentation))

        # A SectionClose reaching this point has no opener; it renders nothing.

        i += 1

    return nodes


def parse(template: str, delimiter: Delimiter = DEFAULT_DELIMITER) -> list[Node]:
    """Tokenize and build template text in one step."""
    return build(tokenize(template, delimiter))
