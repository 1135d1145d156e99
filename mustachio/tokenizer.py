"""Tokenizer for Mustache template text.

Scans a template into a flat list of tokens. Each token records where it
sits on its source line so standalone tags can be elided later on.
Delimiter changes (``{{=<% %>=}}``) are applied while scanning and never
produce a token.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Union

from .errors import DelimiterSyntaxError, UnclosedTagError

logger = logging.getLogger(__name__)

# Tags that swallow their whole line when they stand alone on it.
STANDALONE_SIGILS = "!#^/>="

# Whitespace after a tag, then the line terminator (or end of input) if nothing else follows.
_TRAILING = re.compile(r"([^\S\r\n]*)(\r\n|\n|\r|\Z)?")


@dataclass(frozen=True)
class Delimiter:
    """Open/close tag markers in effect for a stretch of template text."""

    open: str
    close: str

    def __post_init__(self):
        if not self.open or not self.close:
            raise DelimiterSyntaxError(f"{self.open} {self.close}")


DEFAULT_DELIMITER = Delimiter("{{", "}}")


@dataclass(frozen=True)
class LineInfo:
    """Position of a token on its source line."""

    preceding_whitespace: str = ""
    following_whitespace: str = ""
    newline_after: bool = False
    first_on_line: bool = False
    last_on_line: bool = False
    at_eof: bool = False

    @property
    def standalone(self) -> bool:
        return self.first_on_line and self.last_on_line and (self.newline_after or self.at_eof)


@dataclass(frozen=True)
class TextToken:
    content: str
    line: LineInfo = field(default_factory=LineInfo)


@dataclass(frozen=True)
class VariableToken:
    name: str
    escape: bool = True
    line: LineInfo = field(default_factory=LineInfo)


@dataclass(frozen=True)
class SectionOpen:
    name: str
    inverted: bool = False
    line: LineInfo = field(default_factory=LineInfo)


@dataclass(frozen=True)
class SectionClose:
    name: str
    line: LineInfo = field(default_factory=LineInfo)


@dataclass(frozen=True)
class CommentToken:
    content: str
    line: LineInfo = field(default_factory=LineInfo)


@dataclass(frozen=True)
class PartialToken:
    name: str
    line: LineInfo = field(default_factory=LineInfo)


Token = Union[TextToken, VariableToken, SectionOpen, SectionClose, CommentToken, PartialToken]


def _is_blank(text: str) -> bool:
    return text.strip() == ""


def _newline_length(template: str, pos: int) -> int:
    if template.startswith("\r\n", pos):
        return 2
    if template.startswith(("\n", "\r"), pos):
        return 1
    return 0


def _tag_token(content: str, line: LineInfo) -> Token:
    sigil, rest = content[0], content[1:]
    if sigil == "!":
        return CommentToken(rest, line)
    if sigil == ">":
        return PartialToken(rest.strip(), line)
    if sigil == "/":
        return SectionClose(rest.strip(), line)
    return SectionOpen(rest.strip(), inverted=(sigil == "^"), line=line)


def tokenize(template: str, delimiter: Delimiter = DEFAULT_DELIMITER) -> list[Token]:
    """Split template text into tokens.

    Args:
        template: Raw template text
        delimiter: Tag markers in effect at the start of the text

    Returns:
        Tokens in source order

    Raises:
        UnclosedTagError: If an open delimiter has no close delimiter
        DelimiterSyntaxError: If a delimiter change does not name two markers
    """
    tokens: list[Token] = []
    pos = 0
    line_start = True

    def add_text(text: str) -> None:
        if text:
            tokens.append(TextToken(text, LineInfo(first_on_line=line_start)))

    while pos < len(template):
        open_idx = template.find(delimiter.open, pos)
        if open_idx == -1:
            tokens.append(
                TextToken(
                    template[pos:],
                    LineInfo(first_on_line=line_start, last_on_line=True, at_eof=True),
                )
            )
            break

        preceding = template[pos:open_idx]
        last_line = preceding[preceding.rfind("\n") + 1 :]
        at_line_start = line_start or "\n" in preceding or "\r" in preceding

        body_start = open_idx + len(delimiter.open)
        close_idx = template.find(delimiter.close, body_start)
        if close_idx == -1:
            raise UnclosedTagError(template[pos:])

        content = template[body_start:close_idx]
        after = close_idx + len(delimiter.close)

        # {{{name}}}: the third closing brace sits just past the close delimiter
        triple = (
            delimiter.open == "{{" and content.startswith("{") and template.startswith("}", after)
        )
        if triple:
            after += 1

        trailing = _TRAILING.match(template, after)
        newline_length = _newline_length(template, after)
        line = LineInfo(
            preceding_whitespace=last_line,
            following_whitespace=trailing.group(1),
            newline_after=newline_length > 0,
            first_on_line=at_line_start and _is_blank(last_line),
            last_on_line=trailing.group(2) is not None,
            at_eof=after == len(template),
        )

        skip_newline = False
        if not content:
            add_text(preceding)
        elif content[0] in STANDALONE_SIGILS:
            if content[0] == "=":
                parts = content[1:].removesuffix("=").strip().split()
                if len(parts) != 2:
                    raise DelimiterSyntaxError(content)

            if line.standalone and last_line:
                preceding = preceding[: len(preceding) - len(last_line)]
            add_text(preceding)
            skip_newline = line.standalone

            if content[0] == "=":
                delimiter = Delimiter(parts[0], parts[1])
                logger.debug("Delimiters changed to %s %s", delimiter.open, delimiter.close)
            else:
                tokens.append(_tag_token(content, line))
        elif content[0] == "&":
            add_text(preceding)
            tokens.append(VariableToken(content[1:].strip(), escape=False, line=line))
        elif content[0] == "{" and triple:
            add_text(preceding)
            tokens.append(
                VariableToken(content[1:].removesuffix("}").strip(), escape=False, line=line)
            )
        else:
            add_text(preceding)
            tokens.append(VariableToken(content.strip(), escape=True, line=line))

        pos = after + newline_length if skip_newline else after
        line_start = skip_newline or newline_length > 0

    return tokens
