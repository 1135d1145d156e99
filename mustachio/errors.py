"""Mustachio error types and exit codes."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes used by the command line entry point."""
    SUCCESS = 0
    RUNTIME_ERROR = 1
    PARSE_ERROR = 2
    INPUT_ERROR = 3


class MustachioError(Exception):
    """Base error for all Mustachio errors."""
    exit_code: ExitCode = ExitCode.RUNTIME_ERROR


class ParseError(MustachioError):
    """Error parsing template text."""
    exit_code = ExitCode.PARSE_ERROR


class UnclosedTagError(ParseError):
    """An open delimiter with no close delimiter after it."""

    def __init__(self, snippet: str):
        super().__init__(f"Unclosed tag at: {snippet[:50]}...")
        self.snippet = snippet


class UnclosedSectionError(ParseError):
    """A section opened but never closed."""

    def __init__(self, name: str):
        super().__init__(f"Unclosed section: {name}")
        self.name = name


class DelimiterSyntaxError(ParseError):
    """A delimiter change that does not name exactly two delimiters."""

    def __init__(self, content: str):
        super().__init__(f"Invalid delimiter syntax: {content}")
        self.content = content


class PartialDepthError(MustachioError):
    """Partial expansion nested deeper than the configured limit."""

    def __init__(self, name: str, max_depth: int):
        super().__init__(f"Partial '{name}' exceeds max depth of {max_depth}")
        self.name = name
        self.max_depth = max_depth


class InputError(MustachioError):
    """Error reading data or partials supplied to the command line."""
    exit_code = ExitCode.INPUT_ERROR
