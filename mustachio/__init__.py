"""Mustachio - Logic-less Mustache templates."""

from .errors import (
    DelimiterSyntaxError,
    ExitCode,
    InputError,
    MustachioError,
    ParseError,
    PartialDepthError,
    UnclosedSectionError,
    UnclosedTagError,
)
from .parser import parse
from .renderer import RenderConfig, Renderer, html_escape, render, render_nodes
from .tokenizer import DEFAULT_DELIMITER, Delimiter, tokenize
from .values import (
    EMPTY,
    NULL,
    Mapping,
    Null,
    Scalar,
    Sequence,
    Value,
    arr,
    from_external_tree,
    from_json,
    lookup,
    obj,
    pretty_print,
    string,
)

__version__ = "0.1.0"

__all__ = [
    "render",
    "render_nodes",
    "parse",
    "tokenize",
    "html_escape",
    "Renderer",
    "RenderConfig",
    "Delimiter",
    "DEFAULT_DELIMITER",
    "Value",
    "Null",
    "Scalar",
    "Sequence",
    "Mapping",
    "NULL",
    "EMPTY",
    "lookup",
    "from_external_tree",
    "from_json",
    "string",
    "arr",
    "obj",
    "pretty_print",
    "MustachioError",
    "ParseError",
    "UnclosedTagError",
    "UnclosedSectionError",
    "DelimiterSyntaxError",
    "PartialDepthError",
    "InputError",
    "ExitCode",
]
