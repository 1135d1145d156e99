"""Tree-walking renderer for parsed templates.

Values are looked up through a context stack (innermost section first)
with the root context as fallback. Missing data never raises; it renders
as an empty string.
"""

import logging
from dataclasses import dataclass

from .errors import PartialDepthError
from .parser import (
    Comment,
    InvertedSection,
    Node,
    Partial,
    Section,
    Text,
    UnescapedVariable,
    Variable,
    parse,
)
from .values import EMPTY, Null, Scalar, Sequence, Value, lookup

logger = logging.getLogger(__name__)

ContextStack = tuple[Value, ...]


@dataclass
class RenderConfig:
    """Options for a render call.

    Attributes:
        max_partial_depth: Maximum nesting of partial expansions. None leaves
            recursion unbounded, so a partial that includes itself runs until
            the interpreter's recursion limit is hit.
    """

    max_partial_depth: int | None = None


def html_escape(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def resolve_field(path: str, root: Value, stack: ContextStack) -> Value | None:
    """Resolve a variable path.

    The innermost stack entry holding the full path wins. The root is only
    consulted when no stack entry holds the path's first segment, so an
    enclosing section shadows root keys of the same name.
    """
    first = path if path == "." else path.split(".")[0]
    can_use_root = not any(lookup(entry, first) is not None for entry in stack)

    for entry in stack:
        found = lookup(entry, path)
        if found is not None:
            return found

    if can_use_root:
        return lookup(root, path)
    return None


def resolve_section(name: str, root: Value, stack: ContextStack) -> Value | None:
    """Resolve a section name: innermost stack entry first, then the root."""
    for entry in stack:
        found = lookup(entry, name)
        if found is not None:
            return found
    return lookup(root, name)


def indent_partial(template: str, indentation: str) -> str:
    """Prefix every non-empty line with indentation."""
    return "\n".join(indentation + line if line else line for line in template.split("\n"))


class Renderer:
    """Renders AST nodes against a root context and a set of partials."""

    def __init__(self, partials: Value = EMPTY, config: RenderConfig | None = None):
        self.partials = partials
        self.config = config or RenderConfig()

    def render(
        self, nodes: list[Node] | tuple[Node, ...], root: Value, stack: ContextStack = ()
    ) -> str:
        return self._render(nodes, root, stack, 0)

    def _render(self, nodes, root: Value, stack: ContextStack, depth: int) -> str:
        return "".join(self._render_node(node, root, stack, depth) for node in nodes)

    def _render_node(self, node: Node, root: Value, stack: ContextStack, depth: int) -> str:
        if isinstance(node, Text):
            return node.content
        if isinstance(node, Variable):
            return html_escape(self._field_text(node.name, root, stack))
        if isinstance(node, UnescapedVariable):
            return self._field_text(node.name, root, stack)
        if isinstance(node, (Section, InvertedSection)):
            return self._render_section(node, root, stack, depth)
        if isinstance(node, Partial):
            return self._render_partial(node, root, stack, depth)
        if isinstance(node, Comment):
            return ""
        raise TypeError(f"Unknown node type: {type(node).__name__}")

    def _field_text(self, name: str, root: Value, stack: ContextStack) -> str:
        value = resolve_field(name, root, stack)
        if isinstance(value, Scalar):
            return value.value
        return ""

    def _render_section(
        self, node: Section | InvertedSection, root: Value, stack: ContextStack, depth: int
    ) -> str:
        inverted = isinstance(node, InvertedSection)
        value = resolve_section(node.name, root, stack)
        current = stack[0] if stack else root

        def body(new_stack: ContextStack) -> str:
            return self._render(node.children, root, new_stack, depth)

        if value is None or isinstance(value, Null):
            return body(stack) if inverted else ""

        if isinstance(value, Sequence):
            if not value.items:
                return body((current, *stack)) if inverted else ""
            if inverted:
                return ""
            return "".join(body((item, current, *stack)) for item in value.items)

        if isinstance(value, Scalar) and value.value == "false":
            return body((value, *stack)) if inverted else ""

        # "true", any other scalar, or a mapping
        return "" if inverted else body((value, *stack))

    def _render_partial(self, node: Partial, root: Value, stack: ContextStack, depth: int) -> str:
        template = lookup(self.partials, node.name)
        if not isinstance(template, Scalar):
            logger.debug("Partial %r not found, rendering nothing", node.name)
            return ""

        max_depth = self.config.max_partial_depth
        if max_depth is not None and depth >= max_depth:
            raise PartialDepthError(node.name, max_depth)

        text = template.value
        if node.indentation:
            text = indent_partial(text, node.indentation)

        # Partials are parsed afresh on every reference.
        return self._render(parse(text), root, stack, depth + 1)


def render_nodes(
    nodes: list[Node] | tuple[Node, ...],
    root: Value,
    stack: ContextStack = (),
    partials: Value = EMPTY,
    config: RenderConfig | None = None,
) -> str:
    """Render already-parsed nodes."""
    return Renderer(partials, config).render(nodes, root, stack)


def render(
    template: str,
    context: Value,
    partials: Value | None = None,
    config: RenderConfig | None = None,
) -> str:
    """Render a template against a context.

    Args:
        template: Template text
        context: Root data context
        partials: Mapping of partial name to template text (Scalar)
        config: Optional render settings

    Returns:
        Rendered text

    Raises:
        ParseError: If the template (or a partial it reaches) is malformed
        PartialDepthError: If partials nest deeper than config allows
    """
    nodes = parse(template)
    return render_nodes(nodes, context, (), EMPTY if partials is None else partials, config)
