"""End-to-end compilation of a yUML document into DOT text.

Pipeline: directives, tokenize and classify every line, claim node
identities, resolve edge relations, then serialize. Each compilation owns
all of its state, so separate documents can be compiled concurrently.
"""

from dataclasses import dataclass, field
from typing import Optional

import structlog

from yumldot.core.classifier import parse_line
from yumldot.core.directives import is_comment, parse_directives
from yumldot.core.elements import Element
from yumldot.core.errors import MissingTypeError
from yumldot.core.identity import resolve_identities
from yumldot.core.models import DocumentOptions, Grammar
from yumldot.core.relations import resolve_relations
from yumldot.core.serializer import DotStatement, build_statements, serialize_document

log = structlog.get_logger()


@dataclass
class CompiledDiagram:
    """Result of compiling one document."""

    options: DocumentOptions
    grammar: Optional[Grammar] = None
    statements: list[DotStatement] = field(default_factory=list)
    dropped_edges: int = 0

    @property
    def nodes(self) -> list[DotStatement]:
        return [s for s in self.statements if not s.is_edge]

    @property
    def edges(self) -> list[DotStatement]:
        return [s for s in self.statements if s.is_edge]

    def to_dot(self) -> str:
        """DOT text, or an empty string when nothing was compiled."""
        if self.grammar is None:
            return ""
        return serialize_document(
            self.grammar,
            self.options.direction,
            self.statements,
            dark=self.options.dark,
        )


class DiagramCompiler:
    """Compile yUML documents for one output theme.

    Args:
        dark: Use white default lines and text for dark backgrounds
    """

    def __init__(self, dark: bool = False):
        self.dark = dark

    def compile(self, text: str) -> CompiledDiagram:
        """Compile a whole document.

        Raises:
            DirectiveError: If a directive has an invalid value
            MissingTypeError: If the document has expression lines but no type
            ExpressionError: If a token matches no production
        """
        lines = [line.strip() for line in text.splitlines()]
        options = parse_directives((line for line in lines if is_comment(line)), dark=self.dark)
        body = [line for line in lines if line and not is_comment(line)]

        if not body:
            log.debug("document_empty")
            return CompiledDiagram(options)

        if options.chart_type is None:
            raise MissingTypeError()

        grammar = options.chart_type.grammar
        if grammar is None:
            log.warning("unsupported_chart_type", chart_type=options.chart_type.value)
            return CompiledDiagram(options)

        elements: list[Element] = []
        for line in body:
            elements.extend(parse_line(line, grammar, options.direction))

        table = resolve_identities(elements)
        relations = resolve_relations(elements, table)
        statements = build_statements(grammar, options.direction, table, relations.edges)

        log.debug(
            "document_compiled",
            grammar=grammar.value,
            elements=len(elements),
            nodes=len(table),
            edges=len(relations.edges),
            dropped=relations.dropped,
        )
        return CompiledDiagram(options, grammar, statements, relations.dropped)


def compile_document(text: str, dark: bool = False) -> str:
    """Compile yUML text straight to DOT text."""
    return DiagramCompiler(dark=dark).compile(text).to_dot()
