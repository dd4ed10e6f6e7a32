"""Classify raw tokens into typed elements for the active grammar."""

import re
from typing import Callable

import structlog

from yumldot.core.elements import (
    ActivityBox,
    Arrow,
    ClassBox,
    Connection,
    Connector,
    ConnectorKind,
    Decision,
    Element,
    EndTag,
    Inheritance,
    Note,
    ParallelBar,
    StartTag,
)
from yumldot.core.errors import ExpressionError
from yumldot.core.labels import extract_background
from yumldot.core.models import Direction, Grammar
from yumldot.core.tokenizer import Token, tokenize

log = structlog.get_logger()

ACTIVITY_BOX = re.compile(r"^\(.*\)$", re.DOTALL)
DECISION = re.compile(r"^<.*>$", re.DOTALL)
BAR = re.compile(r"^\|.*\|$", re.DOTALL)
DIRECTED_ARROW = re.compile(r"^(.*)->$", re.DOTALL)
CLASS_BOX = re.compile(r"^\[.*\]$", re.DOTALL)

SEPARATOR = ","

# Checked in order: longer markers first
CONNECTOR_MARKERS = [
    ("<>", ConnectorKind.AGGREGATION),
    ("++", ConnectorKind.COMPOSITION),
    ("+", ConnectorKind.AGGREGATION),
    ("<", ConnectorKind.DIRECTIONAL),
    (">", ConnectorKind.DIRECTIONAL),
    ("^", ConnectorKind.DEPENDENCY),
]


def classify_activity(token: Token, direction: Direction = Direction.TOP_DOWN) -> Element:
    """Classify one activity-diagram token.

    Raises:
        ExpressionError: If the token matches no activity production
    """
    text = token.text

    if ACTIVITY_BOX.match(text):
        parts = extract_background(text[1:-1])
        if parts.is_note:
            return Note(parts.text, parts.background, parts.font_color)
        if parts.text == "start":
            return StartTag()
        if parts.text == "end":
            return EndTag()
        return ActivityBox(parts.text, parts.background, parts.font_color)

    if DECISION.match(text):
        return Decision(text[1:-1].strip())

    if BAR.match(text):
        return ParallelBar(text[1:-1].strip())

    match = DIRECTED_ARROW.match(text)
    if match:
        label = match.group(1).strip()
        return Arrow(label=label or None, directed=True, direction=direction)

    if text == "-":
        return Arrow(label=None, directed=False, direction=direction)

    raise ExpressionError(text)


def parse_connector(side: str, from_end: bool = False) -> Connector:
    """Split one side of a class connection into decoration and label.

    The left side carries its decoration as a prefix, the right side as a
    suffix. A right side without a suffix falls back to prefix markers.

    Args:
        side: Text on one side of the ``-`` or ``-.-`` separator
        from_end: Whether to look for a suffix first

    Returns:
        Connector with the residual text as its label
    """
    if from_end:
        for marker, kind in CONNECTOR_MARKERS:
            if side.endswith(marker):
                return Connector(kind, side[:-len(marker)].strip())

    for marker, kind in CONNECTOR_MARKERS:
        if side.startswith(marker):
            return Connector(kind, side[len(marker):].strip())

    return Connector(ConnectorKind.NONE, side.strip())


def classify_class(token: Token, direction: Direction = Direction.TOP_DOWN) -> Element:
    """Classify one class-diagram token.

    Raises:
        ExpressionError: If the token matches no class production or a
            connection does not have exactly two sides
    """
    text = token.text

    if CLASS_BOX.match(text):
        parts = extract_background(text[1:-1])
        if parts.is_note:
            return Note(parts.text, parts.background, parts.font_color)
        return ClassBox(parts.text, parts.background, parts.font_color)

    if text == "^":
        return Inheritance()

    if "-" in text:
        dashed = "-.-" in text
        sides = text.split("-.-") if dashed else text.split("-")
        if len(sides) != 2:
            raise ExpressionError(text, "invalid expression, expected exactly one connector")
        left, right = sides
        return Connection(
            left=parse_connector(left),
            right=parse_connector(right, from_end=True),
            dashed=dashed,
        )

    raise ExpressionError(text)


CLASSIFIERS: dict[Grammar, Callable[[Token, Direction], Element]] = {
    Grammar.ACTIVITY: classify_activity,
    Grammar.CLASS: classify_class,
}


def classify(token: Token, grammar: Grammar, direction: Direction = Direction.TOP_DOWN) -> Element:
    """Map a token to a typed element of ``grammar``.

    Args:
        token: Token from ``tokenize``
        grammar: Active diagram grammar
        direction: Layout direction, recorded on activity arrows

    Returns:
        The classified element

    Raises:
        ExpressionError: If the token matches no production
    """
    return CLASSIFIERS[grammar](token, direction)


def parse_line(line: str, grammar: Grammar, direction: Direction = Direction.TOP_DOWN) -> list[Element]:
    """Tokenize and classify one expression line.

    A bare comma separates expressions, as in ``(a)->|x|,(b)->|x|``, and is
    skipped.
    """
    elements = [
        classify(token, grammar, direction)
        for token in tokenize(line, grammar.openers)
        if token.text != SEPARATOR
    ]
    log.debug("line_parsed", grammar=grammar.value, elements=len(elements))
    return elements
