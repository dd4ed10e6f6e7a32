"""Shared enums and option records for diagram compilation."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Direction(str, Enum):
    """Layout direction selected by the ``direction`` directive."""

    TOP_DOWN = "topDown"
    LEFT_TO_RIGHT = "leftToRight"
    RIGHT_TO_LEFT = "rightToLeft"

    @property
    def rankdir(self) -> str:
        return {
            Direction.TOP_DOWN: "TB",
            Direction.LEFT_TO_RIGHT: "LR",
            Direction.RIGHT_TO_LEFT: "RL",
        }[self]

    @property
    def head_port(self) -> str:
        """Compass point where edges enter a parallel bar."""
        return {
            Direction.TOP_DOWN: "n",
            Direction.LEFT_TO_RIGHT: "w",
            Direction.RIGHT_TO_LEFT: "e",
        }[self]

    @property
    def is_vertical(self) -> bool:
        return self is Direction.TOP_DOWN


class Grammar(str, Enum):
    """Element grammars the classifier knows how to parse."""

    ACTIVITY = "activity"
    CLASS = "class"

    @property
    def openers(self) -> str:
        """Characters that open a bracketed token in this grammar."""
        return "(<|" if self is Grammar.ACTIVITY else "["

    @property
    def ranksep(self) -> float:
        return 0.5 if self is Grammar.ACTIVITY else 0.7


class ChartType(str, Enum):
    """Values accepted by the ``type`` directive."""

    CLASS = "class"
    USECASE = "usecase"
    ACTIVITY = "activity"
    STATE = "state"
    DEPLOYMENT = "deployment"
    PACKAGE = "package"
    SEQUENCE = "sequence"

    @property
    def grammar(self) -> Optional[Grammar]:
        """Grammar used to compile this chart type, None when unsupported."""
        if self is ChartType.ACTIVITY:
            return Grammar.ACTIVITY
        if self is ChartType.CLASS:
            return Grammar.CLASS
        return None


class ArrowHead(str, Enum):
    """Graphviz arrow shapes used at edge ends."""

    NONE = "none"
    VEE = "vee"
    ODIAMOND = "odiamond"
    DIAMOND = "diamond"
    EMPTY = "empty"


class Style(str, Enum):
    """Graphviz style keywords."""

    INVISIBLE = "invis"
    ROUNDED = "rounded"
    FILLED = "filled"
    SOLID = "solid"
    DASHED = "dashed"


class Shape(str, Enum):
    """Graphviz node shapes, plus the edge pseudo-shape."""

    NOTE = "note"
    RECORD = "record"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    DOUBLE_CIRCLE = "doublecircle"
    DIAMOND = "diamond"
    EDGE = "edge"


@dataclass
class DocumentOptions:
    """Options gathered from the document header directives."""

    chart_type: Optional[ChartType] = None
    direction: Direction = Direction.TOP_DOWN
    generate: bool = False
    dark: bool = False
