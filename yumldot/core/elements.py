"""Typed diagram elements produced by the classifier.

Activity diagrams use StartTag, EndTag, ActivityBox, Decision, ParallelBar,
Note and Arrow. Class diagrams use ClassBox, Note, Connection and
Inheritance. Edge elements carry a Relation once the relation resolver has
run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from yumldot.core.labels import record_name
from yumldot.core.models import ArrowHead, Direction


@dataclass
class Relation:
    """Resolved endpoints of an edge element."""

    source_id: int
    target_id: int
    port: Optional[int] = None
    dashed: bool = False
    touches_note: bool = False


class Element:
    """Base class for all classified elements."""

    is_edge = False
    is_note = False
    label: str = ""

    @property
    def key(self) -> str:
        """Identity key used to deduplicate node declarations."""
        return record_name(self.label)


class Node(Element):
    """An element that declares (or references) a node."""


class Edge(Element):
    """An element that connects its two neighbours."""

    is_edge = True
    relation: Optional[Relation] = None


# Activity grammar


@dataclass
class StartTag(Node):
    label: str = "start"


@dataclass
class EndTag(Node):
    label: str = "end"


@dataclass
class ActivityBox(Node):
    """Rounded activity box, ``(Fill Kettle)``."""

    label: str
    background: Optional[str] = None
    font_color: Optional[str] = None


@dataclass
class Decision(Node):
    """Decision diamond, ``<d1>``."""

    label: str


@dataclass
class ParallelBar(Node):
    """Fork/join bar, ``|a|``.

    ``fanin`` counts incoming edges; each one claims the next port.
    """

    label: str
    fanin: int = 0

    def claim_port(self) -> int:
        self.fanin += 1
        return self.fanin

    @property
    def port_label(self) -> str:
        """Record label with one field per incoming edge."""
        return "|".join(f"<f{n}>" for n in range(1, self.fanin + 1))


@dataclass
class Note(Node):
    """Sticky note, ``(note: text)`` or ``[note: text]``."""

    label: str
    background: Optional[str] = None
    font_color: Optional[str] = None
    is_note = True


@dataclass
class Arrow(Edge):
    """Activity flow arrow, ``->`` or ``guard->``; a bare ``-`` is undirected."""

    label: Optional[str] = None
    directed: bool = True
    direction: Direction = Direction.TOP_DOWN
    relation: Optional[Relation] = None


# Class grammar


@dataclass
class ClassBox(Node):
    """Class box, ``[Customer|name;address|save()]``."""

    label: str
    background: Optional[str] = None
    font_color: Optional[str] = None


class ConnectorKind(str, Enum):
    """End decoration of a class connection."""

    DIRECTIONAL = "directional"
    AGGREGATION = "aggregation"
    COMPOSITION = "composition"
    DEPENDENCY = "dependency"
    NONE = "none"

    @property
    def arrow(self) -> Optional[ArrowHead]:
        return {
            ConnectorKind.DIRECTIONAL: ArrowHead.VEE,
            ConnectorKind.AGGREGATION: ArrowHead.ODIAMOND,
            ConnectorKind.COMPOSITION: ArrowHead.DIAMOND,
            ConnectorKind.DEPENDENCY: ArrowHead.EMPTY,
            ConnectorKind.NONE: None,
        }[self]


@dataclass
class Connector:
    """One end of a class connection: decoration plus cardinality or role."""

    kind: ConnectorKind = ConnectorKind.NONE
    label: str = ""


@dataclass
class Connection(Edge):
    """Association between two class boxes, ``<>1-*>`` or ``-.->``."""

    left: Connector = field(default_factory=Connector)
    right: Connector = field(default_factory=Connector)
    dashed: bool = False
    relation: Optional[Relation] = None


@dataclass
class Inheritance(Edge):
    """Inheritance marker, ``^``."""

    label: str = ""
    relation: Optional[Relation] = None
