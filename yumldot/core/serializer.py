"""Serialize resolved nodes and edges as Graphviz DOT text."""

import re
from dataclasses import dataclass, field
from typing import Optional, Union

from yumldot.core.elements import (
    ActivityBox,
    Arrow,
    ClassBox,
    Connection,
    Decision,
    Edge,
    Element,
    EndTag,
    Inheritance,
    Note,
    ParallelBar,
    StartTag,
)
from yumldot.core.identity import IdentityTable
from yumldot.core.labels import escape_html, escape_label, format_label, unescape_label
from yumldot.core.models import ArrowHead, Direction, Grammar, Shape, Style

# A record label made only of ports, e.g. <f1>|<f2>
PORT_LABEL = re.compile(r"^<[^<>|]+>(\|<[^<>|]+>)*$")
UNESCAPED_QUOTE = re.compile(r'(?<!\\)"')

BOX_MARGIN = "0.20,0.05"
TIGHT_MARGIN = "0,0"

HTML_TABLE_OPEN = '<TABLE BORDER="0" CELLBORDER="1" CELLSPACING="0" CELLPADDING="9" '


@dataclass
class Dot:
    """Attribute set of one DOT node or edge statement."""

    shape: Shape
    label: Optional[str] = None
    style: list[Style] = field(default_factory=list)
    margin: Optional[str] = None
    fillcolor: Optional[str] = None
    fontcolor: Optional[str] = None
    dir: Optional[str] = None
    arrowtail: Optional[ArrowHead] = None
    arrowhead: Optional[ArrowHead] = None
    taillabel: Optional[str] = None
    headlabel: Optional[str] = None
    labeldistance: Optional[int] = None
    height: Optional[float] = None
    width: Optional[float] = None
    fontsize: Optional[int] = None
    penwidth: Optional[int] = None

    def __str__(self) -> str:
        parts = [_string("shape", self.shape.value)]
        if self.margin is not None:
            parts.append(_string("margin", self.margin))
        parts.append(_string("label", self.label or ""))
        parts.append(_string("style", ",".join(style.value for style in self.style)))
        if self.fillcolor is not None:
            parts.append(_string("fillcolor", self.fillcolor))
        if self.fontcolor is not None:
            parts.append(_string("fontcolor", self.fontcolor))
        if self.dir is not None:
            parts.append(_string("dir", self.dir))
        parts.append(_string("arrowtail", (self.arrowtail or ArrowHead.NONE).value))
        parts.append(_string("arrowhead", (self.arrowhead or ArrowHead.NONE).value))
        if self.taillabel is not None:
            parts.append(_string("taillabel", self.taillabel))
        if self.headlabel is not None:
            parts.append(_string("headlabel", self.headlabel))

        for name in ("labeldistance", "height", "width", "fontsize", "penwidth"):
            value = getattr(self, name)
            if value is not None:
                parts.append(f"{name}={_number(value)} , ")

        return "[" + "".join(parts) + "]"


def _string(name: str, value: str) -> str:
    value = UNESCAPED_QUOTE.sub(r'\\"', value)
    return f'{name}="{value}" , '


def _number(value: Union[int, float]) -> str:
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


def serialize_dot(dot: Dot) -> str:
    """Render an attribute list, replacing unsafe record shapes.

    Multi-field records become HTML-like tables; a record whose label has
    no fields becomes a plain rectangle. Port-only records (parallel bars)
    stay records.
    """
    label = dot.label or ""
    if dot.shape is not Shape.RECORD or PORT_LABEL.match(label):
        return str(dot)

    if "|" in label:
        attributes = HTML_TABLE_OPEN
        if dot.fillcolor:
            attributes += f'BGCOLOR="{dot.fillcolor}" '
        if dot.fontcolor:
            attributes += f'COLOR="{dot.fontcolor}" '
        rows = "".join(
            f"<TR><TD>{escape_html(unescape_label(field_text))}</TD></TR>"
            for field_text in label.split("|")
        )
        return f"[fontsize=10,label=<{attributes}>{rows}</TABLE>>]"

    dot.shape = Shape.RECTANGLE
    return str(dot)


@dataclass
class DotStatement:
    """One node or edge line of the output."""

    uid: str
    dot: Dot
    target: Optional[str] = None
    same_rank: bool = False

    @property
    def is_edge(self) -> bool:
        return self.target is not None

    def __str__(self) -> str:
        attributes = serialize_dot(self.dot)
        if self.target is None:
            return f"    {self.uid} {attributes}"
        if self.same_rank:
            return f"    {{ rank=same; {self.uid} -> {self.target} {attributes};}}"
        return f"    {self.uid} -> {self.target} {attributes}"


def build_header(dark: bool = False) -> list[str]:
    """Global graph, node and edge defaults."""
    colors = "color=white, fontcolor=white" if dark else "color=black, fontcolor=black"
    return [
        "digraph G {",
        "  graph [ bgcolor=transparent, fontname=Helvetica ]",
        f"  node [ shape=none, margin=0, {colors}, fontname=Helvetica ]",
        f"  edge [ {colors}, fontname=Helvetica ]",
    ]


def _filled(dot: Dot, background: Optional[str], font_color: Optional[str]) -> Dot:
    if background:
        dot.style.append(Style.FILLED)
        dot.fillcolor = background
    if font_color:
        dot.fontcolor = font_color
    return dot


def activity_node(element: Element, direction: Direction) -> Dot:
    """Attributes for an activity-diagram node."""
    if isinstance(element, (StartTag, EndTag)):
        shape = Shape.CIRCLE if isinstance(element, StartTag) else Shape.DOUBLE_CIRCLE
        return Dot(shape=shape, margin=TIGHT_MARGIN, height=0.3, width=0.3)

    if isinstance(element, Decision):
        return Dot(shape=Shape.DIAMOND, margin=TIGHT_MARGIN, height=0.5, width=0.5, fontsize=0)

    if isinstance(element, ParallelBar):
        thin, wide = 0.05, 0.5
        return Dot(
            shape=Shape.RECORD,
            margin=TIGHT_MARGIN,
            label=element.port_label,
            style=[Style.FILLED],
            height=thin if direction.is_vertical else wide,
            width=wide if direction.is_vertical else thin,
            fontsize=1,
            penwidth=4,
        )

    if isinstance(element, (ActivityBox, Note)):
        dot = Dot(
            shape=Shape.NOTE if element.is_note else Shape.RECORD,
            margin=BOX_MARGIN,
            label=escape_label(element.label),
            style=[Style.ROUNDED],
            height=0.5,
            fontsize=10,
        )
        return _filled(dot, element.background, element.font_color)

    raise TypeError(f"not an activity node: {type(element).__name__}")


def class_node(element: Element) -> Dot:
    """Attributes for a class-diagram node."""
    if not isinstance(element, (ClassBox, Note)):
        raise TypeError(f"not a class node: {type(element).__name__}")

    dot = Dot(
        shape=Shape.NOTE if element.is_note else Shape.RECORD,
        margin=BOX_MARGIN,
        label=format_label(element.label),
        height=0.5,
        fontsize=10,
    )
    return _filled(dot, element.background, element.font_color)


def edge_dot(edge: Edge) -> Dot:
    """Attributes for a resolved edge of either grammar."""
    style = [Style.DASHED if edge.relation.dashed else Style.SOLID]

    if isinstance(edge, Arrow):
        return Dot(
            shape=Shape.EDGE,
            label=edge.label,
            style=style,
            dir="both",
            arrowhead=ArrowHead.VEE if edge.directed else None,
            labeldistance=1,
            fontsize=10,
        )

    if isinstance(edge, Connection):
        return Dot(
            shape=Shape.EDGE,
            style=style,
            dir="both",
            arrowtail=edge.left.kind.arrow,
            arrowhead=edge.right.kind.arrow,
            taillabel=edge.left.label,
            headlabel=edge.right.label,
            labeldistance=2,
            fontsize=10,
        )

    if isinstance(edge, Inheritance):
        return Dot(
            shape=Shape.EDGE,
            style=style,
            dir="both",
            arrowtail=ArrowHead.EMPTY,
            labeldistance=2,
            fontsize=10,
        )

    raise TypeError(f"not an edge: {type(edge).__name__}")


def edge_target(edge: Edge, direction: Direction) -> str:
    """Target node name, with a bar port when the edge claimed one."""
    relation = edge.relation
    target = f"A{relation.target_id}"
    if relation.port is not None:
        head_port = edge.direction.head_port if isinstance(edge, Arrow) else direction.head_port
        target = f"{target}:f{relation.port}:{head_port}"
    return target


def build_statements(
    grammar: Grammar,
    direction: Direction,
    table: IdentityTable,
    edges: list[Edge],
) -> list[DotStatement]:
    """Node statements in id order followed by edge statements in document order."""
    statements = []
    for identity in table:
        if grammar is Grammar.ACTIVITY:
            dot = activity_node(identity.element, direction)
        else:
            dot = class_node(identity.element)
        statements.append(DotStatement(identity.uid, dot))

    for edge in edges:
        relation = edge.relation
        statements.append(
            DotStatement(
                uid=f"A{relation.source_id}",
                dot=edge_dot(edge),
                target=edge_target(edge, direction),
                same_rank=grammar is Grammar.CLASS and relation.touches_note,
            )
        )
    return statements


def serialize_document(
    grammar: Grammar,
    direction: Direction,
    statements: list[DotStatement],
    dark: bool = False,
) -> str:
    """Assemble the complete DOT document."""
    lines = build_header(dark)
    lines.append(f"    ranksep = {_number(grammar.ranksep)}")
    lines.append(f"    rankdir = {direction.rankdir}")
    lines.extend(str(statement) for statement in statements)
    lines.append("}")
    return "\n".join(lines) + "\n"
