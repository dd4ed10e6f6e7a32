"""Resolve edge endpoints against the identity table.

Every edge connects its immediate neighbours in the document's element
sequence. The sequence is treated as a ring: an edge at the start of the
document takes the last element as its source and an edge at the end
takes the first element as its target.
"""

from dataclasses import dataclass, field

import structlog

from yumldot.core.elements import Edge, Element, ParallelBar, Relation
from yumldot.core.identity import IdentityTable

log = structlog.get_logger()


@dataclass
class ResolvedRelations:
    """Edges that received a Relation, in document order."""

    edges: list[Edge] = field(default_factory=list)
    dropped: int = 0


def resolve_relations(elements: list[Element], table: IdentityTable) -> ResolvedRelations:
    """Attach a Relation to every edge whose neighbours are both nodes.

    An edge next to another edge, or next to a node with no identity, is
    dropped. An edge touching a note is dashed. An edge into a parallel bar
    claims the bar's next port.

    All relations are resolved here before anything is serialized, so bar
    port counts are final by the time the bar is emitted.

    Args:
        elements: Classified elements of the whole document
        table: Identity table built from the same elements

    Returns:
        ResolvedRelations with the surviving edges and the drop count
    """
    result = ResolvedRelations()
    count = len(elements)

    for index, element in enumerate(elements):
        if not element.is_edge:
            continue

        previous = elements[index - 1]
        following = elements[(index + 1) % count]

        if previous.is_edge or following.is_edge:
            log.debug("edge_dropped", index=index, reason="adjacent_edge")
            result.dropped += 1
            continue

        # Only reachable with a table built from a different element list
        source = table.lookup(previous)
        target = table.lookup(following)
        if source is None or target is None:
            log.debug("edge_dropped", index=index, reason="unknown_endpoint")
            result.dropped += 1
            continue

        touches_note = previous.is_note or following.is_note
        dashed = touches_note or getattr(element, "dashed", False)

        port = None
        if isinstance(target.element, ParallelBar):
            port = target.element.claim_port()

        element.relation = Relation(source.id, target.id, port, dashed, touches_note)
        result.edges.append(element)

    return result
