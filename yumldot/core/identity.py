"""Node identity table: first occurrence of a label owns the node."""

from dataclasses import dataclass
from typing import Iterator, Optional

import structlog

from yumldot.core.elements import Element

log = structlog.get_logger()


@dataclass
class Identity:
    """A claimed node id and the element that owns it."""

    id: int
    element: Element

    @property
    def uid(self) -> str:
        """Graphviz node name."""
        return f"A{self.id}"


class IdentityTable:
    """Append-only map from normalised label to (id, owning element).

    Ids are handed out in insertion order starting at 1.
    """

    def __init__(self):
        self._entries: dict[str, Identity] = {}

    def claim(self, element: Element) -> Optional[Identity]:
        """Register ``element`` if its label is new.

        Returns:
            The new Identity, or None if the label was already claimed
        """
        key = element.key
        if key in self._entries:
            return None
        identity = Identity(len(self._entries) + 1, element)
        self._entries[key] = identity
        return identity

    def get(self, label: str) -> Optional[Identity]:
        return self._entries.get(label)

    def lookup(self, element: Element) -> Optional[Identity]:
        """Identity owning the node ``element`` refers to."""
        return self._entries.get(element.key)

    def __contains__(self, label: str) -> bool:
        return label in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Identity]:
        return iter(self._entries.values())


def resolve_identities(elements: list[Element]) -> IdentityTable:
    """Build the identity table for a document's element sequence.

    Edge elements never own a label. Later declarations of a claimed label
    are references; their own attributes are ignored.
    """
    table = IdentityTable()
    for element in elements:
        if element.is_edge:
            continue
        if table.claim(element) is None:
            log.debug("label_reused", label=element.key)
    return table
