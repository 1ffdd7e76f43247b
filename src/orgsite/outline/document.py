"""Arena-indexed org document tree.

Nodes are addressed by integer handles. Structural edits (``detach``) are only
allowed until ``freeze()`` is called; extraction freezes a document once all of
its redactions are applied, and rendering refuses documents that are not frozen.
"""

from collections.abc import Iterator
from enum import Enum

from orgsite.outline.elements import Element, Headline, Root, Section, Title


class FrozenDocumentError(RuntimeError):
    pass


class UnfrozenDocumentError(RuntimeError):
    pass


class Edge(str, Enum):
    start = "start"
    end = "end"


class OrgDocument:
    ROOT = 0

    def __init__(self) -> None:
        self._elements: list[Element] = [Root()]
        self._parent: list[int | None] = [None]
        self._children: list[list[int]] = [[]]
        self._frozen = False

    def __len__(self) -> int:
        return len(self._elements)

    def __getitem__(self, node: int) -> Element:
        return self._elements[node]

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def add(self, element: Element, parent: int) -> int:
        if self._frozen:
            raise FrozenDocumentError("cannot add nodes to a frozen document")
        node = len(self._elements)
        self._elements.append(element)
        self._parent.append(parent)
        self._children.append([])
        self._children[parent].append(node)
        return node

    def parent(self, node: int) -> int | None:
        return self._parent[node]

    def children(self, node: int) -> list[int]:
        return list(self._children[node])

    def descendants(self, node: int) -> Iterator[int]:
        """Pre-order walk below ``node`` (the node itself is not included)."""
        stack = list(reversed(self._children[node]))
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(self._children[current]))

    def traverse(self, node: int) -> Iterator[tuple[Edge, int]]:
        """Yield (start, n) and (end, n) edges for the subtree rooted at ``node``."""
        stack: list[tuple[Edge, int]] = [(Edge.start, node)]
        while stack:
            edge, current = stack.pop()
            yield edge, current
            if edge is Edge.start:
                stack.append((Edge.end, current))
                for child in reversed(self._children[current]):
                    stack.append((Edge.start, child))

    def detach(self, node: int) -> None:
        """Unlink ``node`` and its subtree from its parent."""
        if self._frozen:
            raise FrozenDocumentError("cannot detach nodes from a frozen document")
        parent = self._parent[node]
        if parent is None:
            return
        self._children[parent].remove(node)
        self._parent[node] = None

    def is_attached(self, node: int) -> bool:
        current: int | None = node
        while current is not None:
            if current == self.ROOT:
                return True
            current = self._parent[current]
        return False

    def headlines(self) -> list[int]:
        """All attached headline nodes in document order."""
        return [
            n for n in self.descendants(self.ROOT) if isinstance(self[n], Headline)
        ]

    def title_of(self, headline: int) -> Title:
        for child in self._children[headline]:
            element = self._elements[child]
            if isinstance(element, Title):
                return element
        raise ValueError(f"node {headline} is not a headline")

    def section_of(self, headline: int) -> int | None:
        for child in self._children[headline]:
            if isinstance(self._elements[child], Section):
                return child
        return None

    def child_headlines(self, headline: int) -> list[int]:
        return [
            c for c in self._children[headline] if isinstance(self._elements[c], Headline)
        ]

    def sub_headlines(self, headline: int) -> list[int]:
        """Every headline below ``headline``, depth first, in document order."""
        result = []
        for child in self.child_headlines(headline):
            result.append(child)
            result.extend(self.sub_headlines(child))
        return result
