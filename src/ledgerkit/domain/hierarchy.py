"""Subject hierarchy resolution.

Builds an index-addressed tree from a flat chart of accounts. A subject's
parent is the longest active subject whose code is a proper prefix of its
own code; subjects without such a prefix are roots. Inactive subjects stay
in the tree so their history can still be reported, but they never become
parents and never make another subject non-leaf.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ledgerkit.domain.entities import Subject
from ledgerkit.domain.errors import (
    InvalidSubjectConfiguration,
    UnknownSubjectReference,
    duplicate_subject_code,
    subject_not_found,
)


@dataclass(frozen=True)
class SubjectNode:
    """Resolved subject with tree links as indices into the node list.

    ``children`` lists every child, inactive ones included; ``is_leaf`` is
    true when no active subject sits below this one.
    """

    index: int
    subject: Subject
    parent: Optional[int]
    children: tuple[int, ...]
    level: int
    is_leaf: bool

    @property
    def code(self) -> str:
        return self.subject.code

    @property
    def is_active(self) -> bool:
        return self.subject.is_active


class SubjectHierarchy:
    """Array-backed subject tree, nodes sorted by code."""

    def __init__(self, nodes: Sequence[SubjectNode]):
        self.nodes: tuple[SubjectNode, ...] = tuple(nodes)
        self._by_code = {node.code: node.index for node in self.nodes}
        self._by_id = {node.subject.id: node.index for node in self.nodes}

    @classmethod
    def resolve(cls, subjects: Iterable[Subject]) -> "SubjectHierarchy":
        """Resolve a flat subject list into a hierarchy.

        Raises:
            InvalidSubjectConfiguration: On empty or duplicate codes, or a
                declared parent whose code is not a prefix of the child's
        """
        subjects = list(subjects)
        seen: set[str] = set()
        for subject in subjects:
            code = (subject.code or "").strip()
            if not code or code != subject.code:
                raise InvalidSubjectConfiguration(
                    f"Subject {subject.id} has an empty or padded code {subject.code!r}"
                )
            if code in seen:
                raise InvalidSubjectConfiguration(duplicate_subject_code(code))
            seen.add(code)

        ordered = sorted(subjects, key=lambda s: s.code)
        active_index_by_code = {s.code: i for i, s in enumerate(ordered) if s.is_active}
        code_by_id = {s.id: s.code for s in subjects}

        parents: list[Optional[int]] = []
        children: list[list[int]] = [[] for _ in ordered]
        for i, subject in enumerate(ordered):
            parent = None
            for length in range(len(subject.code) - 1, 0, -1):
                candidate = active_index_by_code.get(subject.code[:length])
                if candidate is not None:
                    parent = candidate
                    break
            parents.append(parent)
            if parent is not None:
                children[parent].append(i)

            if subject.parent_id is not None:
                declared = code_by_id.get(subject.parent_id)
                if declared is None or declared == subject.code or not subject.code.startswith(declared):
                    raise InvalidSubjectConfiguration(
                        f"Subject '{subject.code}' declares parent {subject.parent_id} "
                        "whose code is not a prefix of its own"
                    )

        # Sorted by code, so every parent precedes its children
        levels: list[int] = []
        for parent in parents:
            levels.append(1 if parent is None else levels[parent] + 1)

        nodes = [
            SubjectNode(
                index=i,
                subject=subject,
                parent=parents[i],
                children=tuple(children[i]),
                level=levels[i],
                is_leaf=not any(ordered[c].is_active for c in children[i]),
            )
            for i, subject in enumerate(ordered)
        ]
        return cls(nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, code: str) -> bool:
        return code in self._by_code

    @property
    def roots(self) -> tuple[SubjectNode, ...]:
        return tuple(node for node in self.nodes if node.parent is None)

    @property
    def leaves(self) -> tuple[SubjectNode, ...]:
        return tuple(node for node in self.nodes if node.is_leaf)

    def get(self, code: str) -> Optional[SubjectNode]:
        index = self._by_code.get(code)
        return None if index is None else self.nodes[index]

    def node(self, code: str) -> SubjectNode:
        """Get node by code or raise UnknownSubjectReference."""
        found = self.get(code)
        if found is None:
            raise UnknownSubjectReference(subject_not_found(code))
        return found

    def node_by_id(self, subject_id: int) -> SubjectNode:
        index = self._by_id.get(subject_id)
        if index is None:
            raise UnknownSubjectReference(f"Subject id {subject_id} not found")
        return self.nodes[index]

    def children_of(self, node: SubjectNode) -> tuple[SubjectNode, ...]:
        return tuple(self.nodes[i] for i in node.children)

    def descendants(self, node: SubjectNode) -> tuple[SubjectNode, ...]:
        """All descendants of ``node``, depth first, excluding ``node``."""
        result: list[SubjectNode] = []

        def visit(current: SubjectNode) -> None:
            for child_index in current.children:
                child = self.nodes[child_index]
                result.append(child)
                visit(child)

        visit(node)
        return tuple(result)

    def leaves_under(self, node: SubjectNode) -> tuple[SubjectNode, ...]:
        if node.is_leaf:
            return (node,)
        return tuple(d for d in self.descendants(node) if d.is_leaf)

    def leaves_in_range(self, code_from: str, code_to: Optional[str] = None) -> tuple[SubjectNode, ...]:
        """Leaf subjects with ``code_from <= code <= code_to`` (string order)."""
        upper = code_to if code_to is not None else code_from
        return tuple(
            node for node in self.nodes if node.is_leaf and code_from <= node.code <= upper
        )

    def select(
        self,
        code_from: Optional[str] = None,
        code_to: Optional[str] = None,
        level_from: Optional[int] = None,
        level_to: Optional[int] = None,
    ) -> tuple[SubjectNode, ...]:
        """Nodes filtered by inclusive code range and level range."""
        selected = []
        for node in self.nodes:
            if code_from is not None and node.code < code_from:
                continue
            if code_to is not None and node.code > code_to:
                continue
            if level_from is not None and node.level < level_from:
                continue
            if level_to is not None and node.level > level_to:
                continue
            selected.append(node)
        return tuple(selected)
