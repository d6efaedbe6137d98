from collections.abc import Iterable, Iterator
from enum import Enum

from pydantic import BaseModel


class Anchor(str, Enum):
    """Which edge of a task bar a constraint attaches to."""

    START = "start"
    END = "end"


class ConstraintType(str, Enum):
    """
    Precedence constraint between a predecessor (P) and a successor (S).

    - FS: S must not start before P ends
    - SS: S must not start before P starts
    - FF: S must not finish before P finishes
    - SF: S must not finish before P starts
    """

    FS = "FS"
    SS = "SS"
    FF = "FF"
    SF = "SF"

    @property
    def predecessor_anchor(self) -> Anchor:
        return Anchor.END if self in (ConstraintType.FS, ConstraintType.FF) else Anchor.START

    @property
    def successor_anchor(self) -> Anchor:
        return Anchor.START if self in (ConstraintType.FS, ConstraintType.SS) else Anchor.END

    @classmethod
    def from_endpoints(cls, from_anchor: Anchor | str, to_anchor: Anchor | str) -> "ConstraintType":
        """
        Constraint implied by linking one bar endpoint to another.

        end -> start is FS, start -> start is SS, end -> end is FF and the
        remaining start -> end combination is SF.
        """
        from_anchor = Anchor(from_anchor)
        to_anchor = Anchor(to_anchor)
        if from_anchor is Anchor.END and to_anchor is Anchor.START:
            return cls.FS
        if from_anchor is Anchor.START and to_anchor is Anchor.START:
            return cls.SS
        if from_anchor is Anchor.END and to_anchor is Anchor.END:
            return cls.FF
        return cls.SF


DEFAULT_CONSTRAINT = ConstraintType.FS


class DependencyEdge(BaseModel):
    """
    A typed edge predecessor_id -> successor_id.

    Example: if Task A must finish before Task B starts:
    - predecessor_id = A.id
    - successor_id = B.id
    - dependency_type = FS
    """

    predecessor_id: str
    successor_id: str
    dependency_type: ConstraintType = DEFAULT_CONSTRAINT


class DependencyMap:
    """
    Constraint type per ordered (predecessor, successor) pair.

    Only one type is recorded per pair. A pair without an entry reads as FS
    whether or not it is a real dependency, so callers check the successor's
    depends_on before asking.
    """

    def __init__(self, types: dict[tuple[str, str], ConstraintType | str] | None = None):
        self._types: dict[tuple[str, str], ConstraintType] = {
            pair: ConstraintType(dependency_type) for pair, dependency_type in (types or {}).items()
        }

    @classmethod
    def from_edges(cls, edges: Iterable[DependencyEdge]) -> "DependencyMap":
        dependency_map = cls()
        for edge in edges:
            dependency_map.set(edge.predecessor_id, edge.successor_id, edge.dependency_type)
        return dependency_map

    def get_type(self, predecessor_id: str, successor_id: str) -> ConstraintType:
        return self._types.get((predecessor_id, successor_id), DEFAULT_CONSTRAINT)

    def set(self, predecessor_id: str, successor_id: str, dependency_type: ConstraintType | str) -> None:
        self._types[(predecessor_id, successor_id)] = ConstraintType(dependency_type)

    def remove(self, predecessor_id: str, successor_id: str) -> None:
        self._types.pop((predecessor_id, successor_id), None)

    def edges(self) -> list[DependencyEdge]:
        return [
            DependencyEdge(predecessor_id=pred, successor_id=succ, dependency_type=dep_type)
            for (pred, succ), dep_type in self._types.items()
        ]

    def __contains__(self, pair: object) -> bool:
        return pair in self._types

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"DependencyMap({len(self._types)} edges)"
