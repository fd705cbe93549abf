"""Paths, routes and cyclic routes: validated sequences of adjacent cells.

All three are immutable after construction.  Building one from invalid
data raises; every other failure (e.g. joining paths that do not meet) is
reported through :class:`~tilenav.utils.logging.Diagnostics` and yields
the canonical empty value.
"""

from __future__ import annotations

from typing import ClassVar, Iterable, Iterator, Sequence

from tilenav.core.enums import LogCategory
from tilenav.core.models import Cell
from tilenav.utils.logging import Diagnostics


class NavigationError(Exception):
    """Base class for navigation construction failures."""


class InvalidPathError(NavigationError, ValueError):
    """Consecutive path cells are not exactly one grid step apart."""


class InvalidRouteError(NavigationError, ValueError):
    """A route's path does not visit its waypoints in order."""


# ---------------------------------------------------------------------------
# Path
# ---------------------------------------------------------------------------

class Path:
    """Immutable sequence of cells, each one step from the previous."""

    __slots__ = ("_cells", "_hash")

    EMPTY: ClassVar[Path]

    def __init__(self, cells: Iterable[Cell] = ()) -> None:
        cells = tuple(cells)
        if not Path.is_valid_sequence(cells):
            raise InvalidPathError(f"cells are not adjacent: {list(cells)}")
        self._cells: tuple[Cell, ...] = cells
        self._hash = hash(cells)

    @staticmethod
    def is_valid_sequence(cells: Sequence[Cell]) -> bool:
        """True when every consecutive pair is at squared distance 1."""
        return all(a.sqr_distance(b) == 1 for a, b in zip(cells, cells[1:]))

    # -- sequence protocol --

    @property
    def cells(self) -> tuple[Cell, ...]:
        return self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def __getitem__(self, index: int) -> Cell:
        return self._cells[index]

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __contains__(self, cell: object) -> bool:
        return cell in self._cells

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._cells == other._cells

    def __hash__(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        return f"Path({' -> '.join(map(repr, self._cells))})"

    # -- queries --

    @property
    def empty(self) -> bool:
        return not self._cells

    @property
    def first(self) -> Cell | None:
        return self._cells[0] if self._cells else None

    @property
    def last(self) -> Cell | None:
        return self._cells[-1] if self._cells else None

    @property
    def cost(self) -> int:
        """Sum of Manhattan step costs."""
        return sum(a.manhattan(b) for a, b in zip(self._cells, self._cells[1:]))

    def index_of(self, cell: Cell) -> int:
        try:
            return self._cells.index(cell)
        except ValueError:
            return -1

    def reverse(self) -> Path:
        return Path(reversed(self._cells))

    # -- composition --

    def concat(self, other: Path, diagnostics: Diagnostics | None = None) -> Path:
        """Join two paths sharing an end cell.

        An empty operand returns the other one unchanged.  Paths that do not
        meet are reported and produce :attr:`Path.EMPTY`.
        """
        if not self._cells:
            return other
        if not other._cells:
            return self
        if self._cells[-1] != other._cells[0]:
            (diagnostics or Diagnostics()).error(
                LogCategory.PATH,
                "Attempting to concatenate two non-adjacent paths: %r ends at %s, %r starts at %s",
                self, self._cells[-1], other, other._cells[0],
            )
            return Path.EMPTY
        return Path(self._cells + other._cells[1:])

    def __add__(self, other: Path) -> Path:
        if not isinstance(other, Path):
            return NotImplemented
        return self.concat(other)


Path.EMPTY = Path()


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

def _match_waypoints(path: Path, waypoints: Sequence[Cell]) -> list[int] | None:
    """Path indices at which *waypoints* are met in order, or None."""
    if not waypoints:
        return [] if path.empty else None
    if path.last != waypoints[-1]:
        return None
    indices: list[int] = []
    j = 0
    for i, cell in enumerate(path):
        if j < len(waypoints) and cell == waypoints[j]:
            indices.append(i)
            j += 1
    if j != len(waypoints):
        return None
    return indices


class Route:
    """A path annotated with the waypoints it passes through, in order."""

    __slots__ = ("_path", "_waypoints", "_indices")

    EMPTY: ClassVar[Route]

    def __init__(self, path: Path, waypoints: Iterable[Cell]) -> None:
        waypoints = tuple(waypoints)
        indices = _match_waypoints(path, self._validation_waypoints(waypoints))
        if indices is None:
            raise InvalidRouteError(
                f"{type(self).__name__} path {path!r} does not visit waypoints {list(waypoints)} in order"
            )
        self._path = path
        self._waypoints = waypoints
        self._indices = tuple(indices[: len(waypoints)])

    @staticmethod
    def _validation_waypoints(waypoints: tuple[Cell, ...]) -> tuple[Cell, ...]:
        return waypoints

    # -- accessors --

    @property
    def complete_path(self) -> Path:
        return self._path

    @property
    def waypoints(self) -> tuple[Cell, ...]:
        return self._waypoints

    @property
    def empty(self) -> bool:
        return self._path.empty

    def __len__(self) -> int:
        return len(self._path)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Route):
            return NotImplemented
        return (
            type(self) is type(other)
            and self._path == other._path
            and self._waypoints == other._waypoints
        )

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._path, self._waypoints))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(waypoints={list(self._waypoints)}, length={len(self._path)})"

    # -- queries --

    def waypoint_path_index(self, waypoint_index: int) -> int:
        """Index into the complete path where waypoint *waypoint_index* is met."""
        return self._indices[waypoint_index]

    def closest_waypoint(self, cell: Cell) -> Cell | None:
        return _closest(self._waypoints, cell)

    def path_index_of_closest_point(self, cell: Cell) -> int:
        """Index of the path cell nearest to *cell*, -1 for an empty route."""
        best_index = -1
        best_dist = 0
        for i, point in enumerate(self._path):
            if point == cell:
                return i
            dist = point.sqr_distance(cell)
            if best_index < 0 or dist < best_dist:
                best_index, best_dist = i, dist
        return best_index

    def closest_path_point(self, cell: Cell) -> Cell | None:
        index = self.path_index_of_closest_point(cell)
        return self._path[index] if index >= 0 else None


class CyclicRoute(Route):
    """Route whose path returns from the last waypoint to the first."""

    __slots__ = ()

    EMPTY: ClassVar[CyclicRoute]

    @staticmethod
    def _validation_waypoints(waypoints: tuple[Cell, ...]) -> tuple[Cell, ...]:
        if len(waypoints) >= 2:
            return waypoints + (waypoints[0],)
        return waypoints


def _closest(cells: Sequence[Cell], target: Cell) -> Cell | None:
    best: Cell | None = None
    best_dist = 0
    for cell in cells:
        if cell == target:
            return cell
        dist = cell.sqr_distance(target)
        if best is None or dist < best_dist:
            best, best_dist = cell, dist
    return best


Route.EMPTY = Route(Path.EMPTY, ())
CyclicRoute.EMPTY = CyclicRoute(Path.EMPTY, ())
