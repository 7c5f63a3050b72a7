# file: dots_and_boxes/game_state.py

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, List, NamedTuple, Sequence, Tuple

Matrix = Tuple[Tuple[int, ...], ...]


class Player(IntEnum):
    ONE = 1
    TWO = 2

    def opponent(self) -> "Player":
        return Player.TWO if self == Player.ONE else Player.ONE


class Direction(str, Enum):
    H = "H"   # horizontal edge, indexes h_edges
    V = "V"   # vertical edge, indexes v_edges


class FreeEdge(NamedTuple):
    direction: Direction
    row: int
    col: int


def _freeze(matrix: Sequence[Sequence[int]]) -> Matrix:
    # Already-frozen matrices are returned as is so unchanged rows stay shared.
    if isinstance(matrix, tuple) and all(isinstance(row, tuple) for row in matrix):
        return matrix
    return tuple(tuple(int(cell) for cell in row) for row in matrix)


def _zeros(rows: int, cols: int) -> Matrix:
    return tuple((0,) * cols for _ in range(rows))


@dataclass(frozen=True)
class Board:
    """
    Immutable Dots and Boxes board.

    ``h_edges`` is ``height x (width - 1)``, ``v_edges`` is
    ``(height - 1) x width`` and ``owners`` is ``(height - 1) x (width - 1)``,
    where width/height count dots. Cells hold 0 (empty) or the id of the
    player who drew the edge / closed the box.
    """

    h_edges: Matrix
    v_edges: Matrix
    owners: Matrix

    def __post_init__(self) -> None:
        for name in ("h_edges", "v_edges", "owners"):
            object.__setattr__(self, name, _freeze(getattr(self, name)))

    @classmethod
    def from_lists(
        cls,
        h_edges: Sequence[Sequence[int]],
        v_edges: Sequence[Sequence[int]],
        owners: Sequence[Sequence[int]],
    ) -> "Board":
        return cls(h_edges, v_edges, owners)

    def to_lists(self) -> Dict[str, List[List[int]]]:
        return {
            "h_edges": [list(row) for row in self.h_edges],
            "v_edges": [list(row) for row in self.v_edges],
            "owners": [list(row) for row in self.owners],
        }

    @property
    def height(self) -> int:
        return len(self.h_edges)

    @property
    def width(self) -> int:
        if self.v_edges:
            return len(self.v_edges[0])
        if self.h_edges:
            return len(self.h_edges[0]) + 1
        return 0

    def count_player_edges(self, player: int) -> int:
        """Number of edges (horizontal and vertical) drawn by ``player``."""
        count = 0
        for matrix in (self.h_edges, self.v_edges):
            for row in matrix:
                count += row.count(player)
        return count

    def count_player_boxes(self, player: int) -> int:
        """Number of boxes owned by ``player``."""
        return sum(row.count(player) for row in self.owners)

    def __str__(self):
        # Dots are "+", drawn edges "-"/"|", boxes show their owner id.
        lines = []
        width = self.width
        for r in range(self.height):
            top = "+"
            for c in range(width - 1):
                top += ("---" if self.h_edges[r][c] else "   ") + "+"
            lines.append(top)
            if r < len(self.v_edges):
                middle = ""
                for c in range(width):
                    middle += "|" if self.v_edges[r][c] else " "
                    if c < width - 1:
                        owner = self.owners[r][c]
                        middle += f" {owner} " if owner else "   "
                lines.append(middle)
        return "\n".join(lines)


def create_board(width: int = 9, height: int = 9) -> Board:
    """
    Create an empty board of ``width x height`` dots.

    Sizes below one are clamped to one, which gives the same degenerate board
    as ``create_board(1, 1)``.
    """
    width = max(1, width)
    height = max(1, height)
    return Board(
        h_edges=_zeros(height, width - 1),
        v_edges=_zeros(height - 1, width),
        owners=_zeros(height - 1, width - 1),
    )


def free_edges(board: Board) -> List[FreeEdge]:
    """All undrawn edges, horizontal first, each direction in row-major order."""
    edges: List[FreeEdge] = []
    for direction, matrix in ((Direction.H, board.h_edges), (Direction.V, board.v_edges)):
        for r, row in enumerate(matrix):
            for c, cell in enumerate(row):
                if cell == 0:
                    edges.append(FreeEdge(direction, r, c))
    return edges


def is_ended(board: Board) -> bool:
    return len(free_edges(board)) == 0


def get_score(board: Board) -> Dict[str, int]:
    return {
        "player1": board.count_player_boxes(Player.ONE),
        "player2": board.count_player_boxes(Player.TWO),
    }


def winner(board: Board) -> int:
    """1 or 2 for the player with strictly more boxes, 0 on a tie."""
    scores = get_score(board)
    if scores["player1"] > scores["player2"]:
        return 1
    if scores["player2"] > scores["player1"]:
        return 2
    return 0


def count_player_edges(board: Board, player: int) -> int:
    return board.count_player_edges(player)


def count_player_boxes(board: Board, player: int) -> int:
    return board.count_player_boxes(player)
