from typing import Dict, List, NamedTuple, Optional, Tuple

from dots_and_boxes.game_state import (
    Board,
    Direction,
    Matrix,
    Player,
    is_ended,
)

Coordinate = Tuple[int, int]


class MoveResult(NamedTuple):
    board: Board
    next_player: Player
    boxes_closed: int


# ---------------------------------------------------------------------------
# Box geometry
# ---------------------------------------------------------------------------


def get_surrounding_edges(row: int, col: int) -> Dict[str, Coordinate]:
    """
    Edge coordinates bounding box ``(row, col)``.

    ``top``/``bottom`` index ``h_edges``, ``left``/``right`` index ``v_edges``.
    """
    return {
        "top": (row, col),
        "bottom": (row + 1, col),
        "left": (row, col),
        "right": (row, col + 1),
    }


def _cell(matrix: Matrix, row: int, col: int) -> int:
    if 0 <= row < len(matrix) and 0 <= col < len(matrix[row]):
        return matrix[row][col]
    return 0


def is_enclosed(h_edges: Matrix, v_edges: Matrix, row: int, col: int) -> bool:
    edges = get_surrounding_edges(row, col)
    return (
        _cell(h_edges, *edges["top"]) != 0
        and _cell(h_edges, *edges["bottom"]) != 0
        and _cell(v_edges, *edges["left"]) != 0
        and _cell(v_edges, *edges["right"]) != 0
    )


def is_valid_box_position(owners: Matrix, row: int, col: int) -> bool:
    total_rows = len(owners)
    total_cols = len(owners[0]) if owners else 0
    return 0 <= row < total_rows and 0 <= col < total_cols


def is_already_claimed(owners: Matrix, row: int, col: int) -> bool:
    # Out of range counts as unclaimed.
    if not is_valid_box_position(owners, row, col):
        return False
    return owners[row][col] != 0


def is_box_claimable(board: Board, row: int, col: int) -> bool:
    if not is_valid_box_position(board.owners, row, col):
        return False
    if is_already_claimed(board.owners, row, col):
        return False
    return is_enclosed(board.h_edges, board.v_edges, row, col)


# ---------------------------------------------------------------------------
# Copy-on-write updates
# ---------------------------------------------------------------------------


def set_edge(edges: Matrix, row: int, col: int, player: int) -> Matrix:
    """Return ``edges`` with one cell replaced; rows other than ``row`` are shared."""
    old_row = edges[row]
    new_row = old_row[:col] + (int(player),) + old_row[col + 1:]
    return edges[:row] + (new_row,) + edges[row + 1:]


def set_box_owner(owners: Matrix, row: int, col: int, player: int) -> Matrix:
    return set_edge(owners, row, col, player)


def claim_box_if_enclosed(
    board: Board, row: int, col: int, player: int
) -> Tuple[Matrix, bool]:
    if not is_box_claimable(board, row, col):
        return board.owners, False
    return set_box_owner(board.owners, row, col, player), True


def next_player(last_player: int, box_claimed: bool) -> Player:
    if box_claimed:
        return Player(last_player)
    return Player(last_player).opponent()


# ---------------------------------------------------------------------------
# Move application
# ---------------------------------------------------------------------------


def _edges_for(direction: Direction, board: Board) -> Matrix:
    return board.h_edges if direction == Direction.H else board.v_edges


def is_edge_free(direction: str, row: int, col: int, board: Board) -> bool:
    try:
        direction = Direction(direction)
    except ValueError:
        return False
    edges = _edges_for(direction, board)
    if row < 0 or row >= len(edges) or col < 0 or col >= len(edges[row]):
        return False
    return edges[row][col] == 0


def apply_edge_to_board(
    direction: Direction,
    row: int,
    col: int,
    player: int,
    h_edges: Matrix,
    v_edges: Matrix,
) -> Tuple[Matrix, Matrix]:
    if direction == Direction.H:
        return set_edge(h_edges, row, col, player), v_edges
    return h_edges, set_edge(v_edges, row, col, player)


def get_candidate_boxes(direction: str, row: int, col: int) -> List[Coordinate]:
    """The two boxes touching an edge: above/below for H, left/right for V."""
    if direction == Direction.H:
        return [(row - 1, col), (row, col)]
    return [(row, col - 1), (row, col)]


def process_all_candidate_boxes(
    direction: Direction,
    row: int,
    col: int,
    player: int,
    new_h: Matrix,
    new_v: Matrix,
    owners: Matrix,
) -> Tuple[Matrix, int]:
    result_owners = owners
    boxes_closed = 0
    for box_row, box_col in get_candidate_boxes(direction, row, col):
        # Each check sees the owners produced by the previous candidate.
        result_owners, claimed = claim_box_if_enclosed(
            Board(new_h, new_v, result_owners), box_row, box_col, player
        )
        if claimed:
            boxes_closed += 1
    return result_owners, boxes_closed


def apply_move(
    player: int, direction: str, row: int, col: int, board: Board
) -> Optional[MoveResult]:
    """
    Draw one edge for ``player`` and resolve any boxes it closes.

    Returns ``None`` without building any new state when the game has ended,
    the edge is out of range or already drawn, or the player id or direction
    is not recognised. Otherwise returns the new board, the player to move
    next (the same player after closing a box) and the number of boxes closed.
    """
    if isinstance(player, bool) or player not in (Player.ONE, Player.TWO):
        return None
    if is_ended(board) or not is_edge_free(direction, row, col, board):
        return None

    direction = Direction(direction)
    new_h, new_v = apply_edge_to_board(
        direction, row, col, player, board.h_edges, board.v_edges
    )
    new_owners, boxes_closed = process_all_candidate_boxes(
        direction, row, col, player, new_h, new_v, board.owners
    )
    return MoveResult(
        board=Board(new_h, new_v, new_owners),
        next_player=next_player(player, boxes_closed > 0),
        boxes_closed=boxes_closed,
    )
