from dots_and_boxes.game_state import (
    Board,
    Direction,
    FreeEdge,
    Player,
    count_player_boxes,
    count_player_edges,
    create_board,
    free_edges,
    get_score,
    is_ended,
    winner,
)
from dots_and_boxes.rule_engine import MoveResult, apply_move

__all__ = [
    "Board",
    "Direction",
    "FreeEdge",
    "MoveResult",
    "Player",
    "apply_move",
    "count_player_boxes",
    "count_player_edges",
    "create_board",
    "free_edges",
    "get_score",
    "is_ended",
    "winner",
]
