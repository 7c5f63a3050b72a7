from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from pydantic import ValidationError

from dots_and_boxes.game_manager import GameSession
from dots_and_boxes.game_state import Board, FreeEdge, free_edges, get_score, is_ended, winner
from dots_and_boxes.schemas import BoardModel, MoveRequest


def serialize_board(board: Board) -> Dict[str, List[List[int]]]:
    """
    Convert a ``Board`` into plain nested lists.
    """
    return board.to_lists()


def deserialize_board(payload: Mapping[str, Any]) -> Board:
    """
    Rebuild a ``Board`` from nested lists, validating values and shapes.
    """
    try:
        model = BoardModel.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid board payload: {exc}") from exc
    return model.to_board()


def deserialize_move(payload: Mapping[str, Any]) -> MoveRequest:
    """
    Convert a JSON move payload (``player``, ``dir``, ``row``, ``col``) into a request.
    """
    try:
        return MoveRequest.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid move payload: {exc}") from exc


def serialize_free_edges(edges: Iterable[FreeEdge]) -> List[Dict[str, Any]]:
    return [
        {"dir": edge.direction.value, "row": edge.row, "col": edge.col}
        for edge in edges
    ]


def serialize_board_state(board: Board) -> Dict[str, Any]:
    return {
        "board": serialize_board(board),
        "score": get_score(board),
        "isEnded": is_ended(board),
        "winner": winner(board),
    }


def serialize_session(session: GameSession) -> Dict[str, Any]:
    state = serialize_board_state(session.board)
    state.update(
        {
            "currentPlayer": int(session.current_player),
            "turnName": session.turn_name,
            "movesRemaining": session.moves_remaining,
            "playerNames": {str(pid): name for pid, name in session.player_names.items()},
            "wins": dict(session.wins),
            "moveCount": len(session.move_history),
        }
    )
    return state


def build_game_payload(session: GameSession) -> Dict[str, Any]:
    """
    Combine the serialised session with the edges still available to draw.
    """
    legal = free_edges(session.board) if not session.game_over else []
    payload: Dict[str, Any] = {
        "gameId": session.game_id,
        "state": serialize_session(session),
        "freeEdges": serialize_free_edges(legal),
    }
    message = session.game_over_message()
    if message:
        payload["message"] = message
    return payload
