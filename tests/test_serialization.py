import json

import pytest
from pydantic import ValidationError

from dots_and_boxes.game_manager import GameManager, GameSession, IllegalMoveError
from dots_and_boxes.game_state import create_board, free_edges
from dots_and_boxes.rule_engine import apply_move
from dots_and_boxes.schemas import BoardModel, MoveRequest, NewGameRequest
from dots_and_boxes.utils import (
    build_game_payload,
    deserialize_board,
    deserialize_move,
    serialize_board,
    serialize_free_edges,
)


def test_board_survives_json_round_trip():
    board = apply_move(1, "H", 1, 0, create_board(3, 3)).board
    payload = json.loads(json.dumps(serialize_board(board)))

    assert payload["h_edges"] == [[0, 0], [1, 0], [0, 0]]
    assert deserialize_board(payload) == board


def test_degenerate_board_deserializes():
    assert deserialize_board({"h_edges": [[]], "v_edges": [], "owners": []}) == create_board(1, 1)
    assert deserialize_board(serialize_board(create_board(1, 3))) == create_board(1, 3)


@pytest.mark.parametrize(
    "payload",
    [
        # cell value outside {0, 1, 2}
        {"h_edges": [[3], [0]], "v_edges": [[0, 0]], "owners": [[0]]},
        # ragged rows
        {"h_edges": [[0, 0], [0]], "v_edges": [[0, 0, 0]], "owners": [[0, 0]]},
        # v_edges too narrow for the width implied by h_edges
        {"h_edges": [[0], [0]], "v_edges": [[0]], "owners": [[0]]},
        # owners has too many rows
        {"h_edges": [[0], [0]], "v_edges": [[0, 0]], "owners": [[0], [0]]},
        # no rows at all
        {"h_edges": [], "v_edges": [], "owners": []},
        # owned box that is not enclosed
        {"h_edges": [[1], [1]], "v_edges": [[1, 0]], "owners": [[1]]},
        # enclosed box with no owner
        {"h_edges": [[1], [2]], "v_edges": [[1, 2]], "owners": [[0]]},
        # missing key
        {"h_edges": [[0], [0]], "v_edges": [[0, 0]]},
    ],
)
def test_malformed_boards_are_rejected(payload):
    with pytest.raises(ValueError):
        deserialize_board(payload)


def test_board_model_validates_directly():
    model = BoardModel(h_edges=[[1], [2]], v_edges=[[1, 2]], owners=[[2]])
    assert model.to_board().owners == ((2,),)

    with pytest.raises(ValidationError):
        BoardModel(h_edges=[[1], [2]], v_edges=[[1, 0]], owners=[[2]])


def test_move_request_accepts_dir_alias():
    request = MoveRequest.model_validate({"player": 2, "dir": "V", "row": 0, "col": 1})
    assert request.direction == "V"
    assert MoveRequest(player=1, direction="H", row=0, col=0).player == 1

    with pytest.raises(ValidationError):
        MoveRequest.model_validate({"player": 3, "dir": "H", "row": 0, "col": 0})
    with pytest.raises(ValidationError):
        MoveRequest.model_validate({"player": 1, "dir": "D", "row": 0, "col": 0})


def test_new_game_request_bounds():
    request = NewGameRequest.model_validate({"width": 4, "playerNames": {"1": "Ada"}})
    assert request.width == 4
    assert request.height is None
    assert request.player_names == {1: "Ada"}

    with pytest.raises(ValidationError):
        NewGameRequest(width=0)


def test_serialize_free_edges():
    edges = serialize_free_edges(free_edges(create_board(2, 2)))

    assert edges[0] == {"dir": "H", "row": 0, "col": 0}
    assert edges[-1] == {"dir": "V", "row": 0, "col": 1}
    assert serialize_free_edges([]) == []


def test_game_payload_reflects_session():
    session = GameSession(game_id="abc", width=2, height=2)
    session.play("H", 0, 0)
    payload = build_game_payload(session)

    assert payload["gameId"] == "abc"
    assert payload["state"]["currentPlayer"] == 2
    assert payload["state"]["turnName"] == "Player 2"
    assert payload["state"]["movesRemaining"] == 3
    assert payload["state"]["isEnded"] is False
    assert payload["state"]["moveCount"] == 1
    assert len(payload["freeEdges"]) == 3
    assert "message" not in payload
    json.dumps(payload)

    for move in [("V", 0, 0), ("H", 1, 0), ("V", 0, 1)]:
        session.play(*move)
    payload = build_game_payload(session)
    assert payload["freeEdges"] == []
    assert payload["state"]["winner"] == 2
    assert payload["state"]["wins"] == {"1": 0, "2": 1, "ties": 0}
    assert payload["message"] == "Game over - Player 2 Wins!"


def test_submitted_move_must_belong_to_player_to_move():
    manager = GameManager()
    session = manager.create_session_from_request(
        NewGameRequest.model_validate({"width": 2, "height": 2, "playerNames": {"2": "Grace"}})
    )
    assert session.player_names == {1: "Player 1", 2: "Grace"}

    with pytest.raises(IllegalMoveError):
        session.submit(deserialize_move({"player": 2, "dir": "H", "row": 0, "col": 0}))
    assert session.move_history == []

    assert session.submit(deserialize_move({"player": 1, "dir": "H", "row": 0, "col": 0})) == 0
    assert session.turn_name == "Grace"


def test_deserialize_move_rejects_bad_payloads():
    with pytest.raises(ValueError):
        deserialize_move({"player": 1, "dir": "Q", "row": 0, "col": 0})
    with pytest.raises(ValueError):
        deserialize_move({"player": 1, "row": 0, "col": 0})
