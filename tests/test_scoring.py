from dots_and_boxes.game_state import (
    Board,
    Player,
    count_player_boxes,
    count_player_edges,
    create_board,
    get_score,
    winner,
)


def _with_owners(owners):
    # Owners set by hand on an otherwise empty 3x3-dot board.
    return Board.from_lists([[0, 0]] * 3, [[0, 0, 0]] * 2, owners)


def test_manual_owners_score_and_winner():
    board = _with_owners([[1, 1], [0, 2]])

    assert get_score(board) == {"player1": 2, "player2": 1}
    assert winner(board) == 1
    assert count_player_boxes(board, 1) == 2
    assert count_player_boxes(board, Player.TWO) == 1


def test_player_two_can_win():
    board = _with_owners([[2, 0], [2, 1]])
    assert winner(board) == 2


def test_empty_board_is_a_tie():
    board = create_board(3, 3)
    assert get_score(board) == {"player1": 0, "player2": 0}
    assert winner(board) == 0


def test_equal_scores_tie():
    assert winner(_with_owners([[1, 2], [2, 1]])) == 0


def test_count_player_edges_spans_both_matrices():
    board = Board.from_lists(
        h_edges=[[1, 2], [0, 1], [2, 2]],
        v_edges=[[1, 0, 0], [0, 2, 1]],
        owners=[[0, 0], [0, 0]],
    )

    assert count_player_edges(board, 1) == 4
    assert count_player_edges(board, 2) == 4
    assert board.count_player_edges(Player.ONE) == 4


def test_player_opponent():
    assert Player.ONE.opponent() == Player.TWO
    assert Player.TWO.opponent() == Player.ONE
    assert Player(2) == 2
