import argparse

from dots_and_boxes.game_manager import GameManager, IllegalMoveError
from dots_and_boxes.game_state import free_edges


def parse_args():
    parser = argparse.ArgumentParser(description="Play a scripted Dots and Boxes game")
    parser.add_argument("-W", "--width", type=int, default=3, help="dots across (default 3)")
    parser.add_argument("-H", "--height", type=int, default=3, help="dots down (default 3)")
    return parser.parse_args()


def main():
    args = parse_args()
    session = GameManager().create_session(width=args.width, height=args.height)
    print("Free edges:", session.moves_remaining)

    # Always draw the top-left-most free edge; closing a box keeps the turn.
    while not session.game_over:
        player = session.current_player
        edge = min(free_edges(session.board), key=lambda e: (e.row, e.col, e.direction.value))
        try:
            closed = session.play(edge.direction, edge.row, edge.col, quiet=False)
        except IllegalMoveError as e:
            print(f"Move rejected: {e}")
            break
        print(
            f"{session.player_names[int(player)]} draws "
            f"{edge.direction.value} ({edge.row}, {edge.col}), closed {closed}"
        )

    print(session.board)
    print("Score:", session.score)


if __name__ == "__main__":
    main()
