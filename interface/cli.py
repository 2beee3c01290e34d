"""Play against the engine in the terminal."""

import argparse
import logging

from elomate.config import CONFIG, setup_logging
from elomate.core.board import color_name, opposite, parse_color
from elomate.core.strength import strength_params
from elomate.main import Engine

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play chess against EloMate")
    parser.add_argument("--elo", type=int, default=CONFIG.search.default_elo,
                        help="engine strength (default: %(default)s)")
    parser.add_argument("--color", default="white", help="your side: white or black")
    parser.add_argument("--fen", default=None, help="start from this position")
    return parser


def run(engine: Engine, input_fn=input) -> str:
    """Alternate human input and engine replies until the game ends. Returns the final status."""
    while not engine.board.is_game_over():
        engine.print_board()
        print(engine.board.status())
        print("----------------------------")

        if engine.is_ai_turn():
            move = engine.play_ai_move()
            print(f"Engine plays: {move}")
            continue

        command = input_fn("Your move (uci, e.g. e2e4; 'undo', 'quit'): ").strip()
        if command == "quit":
            break
        if command == "undo":
            engine.undo()
            continue
        if not engine.make_move(command):
            print("Illegal move, try again.")

    status = engine.board.status()
    print(status)
    print(" ".join(engine.board.move_list()))
    return status


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging()
    human = parse_color(args.color)
    engine = Engine(elo=args.elo, ai_color=opposite(human))
    if args.fen:
        engine.board.set_fen(args.fen)
    params = strength_params(engine.elo)
    logger.info("Engine plays %s at elo %d (depth %d, blunder %.2f)",
                color_name(engine.ai_color),
                engine.elo, params.depth, params.blunder_probability)
    return run(engine)


if __name__ == "__main__":
    main()
