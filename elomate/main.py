from typing import Optional, Tuple

import chess

from elomate.config import CONFIG
from elomate.core.board import ChessBoard, parse_color
from elomate.core.selector import MoveSelector


class Engine:
    """Game session against the engine: one board, one selector, one strength setting."""

    def __init__(self, elo: Optional[int] = None, ai_color: Optional[chess.Color] = None,
                 rng=None, play_ai: bool = True):
        self.board = ChessBoard()
        self.selector = MoveSelector(rng=rng)
        self.elo = CONFIG.search.default_elo if elo is None else elo
        self.ai_color = parse_color(CONFIG.ui.ai_color) if ai_color is None else ai_color
        self.play_ai = play_ai

    def set_elo(self, elo: int):
        self.elo = int(elo)

    def get_best_move(self) -> Tuple[Optional[str], int]:
        """Engine choice for whoever is to move; the board is left untouched."""
        result = self.selector.select(self.board.board, self.elo, self.board.board.turn)
        return (result.move.uci() if result.move is not None else None), result.score

    def is_ai_turn(self) -> bool:
        return self.play_ai and self.board.board.turn == self.ai_color

    def play_ai_move(self) -> Optional[str]:
        """Select and push the AI's move; None when it is not the AI's turn or the game is over."""
        if not self.is_ai_turn() or self.board.is_game_over():
            return None
        move = self.selector.select_move(self.board.board, self.elo, self.ai_color)
        if move is None:
            return None
        self.board.make_move(move.uci())
        return move.uci()

    def make_move(self, move_uci: str) -> bool:
        return self.board.make_move(move_uci)

    def undo(self) -> int:
        # Take back the engine's reply together with the human move
        plies = 2 if self.play_ai and self.board.board.turn != self.ai_color else 1
        return self.board.undo_move(plies)

    def reset(self):
        self.board.reset()

    def print_board(self):
        self.board.print_board()
