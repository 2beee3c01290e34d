import chess

from elomate.config import CONFIG
from elomate.core.board import is_draw


class Evaluator:
    """Material-only evaluation, always from White's point of view."""

    def __init__(self, piece_values=None, mate_score=None):
        cfg = CONFIG.eval
        names = {**cfg.piece_values, **(piece_values or {})}
        self.mate_score = cfg.mate_score if mate_score is None else mate_score
        # Map python-chess piece types to centipawns once
        self.values = {
            pt: names[chess.piece_name(pt).upper()] for pt in chess.PIECE_TYPES
        }

    def evaluate(self, board: chess.Board) -> int:
        # Side to move has been mated
        if board.is_checkmate():
            return -self.mate_score if board.turn == chess.WHITE else self.mate_score
        if is_draw(board):
            return 0

        score = 0
        for piece in board.piece_map().values():
            value = self.values[piece.piece_type]
            score += value if piece.color == chess.WHITE else -value
        return score
