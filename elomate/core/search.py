import logging
from typing import Optional

import chess
from chess import polyglot

from elomate.config import CONFIG
from elomate.core.board import is_terminal, opposite
from elomate.core.evaluator import Evaluator
from elomate.core.ordering import order_moves

logger = logging.getLogger(__name__)

INF = 10**9
MATE_SCORE = CONFIG.eval.mate_score


class SearchError(Exception):
    """The rules engine broke a contract the search relies on."""


class PositionCorruptedError(SearchError):
    """A push/pop pair did not restore the position."""


class SearchAborted(SearchError):
    """The node budget was exhausted before the search finished."""


class SearchEngine:
    def __init__(self, evaluator: Optional[Evaluator] = None, debug: Optional[bool] = None,
                 node_limit: Optional[int] = None):
        """
        evaluator.evaluate(board) must return an int (centipawns),
        positive if White is better, negative if Black is better.
        debug: check the position hash around every push/pop pair.
        node_limit: abort with SearchAborted after this many nodes (None = unbounded).
        """
        self.evaluator = evaluator or Evaluator()
        self.debug = CONFIG.search.debug_purity_check if debug is None else debug
        self.node_limit = CONFIG.search.node_limit if node_limit is None else node_limit
        self.nodes = 0

    def reset_stats(self):
        self.nodes = 0

    def leaf_score(self, board: chess.Board, perspective: chess.Color) -> int:
        """Static evaluation converted from White-absolute to `perspective`."""
        score = self.evaluator.evaluate(board)
        return score if perspective == chess.WHITE else -score

    # -------------------------
    # Core negamax (alpha-beta)
    # -------------------------
    def negamax(self, board: chess.Board, depth: int, alpha: int, beta: int,
                perspective: chess.Color) -> int:
        """
        Best score achievable for `perspective` from this node, searching
        `depth` plies. The board is restored before returning, including on
        a beta cutoff.
        """
        self.nodes += 1
        if self.node_limit is not None and self.nodes > self.node_limit:
            raise SearchAborted(f"node limit {self.node_limit} exceeded")

        if depth <= 0 or is_terminal(board):
            return self.leaf_score(board, perspective)

        moves = order_moves(board, board.legal_moves)
        if not moves:
            raise SearchError(f"non-terminal position without legal moves: {board.fen()}")

        best = -INF
        for move in moves:
            token = self._before_push(board)
            board.push(move)
            try:
                score = -self.negamax(board, depth - 1, -beta, -alpha, opposite(perspective))
            finally:
                board.pop()
            self._after_pop(board, token, move)

            if score > best:
                best = score
            if best > alpha:
                alpha = best
            if alpha >= beta:
                break  # beta cutoff

        return best

    def score_move(self, board: chess.Board, move: chess.Move, depth: int,
                   perspective: chess.Color) -> int:
        """Score of playing `move` for `perspective`, searched `depth` plies past it."""
        token = self._before_push(board)
        board.push(move)
        try:
            score = -self.negamax(board, depth, -INF, INF, opposite(perspective))
        finally:
            board.pop()
        self._after_pop(board, token, move)
        return score

    # -------------------------
    # Debug purity check
    # -------------------------
    def _before_push(self, board: chess.Board):
        if not self.debug:
            return None
        return polyglot.zobrist_hash(board), len(board.move_stack)

    def _after_pop(self, board: chess.Board, token, move: chess.Move):
        if token is None:
            return
        if (polyglot.zobrist_hash(board), len(board.move_stack)) != token:
            logger.error("Position changed across %s: %s", move.uci(), board.fen())
            raise PositionCorruptedError(f"undo of {move.uci()} did not restore the position")
