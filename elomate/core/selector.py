"""
Top-level move decision: full search for the best move, then a
strength-dependent chance of swapping it for a plausible weaker one.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

import chess

from elomate.config import CONFIG
from elomate.core.board import color_name
from elomate.core.evaluator import Evaluator
from elomate.core.ordering import order_moves
from elomate.core.search import INF, SearchEngine
from elomate.core.strength import StrengthParams, strength_params

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    move: Optional[chess.Move]
    score: int
    depth: int = field(default=0, compare=False)  # plies behind `score`


class MoveSelector:
    def __init__(self, evaluator: Optional[Evaluator] = None,
                 search: Optional[SearchEngine] = None, rng=None):
        """
        rng: any object with random(), choice() and randrange() (e.g. random.Random).
        Inject a seeded or stubbed one to make the blunder branch deterministic.
        """
        self.evaluator = evaluator or (search.evaluator if search else Evaluator())
        self.search = search or SearchEngine(self.evaluator)
        self.rng = rng if rng is not None else random.Random()
        self.top_k = CONFIG.search.blunder_top_k

    def search_root(self, board: chess.Board, depth: int, ai_color: chess.Color) -> SearchResult:
        """Best move for `ai_color` by full search; the first maximal move wins ties."""
        best_move = None
        best_score = -INF
        for move in order_moves(board, board.legal_moves):
            score = self.search.score_move(board, move, depth - 1, ai_color)
            if score > best_score:
                best_score = score
                best_move = move
        return SearchResult(best_move, best_score if best_move is not None else 0, depth)

    def shallow_candidates(self, board: chess.Board, ai_color: chess.Color,
                           k: Optional[int] = None) -> List[SearchResult]:
        """
        One-ply material score of every legal move for `ai_color`, best first,
        cut to the top min(k, n). The opponent's reply is deliberately ignored.
        """
        k = self.top_k if k is None else k
        sign = 1 if ai_color == chess.WHITE else -1
        scored = []
        for move in board.legal_moves:
            board.push(move)
            try:
                scored.append(SearchResult(move, sign * self.evaluator.evaluate(board), 1))
            finally:
                board.pop()
        scored.sort(key=lambda r: r.score, reverse=True)
        return scored[:min(k, len(scored))]

    def select(self, board: chess.Board, elo: int, ai_color: chess.Color,
               params: Optional[StrengthParams] = None) -> SearchResult:
        moves = list(board.legal_moves)
        if not moves:
            return SearchResult(None, 0)

        params = params or strength_params(elo)
        self.search.reset_stats()
        best = self.search_root(board, params.depth, ai_color)
        logger.debug(
            "elo=%s depth=%d blunder=%.2f %s best=%s score=%d nodes=%d",
            elo, params.depth, params.blunder_probability, color_name(ai_color),
            best.move, best.score, self.search.nodes,
        )

        if best.move is None:
            fallback = self.rng.choice(moves)
            logger.debug("No scored move, playing random %s", fallback)
            return SearchResult(fallback, 0)

        if self.rng.random() < params.blunder_probability:
            candidates = self.shallow_candidates(board, ai_color)
            pick = candidates[self.rng.randrange(len(candidates))]
            logger.debug("Blunder roll hit: %s instead of %s", pick.move, best.move)
            return pick

        return best

    def select_move(self, board: chess.Board, elo: int, ai_color: chess.Color) -> Optional[chess.Move]:
        return self.select(board, elo, ai_color).move


def select_move(board: chess.Board, elo: int, ai_color: chess.Color, rng=None) -> Optional[chess.Move]:
    """Choose a move for `ai_color` at strength `elo`; None if there is no legal move."""
    return MoveSelector(rng=rng).select_move(board, elo, ai_color)
