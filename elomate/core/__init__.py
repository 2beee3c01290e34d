"""Core engine components: rules adapter, evaluator, ordering, search, strength model, selector."""

from .board import ChessBoard, is_draw, is_terminal, opposite
from .evaluator import Evaluator
from .ordering import order_moves
from .search import INF, MATE_SCORE, SearchEngine, SearchError
from .selector import MoveSelector, SearchResult, select_move
from .strength import StrengthParams, strength_params
