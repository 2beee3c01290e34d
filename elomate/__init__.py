"""EloMate: a chess move selector with ELO-tunable playing strength."""

from elomate.core.selector import MoveSelector, SearchResult, select_move
from elomate.core.strength import StrengthParams, strength_params

__version__ = "1.0.0"
