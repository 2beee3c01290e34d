"""FastAPI REST interface for the engine."""

import logging
import threading
from typing import Optional

import chess
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from elomate.config import CONFIG, setup_logging
from elomate.core.board import ChessBoard, color_name, parse_color
from elomate.core.search import SearchAborted
from elomate.core.selector import MoveSelector
from elomate.core.strength import MAX_ELO, MIN_ELO, strength_params

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared session board and selector.
session = ChessBoard()
selector = MoveSelector()
_board_lock = threading.Lock()


class FenRequest(BaseModel):
    fen: str


class MoveRequest(BaseModel):
    move: str  # UCI format e.g. "e2e4"


class SelectRequest(BaseModel):
    elo: Optional[int] = None
    ai_color: Optional[str] = None  # defaults to the side to move


class UndoRequest(BaseModel):
    plies: int = Field(default=1, ge=1)


def _board_state():
    board = session.board
    return {
        "fen": board.fen(),
        "turn": color_name(board.turn),
        "legal_moves": session.get_legal_moves(),
        "is_game_over": session.is_game_over(),
        "status": session.status(),
        "moves": session.move_list(),
    }


def _select(req: SelectRequest):
    elo = CONFIG.search.default_elo if req.elo is None else req.elo
    if session.is_game_over():
        raise HTTPException(status_code=400, detail="Game is already over")
    try:
        ai_color = parse_color(req.ai_color) if req.ai_color else session.board.turn
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    params = strength_params(elo)
    try:
        result = selector.select(session.board, elo, ai_color, params)
    except SearchAborted as e:
        logger.warning("Search aborted at elo %d: %s", elo, e)
        raise HTTPException(status_code=503, detail=f"Search aborted: {e}")
    logger.info("Selected %s for %s at elo %d", result.move, color_name(ai_color), elo)
    return elo, params, result


@app.get("/board")
def get_board():
    with _board_lock:
        return _board_state()


@app.post("/position")
def set_position(req: FenRequest):
    with _board_lock:
        try:
            session.set_fen(req.fen)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid FEN: {e}")
        return {"fen": session.get_fen()}


@app.post("/move")
def make_move(req: MoveRequest):
    with _board_lock:
        try:
            chess.Move.from_uci(req.move)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid UCI move: {req.move}")
        if not session.make_move(req.move):
            raise HTTPException(status_code=400, detail=f"Illegal move: {req.move}")
        return {"fen": session.get_fen(), "move": req.move, "status": session.status()}


@app.post("/select")
def select_move(req: SelectRequest = SelectRequest()):
    """Engine choice for the current position; the move is not played."""
    with _board_lock:
        elo, params, result = _select(req)
        return {
            "best_move": result.move.uci() if result.move is not None else None,
            "score": result.score,
            "elo": elo,
            "depth": params.depth,
            "blunder_probability": params.blunder_probability,
            "fen": session.get_fen(),
        }


@app.post("/play")
def play_move(req: SelectRequest = SelectRequest()):
    """Select a move and play it on the session board."""
    with _board_lock:
        _elo, _params, result = _select(req)
        if result.move is None:
            raise HTTPException(status_code=400, detail="No legal move")
        session.make_move(result.move.uci())
        state = _board_state()
        state["move"] = result.move.uci()
        return state


@app.post("/undo")
def undo(req: UndoRequest = UndoRequest()):
    with _board_lock:
        undone = session.undo_move(req.plies)
        return {"undone": undone, "fen": session.get_fen()}


@app.post("/reset")
def reset_board():
    with _board_lock:
        session.reset()
        return {"fen": session.get_fen()}


@app.get("/strength/{elo}")
def get_strength(elo: int):
    params = strength_params(elo)
    return {
        "elo": elo,
        "depth": params.depth,
        "blunder_probability": params.blunder_probability,
        "min_elo": MIN_ELO,
        "max_elo": MAX_ELO,
    }

