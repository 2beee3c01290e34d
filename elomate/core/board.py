"""Rules-engine adapter over python-chess plus a game session with move history."""

from typing import List, Optional

import chess


def opposite(color: chess.Color) -> chess.Color:
    return not color


def color_name(color: chess.Color) -> str:
    return "white" if color == chess.WHITE else "black"


def parse_color(name: str) -> chess.Color:
    """Parse 'white'/'w'/'black'/'b' (any case) into a chess.Color."""
    key = name.strip().lower()
    if key in ("white", "w"):
        return chess.WHITE
    if key in ("black", "b"):
        return chess.BLACK
    raise ValueError(f"Unknown color: {name!r}")


def is_draw(board: chess.Board) -> bool:
    """Drawn by rule: stalemate, insufficient material, fifty moves or threefold repetition."""
    return (
        board.is_stalemate()
        or board.is_insufficient_material()
        or board.is_fifty_moves()
        or board.is_repetition(3)
    )


def is_terminal(board: chess.Board) -> bool:
    return board.is_checkmate() or is_draw(board)


class ChessBoard:
    def __init__(self, fen: Optional[str] = None):
        """Initialize from FEN or the standard starting position."""
        self.board = chess.Board(fen) if fen else chess.Board()
        self.move_history: List[str] = []

    def reset(self):
        """Reset to the initial position."""
        self.board.reset()
        self.move_history.clear()

    def set_fen(self, fen: str):
        """Set board state from a FEN string. Raises ValueError on bad input."""
        self.board.set_fen(fen)
        self.move_history.clear()

    def get_fen(self) -> str:
        """Return the current FEN."""
        return self.board.fen()

    def make_move(self, move_str: str) -> bool:
        """Push a UCI move (e.g. 'e2e4'). Returns True if legal."""
        try:
            move = chess.Move.from_uci(move_str)
        except ValueError:
            return False
        if move not in self.board.legal_moves:
            return False
        self.board.push(move)
        self.move_history.append(move_str)
        return True

    def undo_move(self, plies: int = 1) -> int:
        """Pop up to `plies` moves. Returns how many were actually undone."""
        undone = 0
        while undone < plies and self.move_history:
            self.board.pop()
            self.move_history.pop()
            undone += 1
        return undone

    def get_legal_moves(self) -> List[str]:
        """Return legal moves as UCI strings."""
        return [m.uci() for m in self.board.legal_moves]

    def is_game_over(self) -> bool:
        return is_terminal(self.board)

    def status(self) -> str:
        """Human readable one-line game status."""
        b = self.board
        if b.is_checkmate():
            winner = "Black" if b.turn == chess.WHITE else "White"
            return f"Checkmate. {winner} wins"
        if is_draw(b):
            return "Draw"
        status = f"{color_name(b.turn).capitalize()} to move"
        if b.is_check():
            status += " - check"
        return status

    def move_list(self) -> List[str]:
        """Numbered SAN pairs for the moves played since the session start."""
        replay = self.board.root()
        sans = []
        for move in self.board.move_stack:
            sans.append(replay.san(move))
            replay.push(move)

        lines = []
        number = self.board.root().fullmove_number
        start = 0
        if self.board.root().turn == chess.BLACK and sans:
            lines.append(f"{number}... {sans[0]}")
            number += 1
            start = 1
        for i in range(start, len(sans), 2):
            pair = " ".join(sans[i:i + 2])
            lines.append(f"{number}. {pair}")
            number += 1
        return lines

    def print_board(self):
        """Print ASCII representation."""
        print(self.board)
