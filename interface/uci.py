"""
UCI front-end. stdout carries protocol lines only; diagnostics go through
logging, which writes to stderr.
"""

import logging
import sys

import chess

from elomate.config import CONFIG, setup_logging
from elomate.core.ordering import order_moves
from elomate.core.search import SearchAborted
from elomate.core.selector import MoveSelector, SearchResult
from elomate.core.strength import MAX_ELO, MIN_ELO, strength_params
from elomate.core.utils import info_line

logger = logging.getLogger(__name__)


class UCI:
    def __init__(self, selector=None, out=None):
        self.selector = selector or MoveSelector()
        self.board = chess.Board()
        self.elo = CONFIG.search.default_elo
        self.out = out or sys.stdout

    def send(self, line: str):
        print(line, file=self.out, flush=True)

    def _parse_position(self, tokens):
        if not tokens:
            return
        if tokens[0] == "startpos":
            board = chess.Board()
            rest = tokens[1:]
        elif tokens[0] == "fen":
            if "moves" in tokens:
                idx = tokens.index("moves")
                fen, rest = " ".join(tokens[1:idx]), tokens[idx:]
            else:
                fen, rest = " ".join(tokens[1:]), []
            try:
                board = chess.Board(fen)
            except ValueError as e:
                logger.warning("Invalid FEN %r: %s", fen, e)
                return
        else:
            logger.warning("Unknown position type: %s", tokens[0])
            return

        if rest and rest[0] == "moves":
            for uci_move in rest[1:]:
                try:
                    move = chess.Move.from_uci(uci_move)
                except ValueError:
                    logger.warning("Malformed move in position command: %s", uci_move)
                    break
                if move not in board.legal_moves:
                    logger.warning("Illegal move in position command: %s", uci_move)
                    break
                board.push(move)
        self.board = board

    def _parse_setoption(self, tokens):
        # setoption name UCI_Elo value 1500
        if "name" not in tokens or "value" not in tokens:
            return
        name = " ".join(tokens[tokens.index("name") + 1:tokens.index("value")])
        value = " ".join(tokens[tokens.index("value") + 1:])
        if name.lower() != "uci_elo":
            logger.info("Ignoring unsupported option %s", name)
            return
        try:
            self.elo = int(value)
        except ValueError:
            logger.warning("Invalid UCI_Elo value: %s", value)

    def _go(self):
        params = strength_params(self.elo)
        try:
            result = self.selector.select(self.board, self.elo, self.board.turn, params)
        except SearchAborted as e:
            # board is already restored; answer with the first ordered move
            logger.warning("Search aborted (%s), falling back to first legal move", e)
            result = SearchResult(order_moves(self.board, self.board.legal_moves)[0], 0)
        if result.move is None:
            self.send("bestmove 0000")
            return
        self.send(info_line(result.depth, result.score, self.selector.search.nodes, result.move))
        self.send(f"bestmove {result.move.uci()}")

    def handle(self, command: str) -> bool:
        """Process one command line. Returns False when the loop should stop."""
        tokens = command.split()
        if not tokens:
            return True
        cmd, args = tokens[0], tokens[1:]
        if cmd == "uci":
            self.send(f"id name {CONFIG.ui.engine_name}")
            self.send(f"id author {CONFIG.ui.engine_author}")
            self.send(f"option name UCI_Elo type spin default {CONFIG.search.default_elo} "
                      f"min {MIN_ELO} max {MAX_ELO}")
            self.send("uciok")
        elif cmd == "isready":
            self.send("readyok")
        elif cmd == "ucinewgame":
            self.board = chess.Board()
        elif cmd == "setoption":
            self._parse_setoption(args)
        elif cmd == "position":
            self._parse_position(args)
        elif cmd == "go":
            self._go()
        elif cmd == "quit":
            return False
        else:
            logger.debug("Unknown command: %s", command)
        return True

    def run(self, lines=None):
        for line in lines if lines is not None else sys.stdin:
            if not self.handle(line.strip()):
                break


def main():
    setup_logging()
    UCI().run()


if __name__ == "__main__":
    main()
