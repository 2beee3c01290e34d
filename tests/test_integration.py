"""
Integration test suite for EloMate.

Tests components working together end-to-end:
- Full games (engine vs engine at fixed and mixed strengths)
- FastAPI REST API
- UCI protocol handling
- Terminal play loop
"""

import io
import random

import chess
import pytest
from chess import polyglot

from conftest import StubRng
from elomate.core.board import is_terminal
from elomate.core.search import MATE_SCORE, SearchEngine
from elomate.core.selector import MoveSelector
from elomate.main import Engine

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 0 1"


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE VS ENGINE
# ════════════════════════════════════════════════════════════════════════════


class TestFullGame:
    """Engines play real games without illegal moves or leaked state."""

    def test_weak_vs_weak_plays_legal_moves(self):
        selector = MoveSelector(rng=random.Random(1))
        board = chess.Board()
        for _ in range(40):
            if is_terminal(board):
                break
            key = polyglot.zobrist_hash(board)
            move = selector.select_move(board, 600, board.turn)
            assert polyglot.zobrist_hash(board) == key
            assert move in board.legal_moves
            board.push(move)
        assert len(board.move_stack) > 10

    def test_stronger_side_converts_queen_up(self):
        """Queen-up White at depth 2 never gives the queen away for free."""
        selector = MoveSelector(rng=StubRng(1.0))
        board = chess.Board("4k3/8/8/8/8/8/8/3QK3 w - - 0 1")
        for _ in range(10):
            if is_terminal(board):
                break
            side = board.turn
            board.push(selector.select_move(board, 1000, side))
        assert chess.QUEEN in [p.piece_type for p in board.piece_map().values()]

    def test_mixed_strengths_alternate_colors(self):
        selector = MoveSelector(rng=random.Random(3))
        board = chess.Board()
        for i in range(8):
            expected = chess.WHITE if i % 2 == 0 else chess.BLACK
            assert board.turn == expected
            elo = 500 if expected == chess.WHITE else 1200
            board.push(selector.select_move(board, elo, expected))

    def test_mate_in_one_at_every_strength_without_blunder(self):
        board = chess.Board("6k1/5ppp/8/8/8/8/8/R3K3 w - - 0 1")
        for elo in (500, 1000, 1500):
            result = MoveSelector(rng=StubRng(1.0)).select(board, elo, chess.WHITE)
            assert result.move == chess.Move.from_uci("a1a8")
            assert result.score == MATE_SCORE


# ════════════════════════════════════════════════════════════════════════════
#  REST API
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    """Tests FastAPI REST API endpoints."""

    @pytest.fixture(autouse=True)
    def setup_client(self, monkeypatch):
        from fastapi.testclient import TestClient
        from interface import api

        self.client = TestClient(api.app)
        api.session.reset()
        monkeypatch.setattr(api.selector, "rng", StubRng(1.0))

    def test_get_board_initial(self):
        data = self.client.get("/board").json()
        assert data["fen"] == chess.STARTING_FEN
        assert data["turn"] == "white"
        assert data["is_game_over"] is False
        assert data["status"] == "White to move"
        assert len(data["legal_moves"]) == 20

    def test_post_move_valid(self):
        response = self.client.post("/move", json={"move": "e2e4"})
        assert response.status_code == 200
        assert response.json()["status"] == "Black to move"

    def test_post_move_illegal(self):
        assert self.client.post("/move", json={"move": "e2e5"}).status_code == 400

    def test_post_move_invalid_format(self):
        assert self.client.post("/move", json={"move": "zzzz"}).status_code == 400

    def test_set_position_invalid(self):
        assert self.client.post("/position", json={"fen": "invalid"}).status_code == 400

    def test_select_does_not_play(self):
        response = self.client.post("/select", json={"elo": 500})
        assert response.status_code == 200
        data = response.json()
        assert data["depth"] == 1
        assert data["blunder_probability"] == 0.7
        assert chess.Move.from_uci(data["best_move"]) in chess.Board().legal_moves
        assert data["fen"] == chess.STARTING_FEN

    def test_select_invalid_color(self):
        response = self.client.post("/select", json={"elo": 500, "ai_color": "green"})
        assert response.status_code == 400

    def test_select_game_over_returns_400(self):
        self.client.post("/position", json={"fen": FOOLS_MATE})
        assert self.client.post("/select", json={"elo": 500}).status_code == 400

    def test_play_flips_turn(self):
        self.client.post("/move", json={"move": "e2e4"})
        data = self.client.post("/play", json={"elo": 500}).json()
        assert data["turn"] == "white"
        assert data["moves"][0].startswith("1. e4 ")

    def test_undo_and_reset(self):
        self.client.post("/move", json={"move": "e2e4"})
        self.client.post("/move", json={"move": "e7e5"})
        data = self.client.post("/undo", json={"plies": 2}).json()
        assert data["undone"] == 2
        assert data["fen"] == chess.STARTING_FEN
        self.client.post("/move", json={"move": "d2d4"})
        assert self.client.post("/reset").json()["fen"] == chess.STARTING_FEN

    def test_undo_rejects_zero_plies(self):
        assert self.client.post("/undo", json={"plies": 0}).status_code == 422

    def test_select_node_limit_returns_503(self, monkeypatch):
        from interface import api

        monkeypatch.setattr(api.selector.search, "node_limit", 10)
        response = self.client.post("/select", json={"elo": 1500})
        assert response.status_code == 503
        assert self.client.get("/board").json()["fen"] == chess.STARTING_FEN

    def test_strength_endpoint(self):
        data = self.client.get("/strength/2500").json()
        assert data["depth"] == 6
        assert data["blunder_probability"] == 0.02


# ════════════════════════════════════════════════════════════════════════════
#  UCI
# ════════════════════════════════════════════════════════════════════════════


class TestUCIIntegration:
    def _make_uci(self):
        from interface.uci import UCI

        self.out = io.StringIO()
        return UCI(selector=MoveSelector(rng=StubRng(1.0)), out=self.out)

    def out_buffer(self):
        self.out = io.StringIO()
        return self.out

    def lines(self):
        return self.out.getvalue().splitlines()

    def test_uci_handshake(self):
        uci = self._make_uci()
        uci.handle("uci")
        lines = self.lines()
        assert lines[-1] == "uciok"
        assert any(line.startswith("option name UCI_Elo type spin") for line in lines)

    def test_isready(self):
        uci = self._make_uci()
        uci.handle("isready")
        assert self.lines() == ["readyok"]

    def test_setoption_elo(self):
        uci = self._make_uci()
        uci.handle("setoption name UCI_Elo value 2100")
        assert uci.elo == 2100
        uci.handle("setoption name UCI_Elo value strong")
        assert uci.elo == 2100

    def test_position_startpos_moves(self):
        uci = self._make_uci()
        uci._parse_position(["startpos", "moves", "e2e4", "e7e5"])
        expected = chess.Board()
        expected.push_uci("e2e4")
        expected.push_uci("e7e5")
        assert uci.board.fen() == expected.fen()

    def test_position_fen_with_moves(self):
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
        uci = self._make_uci()
        uci._parse_position(["fen"] + fen.split() + ["moves", "e7e5"])
        expected = chess.Board(fen)
        expected.push_uci("e7e5")
        assert uci.board.fen() == expected.fen()

    def test_position_invalid_fen_no_crash(self):
        uci = self._make_uci()
        old_fen = uci.board.fen()
        uci._parse_position(["fen", "invalid", "fen", "string"])
        assert uci.board.fen() == old_fen

    def test_position_illegal_moves_stop(self):
        uci = self._make_uci()
        uci._parse_position(["startpos", "moves", "e2e4", "e2e5"])
        expected = chess.Board()
        expected.push_uci("e2e4")
        assert uci.board.fen() == expected.fen()

    def test_go_returns_bestmove(self):
        uci = self._make_uci()
        uci.handle("setoption name UCI_Elo value 500")
        uci.handle("position startpos moves e2e4")
        uci.handle("go")
        lines = self.lines()
        assert lines[0].startswith("info depth 1 score cp ")
        best = lines[-1].split()[1]
        assert chess.Move.from_uci(best) in uci.board.legal_moves

    def test_go_without_moves(self):
        uci = self._make_uci()
        uci.handle("position fen " + FOOLS_MATE)
        uci.handle("go")
        assert self.lines() == ["bestmove 0000"]

    def test_go_answers_when_node_limit_hit(self):
        from interface.uci import UCI

        selector = MoveSelector(search=SearchEngine(node_limit=10), rng=StubRng(1.0))
        uci = UCI(selector=selector, out=self.out_buffer())
        uci.run(["position startpos", "go", "isready", "quit"])
        lines = self.lines()
        assert lines[-1] == "readyok"
        best = lines[-2].split()
        assert best[0] == "bestmove"
        assert chess.Move.from_uci(best[1]) in chess.Board().legal_moves
        assert uci.board.fen() == chess.STARTING_FEN

    def test_go_reports_blunder_depth(self):
        uci = self._make_uci()
        uci.selector.rng = StubRng(0.0)
        uci.handle("setoption name UCI_Elo value 1200")
        uci.handle("position fen 4k3/8/2p5/3p4/8/8/8/3QK3 w - - 0 1")
        uci.handle("go")
        lines = self.lines()
        assert lines[0].startswith("info depth 1 score cp 800 ")
        assert lines[-1] == "bestmove d1d5"

    def test_run_stops_at_quit(self):
        uci = self._make_uci()
        uci.run(["isready", "quit", "isready"])
        assert self.lines() == ["readyok"]


# ════════════════════════════════════════════════════════════════════════════
#  TERMINAL LOOP
# ════════════════════════════════════════════════════════════════════════════


class TestCLIIntegration:
    def test_scripted_session(self, capsys):
        from interface.cli import run

        engine = Engine(elo=500, ai_color=chess.BLACK, rng=StubRng(1.0))
        commands = iter(["e2e4", "zzzz", "undo", "quit"])
        status = run(engine, input_fn=lambda prompt: next(commands))
        out = capsys.readouterr().out
        assert "Engine plays:" in out
        assert "Illegal move, try again." in out
        assert status == "White to move"
        assert engine.board.get_fen() == chess.STARTING_FEN

    def test_main_on_finished_game(self, capsys):
        from interface.cli import main

        status = main(["--elo", "500", "--color", "black", "--fen", FOOLS_MATE])
        assert status == "Checkmate. Black wins"
