"""
One drill on one board: the trainee plays their side, the computer answers
from the book (and, in explorer mode, from the analysis engine once the book
runs out).

    trainer   follow one line; any deviation loses
    explorer  follow one line while it lasts, then play on against the engine
    blind     the line is hidden; every line of the trainee's color is live
              until the moves rule it out
"""

from __future__ import annotations

import queue
import random
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Optional

import chess
import chess.pgn

from linetrainer.pgn_tree import MoveNode
from linetrainer.traversal import (
    DEVIATED,
    LINE_COMPLETE,
    OUT_OF_BOOK,
    PERMISSIVE,
    STRICT,
    CandidateSet,
    LineTraversal,
)
from linetrainer.util import (
    IllegalMoveError,
    get_analysis_url,
    get_san_history,
    is_promotion,
    parse_user_move,
)

if TYPE_CHECKING:
    from linetrainer.analysis import AnalysisRequest, Evaluation, UciAnalysisEngine
    from linetrainer.repertoire import OpeningLine, RepertoireIndex

TRAINER = "trainer"
EXPLORER = "explorer"
BLIND = "blind"
MODES = (TRAINER, EXPLORER, BLIND)

Mode = Literal["trainer", "explorer", "blind"]

PLAYING = "playing"
WON = "won"
LOST = "lost"
GAME_OUT_OF_BOOK = "out_of_book"

Status = Literal["playing", "won", "lost", "out_of_book"]

SQUARE_PAIR_REGEX = re.compile(r"([a-h][1-8])([a-h][1-8])")


class SessionError(Exception):
    pass


class PromotionRequired(SessionError):
    def __init__(self, from_square: str, to_square: str):
        self.from_square = from_square
        self.to_square = to_square
        super().__init__(f"{from_square}{to_square} promotes; choose q, r, b or n")


@dataclass
class MoveResult:
    san: str
    status: Status
    message: str = ""
    notice: str = ""
    by_computer: bool = False

    @property
    def finished(self):
        return self.status in (WON, LOST)


class TrainingSession:
    def __init__(
        self,
        line: Optional[OpeningLine] = None,
        *,
        mode: Mode = TRAINER,
        index: Optional[RepertoireIndex] = None,
        player_color: Optional[str] = None,
        analysis: Optional[UciAnalysisEngine] = None,
        rng: Optional[random.Random] = None,
    ):
        if mode not in MODES:
            raise SessionError(f"Unknown mode: {mode}")

        self.mode: Mode = mode
        self.line = line
        self.analysis = analysis
        self.rng = rng or random.Random()
        self.engine_moves: queue.Queue = queue.Queue()

        self.candidates: Optional[CandidateSet] = None
        self.traversal: Optional[LineTraversal] = None

        if mode == BLIND:
            if index is None:
                raise SessionError("Blind mode needs the repertoire index")
            self.player_color = player_color or "w"
            lines = index.for_color(self.player_color)
            if not lines:
                raise SessionError(f"No lines to play with color {self.player_color}")
            self.candidates = CandidateSet(lines, self.rng)
        else:
            if line is None:
                raise SessionError(f"{mode.capitalize()} mode needs a line")
            self.player_color = line.player_color
            policy = PERMISSIVE if mode == EXPLORER else STRICT
            self.traversal = LineTraversal(line, policy, self.rng)

        self.board = chess.Board()
        self.status: Status = PLAYING
        self.pending_request: Optional[AnalysisRequest] = None
        self.evaluation: Optional[Evaluation] = None
        self.evaluation_fen = ""
        self.game_number = 0

        self.start()

    def __str__(self):
        return f"{self.mode}: {self.line_name} ({self.status})"

    @property
    def player_side(self) -> chess.Color:
        return chess.WHITE if self.player_color == "w" else chess.BLACK

    @property
    def current_line(self) -> Optional[OpeningLine]:
        """The line being drilled; in blind mode, the current target's"""
        if self.candidates is not None and self.candidates.target is not None:
            return self.candidates.target.line
        return self.line

    @property
    def line_name(self) -> str:
        if self.mode == BLIND and self.candidates is not None:
            color = "White" if self.player_color == "w" else "Black"
            return f"Blind ({color})"
        return self.line.name if self.line else "Free play"

    @property
    def awaiting_computer(self):
        return self.pending_request is not None

    @property
    def is_over(self):
        return self.status in (WON, LOST) or self.board.is_game_over()

    @property
    def is_player_turn(self):
        return not self.is_over and self.board.turn == self.player_side

    @property
    def is_computer_turn(self):
        return not self.is_over and self.board.turn != self.player_side

    def start(self):
        self.reset()

    def reset(self):
        self.cancel_pending()
        self.board = chess.Board()
        self.status = PLAYING
        self.evaluation = None
        self.game_number += 1

        if self.mode == BLIND and self.candidates is not None:
            self.candidates.reset()
        elif self.traversal is not None:
            self.traversal.reset()
        self._request_evaluation()

    # ---- trainee moves ----

    def play(self, text: str) -> MoveResult:
        self._check_player_turn()
        squares = SQUARE_PAIR_REGEX.fullmatch(text.strip().lower())
        if squares:
            return self.play_squares(*squares.groups())
        move = parse_user_move(self.board, text)
        return self._apply(move)

    def play_squares(
        self, from_square: str, to_square: str, promotion: Optional[str] = None
    ) -> MoveResult:
        """Raises PromotionRequired when a pawn move needs its piece"""
        self._check_player_turn()
        try:
            from_index = chess.parse_square(from_square.lower())
            to_index = chess.parse_square(to_square.lower())
        except ValueError as e:
            raise IllegalMoveError(f"Illegal move: {from_square}{to_square}") from e

        if not promotion and is_promotion(self.board, from_index, to_index):
            if chess.Move(from_index, to_index, chess.QUEEN) in self.board.legal_moves:
                raise PromotionRequired(from_square.lower(), to_square.lower())

        uci = f"{from_square}{to_square}{promotion or ''}".lower()
        return self._apply(parse_user_move(self.board, uci))

    def _check_player_turn(self):
        if self.is_over:
            raise SessionError("Game is over; undo, reset or continue in explorer")
        if self.awaiting_computer or self.board.turn != self.player_side:
            raise SessionError("Not your turn")

    # ---- computer moves ----

    def computer_move(self) -> Optional[MoveResult]:
        """
        Book reply when there is one. In explorer mode an exhausted book
        becomes an engine request and this returns None; the move arrives
        later through receive_best_move().
        """
        if not self.is_computer_turn:
            raise SessionError("Not the computer's turn")
        if self.awaiting_computer:
            return None

        node = self._choose_book_reply()
        if node is not None:
            return self._apply(chess.Move.from_uci(node.uci), by_computer=True)

        if self.mode != EXPLORER:
            self.status = WON
            return MoveResult("", WON, self._success_message(), by_computer=True)

        if self.traversal is not None and self.traversal.state != OUT_OF_BOOK:
            self.traversal.leave_book()
        self.status = GAME_OUT_OF_BOOK
        self._request_best_move()
        return None

    def _choose_book_reply(self) -> Optional[MoveNode]:
        if self.candidates is not None and self.mode == BLIND:
            return self.candidates.choose_reply()
        if self.traversal is not None:
            return self.traversal.choose_reply()
        return None

    def _request_best_move(self):
        if self.analysis is None or not self.analysis.available:
            print("⚠️  No analysis engine; the computer can't move out of book")
            return
        self.pending_request = self.analysis.best_move(
            self.board.fen(), self._queue_engine_move
        )

    def _queue_engine_move(self, request: AnalysisRequest, move: chess.Move):
        # called from the engine's worker thread
        self.engine_moves.put((request, move))

    def wait_for_engine_move(self, timeout: Optional[float] = None):
        """
        Applies the pending engine move once it arrives, dropping stale
        responses on the way. None when nothing is pending or on timeout.
        """
        while self.awaiting_computer:
            try:
                request, move = self.engine_moves.get(timeout=timeout)
            except queue.Empty:
                return None
            result = self.receive_best_move(request, move)
            if result is not None:
                return result
        return None

    def receive_best_move(
        self, request: AnalysisRequest, move: chess.Move
    ) -> Optional[MoveResult]:
        """None means the response was stale and has been dropped"""
        if (
            request is not self.pending_request
            or request.cancelled
            or request.fen != self.board.fen()
        ):
            return None

        self.pending_request = None
        if move not in self.board.legal_moves:
            print(f"❌ Engine suggested an illegal move: {move.uci()}")
            return None
        return self._apply(move, by_computer=True)

    def cancel_pending(self):
        if self.pending_request is not None:
            self.pending_request.cancel()
            self.pending_request = None

    # ---- applying moves ----

    def _apply(self, move: chess.Move, by_computer: bool = False) -> MoveResult:
        san = self.board.san(move)
        self.board.push(move)

        if self.mode == BLIND:
            result = self._after_blind_move(san)
        elif self.mode == EXPLORER:
            result = self._after_explorer_move(san)
        else:
            result = self._after_trainer_move(san)

        result.by_computer = by_computer
        if not result.message and self.board.is_game_over():
            result.message = f"Game over: {self.board.result()}"
        self._request_evaluation()
        return result

    def _after_trainer_move(self, san: str) -> MoveResult:
        state = self.traversal.advance(san)
        if state == DEVIATED:
            self.status = LOST
            message = f"You deviated from the {self.line.name} line!"
            return MoveResult(san, LOST, message)
        if state == LINE_COMPLETE:
            self.status = WON
            return MoveResult(san, WON, self._success_message())
        return MoveResult(san, self.status)

    def _after_explorer_move(self, san: str) -> MoveResult:
        if self.traversal is None or self.traversal.state == OUT_OF_BOOK:
            return MoveResult(san, self.status)

        state = self.traversal.advance(san)
        notice = ""
        if state == OUT_OF_BOOK:
            notice = f"Out of book: left the {self.line.name}"
        elif state == LINE_COMPLETE:
            self.traversal.leave_book()
            notice = f"End of the {self.line.name}; engine play from here"

        if notice:
            self.status = GAME_OUT_OF_BOOK
        return MoveResult(san, self.status, notice=notice)

    def _after_blind_move(self, san: str) -> MoveResult:
        update = self.candidates.advance(san)
        notice = f"Switched to {update.switched_to}" if update.switched_to else ""

        if update.state == DEVIATED:
            self.status = LOST
            return MoveResult(san, LOST, "You deviated from all known openings!")
        if update.state == LINE_COMPLETE:
            self.status = WON
            return MoveResult(san, WON, self._success_message(), notice)
        return MoveResult(san, self.status, notice=notice)

    def _success_message(self):
        if self.mode == BLIND:
            name = self.current_line.name if self.current_line else "?"
            return f"Victory! You completed the hidden opening: {name}"
        return f"You successfully navigated the {self.line.name}!"

    # ---- after the game ----

    def continue_in_explorer(self):
        """Keep playing the finished game against the engine"""
        if self.mode == BLIND and self.candidates is not None:
            self.line = self.current_line or self.line
        self.mode = EXPLORER
        self.candidates = None
        if self.line is not None:
            self.traversal = LineTraversal(self.line, PERMISSIVE, self.rng)
            self.traversal.leave_book()
        else:
            self.traversal = None
        self.status = GAME_OUT_OF_BOOK

    def undo(self) -> bool:
        """
        Takes back the trainee's last move, and the computer's reply after
        it if there was one, so it's the trainee's turn again.
        """
        if not self.board.move_stack:
            return False

        self.cancel_pending()
        popped = 1
        self.board.pop()
        if self.board.move_stack and self.board.turn != self.player_side:
            self.board.pop()
            popped += 1

        if self.mode == BLIND:
            self.candidates.rewind(popped)
            self.status = PLAYING
        elif self.traversal is not None:
            state = self.traversal.resync(get_san_history(self.board))
            if self.mode == EXPLORER:
                if state == LINE_COMPLETE:
                    self.traversal.leave_book()
                    state = OUT_OF_BOOK
                self.status = GAME_OUT_OF_BOOK if state == OUT_OF_BOOK else PLAYING
            elif state == LINE_COMPLETE:
                self.status = WON
            else:
                self.status = PLAYING
        else:
            self.status = GAME_OUT_OF_BOOK

        self._request_evaluation()
        return True

    # ---- helpers for the UI ----

    def continuations(self) -> list[MoveNode]:
        if self.mode == BLIND and self.candidates is not None:
            return self.candidates.continuations()
        if self.traversal is not None:
            return self.traversal.continuations()
        return []

    def hints(self) -> list[tuple[str, str]]:
        if not self.is_player_turn:
            return []
        hints = []
        for node in self.continuations():
            move = chess.Move.from_uci(node.uci)
            hints.append(
                (chess.square_name(move.from_square), chess.square_name(move.to_square))
            )
        return hints

    def pgn(self) -> str:
        game = chess.pgn.Game.from_board(self.board)
        exporter = chess.pgn.StringExporter(headers=False, variations=False)
        return game.accept(exporter)

    def analysis_url(self) -> str:
        return get_analysis_url(self.board.fen(), self.player_color)

    def _request_evaluation(self):
        if self.analysis is None or not self.analysis.available:
            return
        self.evaluation = None
        # set before evaluate(); the callback may fire right away
        self.evaluation_fen = self.board.fen()
        self.analysis.evaluate(self.evaluation_fen, self._on_evaluation)

    def _on_evaluation(self, request: AnalysisRequest, evaluation: Evaluation):
        # worker thread: compare against the fen saved on the caller's thread,
        # never the live board
        if not request.cancelled and request.fen == self.evaluation_fen:
            self.evaluation = evaluation
