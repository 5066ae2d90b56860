"""
Stockfish (or any UCI engine) on a background thread.

Each evaluate()/best_move() call returns an AnalysisRequest and supersedes
the previous request of the same kind. Callbacks fire at most once per
request, from the worker thread, and never for a cancelled request.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field
from typing import Callable, Literal, Optional

import chess
import chess.engine
from django.conf import settings

_request_ids = itertools.count(1)


@dataclass(frozen=True)
class Evaluation:
    kind: Literal["cp", "mate"]
    value: int  # centipawns or moves to mate, white's point of view

    @classmethod
    def from_score(cls, score: chess.engine.PovScore) -> "Evaluation":
        white = score.white()
        if white.is_mate():
            return cls("mate", white.mate())
        return cls("cp", white.score())

    @property
    def label(self):
        if self.kind == "mate":
            return f"M{self.value}" if self.value >= 0 else f"-M{-self.value}"
        return f"{self.value / 100:+.2f}"


@dataclass
class AnalysisRequest:
    fen: str
    request_id: int = field(default_factory=lambda: next(_request_ids))
    cancelled: bool = False

    def cancel(self):
        self.cancelled = True


EvaluationCallback = Callable[[AnalysisRequest, Evaluation], None]
BestMoveCallback = Callable[[AnalysisRequest, chess.Move], None]


class UciAnalysisEngine:
    def __init__(
        self,
        path: Optional[str] = None,
        *,
        skill_level: Optional[int] = None,
        eval_depth: Optional[int] = None,
        move_depth: Optional[int] = None,
    ):
        self.path = path or settings.STOCKFISH_PATH
        self.skill_level = (
            settings.ENGINE_SKILL_LEVEL if skill_level is None else skill_level
        )
        self.eval_depth = eval_depth or settings.ENGINE_EVAL_DEPTH
        self.move_depth = move_depth or settings.ENGINE_MOVE_DEPTH

        self.available = True
        self._engine: Optional[chess.engine.SimpleEngine] = None
        self._lock = threading.Lock()
        self._pending: dict[str, AnalysisRequest] = {}

    def _get_engine(self) -> Optional[chess.engine.SimpleEngine]:
        if self._engine is None and self.available:
            try:
                self._engine = chess.engine.SimpleEngine.popen_uci(self.path)
                self._configure(self._engine)
            except (OSError, chess.engine.EngineError) as e:
                print(f"🚨 Analysis engine unavailable ({self.path}): {e}")
                self.available = False
                self._engine = None
        return self._engine

    def _configure(self, engine):
        if "Skill Level" in engine.options:
            engine.configure({"Skill Level": self.skill_level})

    def set_skill_level(self, level: int):
        self.skill_level = max(0, min(20, level))
        with self._lock:
            if self._engine is not None:
                self._configure(self._engine)

    def _supersede(self, kind: str, fen: str) -> AnalysisRequest:
        previous = self._pending.get(kind)
        if previous is not None:
            previous.cancel()
        request = AnalysisRequest(fen=fen)
        self._pending[kind] = request
        return request

    def evaluate(self, fen: str, on_evaluation: EvaluationCallback) -> AnalysisRequest:
        request = self._supersede("evaluation", fen)
        self._spawn(self._run_evaluation, request, on_evaluation)
        return request

    def best_move(self, fen: str, on_best_move: BestMoveCallback) -> AnalysisRequest:
        request = self._supersede("best_move", fen)
        self._spawn(self._run_best_move, request, on_best_move)
        return request

    def stop(self):
        for request in self._pending.values():
            request.cancel()
        self._pending.clear()

    def quit(self):
        self.stop()
        with self._lock:
            if self._engine is not None:
                try:
                    self._engine.quit()
                except chess.engine.EngineTerminatedError:
                    pass
                self._engine = None

    def _spawn(self, fn, *args):
        threading.Thread(target=fn, args=args, daemon=True).start()

    def _run_evaluation(self, request: AnalysisRequest, callback: EvaluationCallback):
        with self._lock:
            if request.cancelled:
                return
            engine = self._get_engine()
            if engine is None:
                return
            try:
                info = engine.analyse(
                    chess.Board(request.fen), chess.engine.Limit(depth=self.eval_depth)
                )
            except chess.engine.EngineError as e:
                print(f"❌ Evaluation failed for {request.fen}: {e}")
                return

        score = info.get("score")
        if score is not None and not request.cancelled:
            callback(request, Evaluation.from_score(score))

    def _run_best_move(self, request: AnalysisRequest, callback: BestMoveCallback):
        with self._lock:
            if request.cancelled:
                return
            engine = self._get_engine()
            if engine is None:
                return
            try:
                result = engine.play(
                    chess.Board(request.fen), chess.engine.Limit(depth=self.move_depth)
                )
            except chess.engine.EngineError as e:
                print(f"❌ Best move failed for {request.fen}: {e}")
                return

        if result.move is not None and not request.cancelled:
            callback(request, result.move)
