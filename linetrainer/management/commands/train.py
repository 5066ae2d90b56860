import random
import time

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from linetrainer.analysis import UciAnalysisEngine
from linetrainer.models import TrainingResult
from linetrainer.repertoire import build_repertoire
from linetrainer.session import (
    BLIND,
    LOST,
    MODES,
    TRAINER,
    WON,
    PromotionRequired,
    SessionError,
    TrainingSession,
)
from linetrainer.storage import CustomLineStore
from linetrainer.util import IllegalMoveError

ENGINE_TIMEOUT = 30  # seconds
PROMOTION_PROMPT = "Promote to (q, r, b, n) [q]: "

HELP_TEXT = """Enter moves as SAN (Nf3, O-O) or squares (g1f3, e7e8q).
  A bare e7e8 asks which piece to promote to.
  hint     book moves from here
  undo     take back your last move
  reset    start over
  board    show the board
  pgn      the game so far
  url      open the position on lichess
  explore  keep playing a finished game against the engine
  quit"""


class Command(BaseCommand):
    help = "Drill an opening line in the terminal"  # noqa: A003

    def add_arguments(self, parser):
        parser.add_argument("line_id", nargs="?", help="Line to drill (see: lines)")
        parser.add_argument("--mode", choices=MODES, default=TRAINER)
        parser.add_argument(
            "--color",
            choices=["w", "b"],
            default="w",
            help="Your color in blind mode",
        )
        parser.add_argument("--seed", type=int, help="Seed for the computer's choices")
        parser.add_argument(
            "--no-engine", action="store_true", help="Don't start the UCI engine"
        )

    def handle(self, *args, **options):
        index = build_repertoire(store=CustomLineStore())
        mode = options["mode"]

        line = None
        if mode != BLIND:
            if not options["line_id"]:
                raise CommandError(f"{mode.capitalize()} mode needs a line id")
            line = index.get(options["line_id"])
            if line is None:
                raise CommandError(f"No such line: {options['line_id']}")

        analysis = None if options["no_engine"] else UciAnalysisEngine()
        try:
            session = TrainingSession(
                line,
                mode=mode,
                index=index,
                player_color=options["color"],
                analysis=analysis,
                rng=random.Random(options["seed"]),
            )
        except SessionError as e:
            raise CommandError(str(e))

        try:
            self.run(session)
        finally:
            if analysis is not None:
                analysis.quit()

    def run(self, session: TrainingSession):
        self.stdout.write(f"♟️  {session.line_name} ({session.mode})")
        self.stdout.write("Type 'help' for commands\n")

        while True:
            if session.is_computer_turn:
                self.computer_turn(session)

            try:
                text = input(self.prompt(session)).strip()
            except EOFError:
                break
            if not text:
                continue

            command = text.lower()
            if command in ("quit", "q", "exit"):
                break
            elif command == "help":
                self.stdout.write(HELP_TEXT)
            elif command == "undo":
                if not session.undo():
                    self.stdout.write("Nothing to undo")
            elif command == "reset":
                session.reset()
                self.stdout.write(f"🔄 Game {session.game_number}")
            elif command == "hint":
                hints = session.hints()
                arrows = ", ".join(f"{a}➤{b}" for a, b in hints)
                self.stdout.write(f"💡 {arrows or 'No book moves here'}")
            elif command == "board":
                self.stdout.write(str(session.board))
            elif command == "pgn":
                self.stdout.write(session.pgn())
            elif command == "url":
                self.stdout.write(session.analysis_url())
            elif command == "explore":
                if not session.is_over:
                    self.stdout.write("Finish the game first (or undo)")
                else:
                    session.continue_in_explorer()
                    self.stdout.write("🧭 Explorer mode: on against the engine")
            else:
                self.player_turn(session, text)

    def prompt(self, session):
        evaluation = f"[{session.evaluation.label}] " if session.evaluation else ""
        number = session.board.fullmove_number
        dots = "." if session.board.turn else "..."
        return f"{evaluation}{number}{dots} "

    def player_turn(self, session, text):
        try:
            try:
                result = session.play(text)
            except PromotionRequired as e:
                piece = input(PROMOTION_PROMPT).strip().lower()[:1] or "q"
                result = session.play_squares(e.from_square, e.to_square, piece)
        except (IllegalMoveError, SessionError) as e:
            self.stderr.write(f"❌ {e}")
            return
        self.report(session, result)

    def computer_turn(self, session):
        time.sleep(settings.COMPUTER_MOVE_DELAY_MS / 1000)
        result = session.computer_move()
        if result is None and session.awaiting_computer:
            self.stdout.write("🤔 Thinking...")
            result = session.wait_for_engine_move(timeout=ENGINE_TIMEOUT)
            if result is None:
                session.cancel_pending()
                self.stderr.write("🚨 No answer from the engine")
        if result is not None:
            self.report(session, result)
        elif session.is_computer_turn:
            self.stdout.write("⚠️  No computer move here; undo, reset or quit")

    def report(self, session, result):
        if result.san:
            who = "🤖" if result.by_computer else "🙂"
            self.stdout.write(f"{who} {result.san}")
        if result.notice:
            self.stdout.write(f"🔀 {result.notice}")
        if result.message:
            prefix = {WON: "✅ ", LOST: "❌ "}.get(result.status, "")
            self.stdout.write(f"{prefix}{result.message}")
        if result.finished:
            self.record(session, result)
            self.stdout.write("undo, reset, explore or quit?")

    def record(self, session, result):
        line = session.current_line
        TrainingResult.objects.create(
            line_id=line.id if line else f"blind-{session.player_color}",
            line_name=line.name if line else session.line_name,
            mode=session.mode,
            passed=result.status == WON,
            plies=len(session.board.move_stack),
        )
