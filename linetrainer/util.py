import re
from typing import Optional

import chess
from django.utils.timesince import timesince

START_FEN = chess.STARTING_FEN

UCI_REGEX = re.compile(r"^[a-h][1-8][a-h][1-8][qrbn]?$")


class IllegalMoveError(ValueError):
    pass


def plural(unit: str, count: int) -> str:
    return f"{count} {unit}" + ("s" if count != 1 else "") + " ago"


def get_time_ago(now, result_datetime):
    if not result_datetime:
        return "Never"
    if now < result_datetime:
        return "In the future?!"

    delta = now - result_datetime
    seconds = delta.total_seconds()
    days = delta.days

    if seconds < 5 * 60:
        return "just now"
    if seconds < 60 * 60:
        return plural("minute", int(seconds // 60))
    if seconds < 24 * 60 * 60:
        return plural("hour", int(seconds // 3600))
    if days < 14:
        return plural("day", days)
    if days < 60:
        return plural("week", days // 7)
    return timesince(result_datetime, now) + " ago"


def parse_user_move(board: chess.Board, text: str) -> chess.Move:
    """
    Accepts SAN ("Nf3", "exd5", "O-O") or UCI ("g1f3", "e7e8q"). Move
    numbers and trailing !? glyphs are tolerated: "3.Bc4!" works.
    """
    raw = re.sub(r"^\d+\.+\s*", "", text.strip()).rstrip("!?")
    if not raw:
        raise IllegalMoveError("No move given")

    try:
        if UCI_REGEX.match(raw):
            move = chess.Move.from_uci(raw)
            if move not in board.legal_moves:
                raise IllegalMoveError(f"Illegal move: {text.strip()}")
            return move
        return board.parse_san(raw)
    except IllegalMoveError:
        raise
    except ValueError as e:
        raise IllegalMoveError(f"Illegal move: {text.strip()} ({e})") from e


def is_promotion(board: chess.Board, from_square: int, to_square: int) -> bool:
    piece = board.piece_at(from_square)
    if piece is None or piece.piece_type != chess.PAWN:
        return False
    return chess.square_rank(to_square) in (0, 7)


def get_san_history(board: chess.Board) -> list[str]:
    """SAN of every move on the board's stack, replayed from its root"""
    replay = board.root()
    sans = []
    for move in board.move_stack:
        sans.append(replay.san(move))
        replay.push(move)
    return sans


def get_analysis_url(fen: str, color: Optional[str] = None) -> str:
    url = "https://lichess.org/analysis/" + fen.replace(" ", "_")
    if color:
        url += f"?color={'white' if color == 'w' else 'black'}"
    return url
