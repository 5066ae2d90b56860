import uuid

import chess
import pytest

from linetrainer.openings import BUILTIN_LINES
from linetrainer.repertoire import (
    InvalidLineError,
    LineDescriptor,
    build_line,
    build_repertoire,
    slugify,
)


def count_color(color):
    return len([d for d in BUILTIN_LINES if d.player_color == color])


class MemoryStore:
    def __init__(self, stored=None):
        self.stored = list(stored or [])
        self.saved = None

    def load(self):
        return list(self.stored)

    def save(self, lines):
        self.saved = [line.to_descriptor().to_dict() for line in lines]


def test_every_builtin_line_builds(repertoire):
    assert len(repertoire) == len(BUILTIN_LINES) == 18
    for descriptor in BUILTIN_LINES:
        line = repertoire.get(descriptor.id)
        assert line is not None, descriptor.id
        assert line.roots, descriptor.id
        assert not line.is_custom


def test_builtin_lines_end_where_their_pgn_does(repertoire):
    # no builtin loses moves to truncation
    for line in repertoire:
        board = chess.Board()
        for node in line.roots[0].mainline():
            board.push_san(node.san)
        expected = len([t for t in line.pgn.split() if not t.endswith(".")])
        assert len(board.move_stack) == expected, line.id


def test_for_color(repertoire):
    black = repertoire.for_color("b")
    white = repertoire.for_color("w")

    assert len(black) == count_color("b") == 9
    assert len(white) == count_color("w") == 9
    assert all(line.player_side == chess.BLACK for line in black)
    assert "fried-liver" in repertoire
    assert "sicilian-najdorf" in {line.id for line in black}


def test_add_custom_line_assigns_an_id(repertoire):
    line = repertoire.add(LineDescriptor(name="My Vienna", pgn="1. e4 e5 2. Nc3"))

    assert uuid.UUID(line.id)
    assert line.is_custom
    assert line.description == "Custom opening"
    assert repertoire.get(line.id) is line
    assert repertoire.all()[-1] is line
    assert repertoire.custom_lines() == [line]


@pytest.mark.parametrize("pgn", ["", "1. e4 (1. d4", "1. e5", "not chess"])
def test_invalid_pgn_is_rejected(repertoire, pgn):
    with pytest.raises(InvalidLineError, match="Invalid PGN"):
        repertoire.add(LineDescriptor(name="Broken", pgn=pgn))
    assert len(repertoire) == len(BUILTIN_LINES)


def test_bad_color_and_missing_name_are_rejected():
    with pytest.raises(InvalidLineError):
        build_line(LineDescriptor(name="x", pgn="1. e4", player_color="white"))
    with pytest.raises(InvalidLineError):
        build_line(LineDescriptor(name="  ", pgn="1. e4"))


def test_duplicate_id_is_rejected(repertoire):
    with pytest.raises(InvalidLineError, match="already exists"):
        repertoire.add(LineDescriptor(id="fried-liver", name="Again", pgn="1. e4"))


def test_builtin_lines_cannot_be_deleted(repertoire):
    assert repertoire.delete("fried-liver") is False
    assert repertoire.delete("no-such-line") is False
    assert "fried-liver" in repertoire


def test_custom_lines_are_mirrored_to_the_store():
    store = MemoryStore()
    index = build_repertoire(store=store)

    line = index.add(LineDescriptor(name="Mine", pgn="1. d4 d5", player_color="b"))
    assert store.saved == [
        {
            "id": line.id,
            "name": "Mine",
            "description": "Custom opening",
            "pgn": "1. d4 d5",
            "playerColor": "b",
            "difficulty": "Medium",
            "type": "Opening",
        }
    ]

    assert index.delete(line.id) is True
    assert store.saved == []


def test_stored_lines_are_loaded_after_builtins(capsys):
    store = MemoryStore(
        [
            LineDescriptor(id="mine", name="Mine", pgn="1. c4 e5"),
            LineDescriptor(id="broken", name="Broken", pgn="1. c4 ((("),
        ]
    )
    index = build_repertoire(store=store)

    assert len(index) == len(BUILTIN_LINES) + 1
    assert index.all()[-1].id == "mine"
    assert index.get("mine").is_custom
    assert "broken" not in index
    assert "Skipping stored line" in capsys.readouterr().out


def test_descriptor_dict_round_trip():
    descriptor = LineDescriptor(
        id="x",
        name="X",
        pgn="1. e4",
        player_color="b",
        difficulty="Hard",
        type_="Trap",
        description="d",
    )
    data = descriptor.to_dict()

    assert data["playerColor"] == "b"
    assert data["type"] == "Trap"
    assert LineDescriptor.from_dict(data) == descriptor


def test_categorized_builtins(repertoire):
    categories = repertoire.categorized()

    assert [c.id for c in categories] == ["kings-pawn", "queens-pawn"]
    kings_pawn = categories[0]
    group_names = [g.name for g in kings_pawn.groups]
    assert "Fried Liver Attack" in group_names
    assert "Sicilian Defense" in group_names

    sicilian = next(g for g in kings_pawn.groups if g.id == "sicilian-defense")
    assert [line.id for line in sicilian.lines] == ["sicilian-najdorf"]


def test_categorized_order_includes_flank_and_other(repertoire):
    repertoire.add(LineDescriptor(name="Grob", pgn="1. g4 d5"), persist=False)
    repertoire.add(LineDescriptor(name="English: Four Knights", pgn="1. c4 e5"))
    repertoire.add(LineDescriptor(name="Reti", pgn="1. Nf3 d5"))
    repertoire.add(LineDescriptor(name="English: Symmetrical", pgn="1. c4 c5"))

    categories = repertoire.categorized()
    assert [c.id for c in categories] == [
        "kings-pawn",
        "queens-pawn",
        "english",
        "reti",
        "other",
    ]
    english = categories[2]
    assert [g.name for g in english.groups] == ["English"]
    assert len(english.groups[0].lines) == 2


def test_slugify():
    assert slugify("King's Indian Defense") == "king-s-indian-defense"
    assert slugify("  Caro-Kann  ") == "caro-kann"
