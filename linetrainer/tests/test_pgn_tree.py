import chess
import pytest

from linetrainer.pgn_tree import (
    MovetextError,
    build_tree,
    forest_to_movetext,
    format_tree,
    parse_movetext,
    parse_pgn_to_tree,
    tokenize_movetext,
    walk_forest,
)
from linetrainer.tests import (
    child_sans,
    mainline_sans,
    same_forest,
    walk_with_parents,
)


def test_plain_line_is_a_single_chain():
    roots = parse_pgn_to_tree("1. e4 e5 2. Nf3 Nc6 3. Bc4")

    assert len(roots) == 1
    assert mainline_sans(roots) == ["e4", "e5", "Nf3", "Nc6", "Bc4"]
    assert all(len(node.children) <= 1 for node in walk_forest(roots))
    assert len(list(walk_forest(roots))) == 5


def test_move_numbers_and_colors():
    roots = parse_pgn_to_tree("1. e4 e5 2. Nf3")
    e4, e5, nf3 = roots[0].mainline()

    assert (e4.move_number, e4.color) == (1, chess.WHITE)
    assert (e5.move_number, e5.color) == (1, chess.BLACK)
    assert (nf3.move_number, nf3.color) == (2, chess.WHITE)
    assert e5.move_verbose == "1...e5"
    assert nf3.uci == "g1f3"


def test_variation_makes_siblings():
    roots = parse_pgn_to_tree("1. e4 e5 (1... c5 2. Nf3) 2. Nf3")

    e4 = roots[0]
    assert child_sans(e4) == ["e5", "c5"]
    e5, c5 = e4.children
    assert child_sans(e5) == ["Nf3"]
    assert child_sans(c5) == ["Nf3"]
    assert e5.children[0].fen != c5.children[0].fen


def test_variation_on_first_move_gives_several_roots():
    roots = parse_pgn_to_tree("1. e4 (1. d4 d5) (1. c4) e5")

    assert [root.san for root in roots] == ["e4", "d4", "c4"]
    assert child_sans(roots[0]) == ["e5"]
    assert child_sans(roots[1]) == ["d5"]
    assert roots[2].is_leaf


def test_nested_variations():
    roots = parse_pgn_to_tree(
        "1. e4 e5 2. Nf3 (2. f4 exf4 (2... d5 3. exd5) 3. Nf3) Nc6"
    )
    e5 = roots[0].children[0]
    assert child_sans(e5) == ["Nf3", "f4"]
    f4 = e5.children[1]
    assert child_sans(f4) == ["exf4", "d5"]
    assert child_sans(f4.children[1]) == ["exd5"]


def test_every_node_replays_from_its_parent():
    roots = parse_pgn_to_tree(
        "1. e4 e5 2. Nf3 (2. f4 exf4 3. Nf3 g5) 2... Nc6 3. Bb5 (3. Bc4 Bc5) a6 "
        "4. O-O"
    )
    for parent_fen, node in walk_with_parents(roots):
        board = chess.Board(parent_fen)
        board.push_san(node.san)
        assert board.fen() == node.fen


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "\n\t",
        "1. e4 (1. d4",
        "1. e4 e5)",
        "1. e4 e5 ((2. Nf3)",
        "1. e4 {unclosed comment",
        "(1. e4)",
        "1. e4 @ e5",
        "1. e4 hello",
    ],
)
def test_malformed_or_empty_text_gives_empty_forest(text):
    assert parse_pgn_to_tree(text) == []


def test_tokenizer_reports_what_went_wrong():
    with pytest.raises(MovetextError, match="Unbalanced"):
        tokenize_movetext("1. e4 (1. d4")
    with pytest.raises(MovetextError, match="inside a variation"):
        tokenize_movetext("1. e4 (1. d4 1-0)")


def test_parse_error_is_printed(capsys):
    assert parse_movetext("1. e4 e5)") == []
    assert "PGN parse error" in capsys.readouterr().out


def test_comments_attach_to_the_move_before_them():
    roots = parse_pgn_to_tree(
        "{Before anything} 1. e4 {Best by test} e5 ; rest of line\n2. Nf3 {}"
    )
    e4, e5, nf3 = roots[0].mainline()

    assert e4.comment == "Before anything Best by test"
    assert e5.comment == ""
    assert nf3.comment == ""


def test_nags_glyphs_and_glued_numbers_are_ignored():
    roots = parse_pgn_to_tree("1.e4! e5?! $1 2.Nf3!! 2...Nc6 $14 3.Bb5")
    assert mainline_sans(roots) == ["e4", "e5", "Nf3", "Nc6", "Bb5"]


def test_tag_pairs_are_skipped():
    pgn = '[Event "Casual"]\n[White "Someone"]\n\n1. d4 d5 2. c4 *'
    assert mainline_sans(parse_pgn_to_tree(pgn)) == ["d4", "d5", "c4"]


def test_tag_after_moves_is_malformed():
    assert parse_pgn_to_tree('1. e4 [Event "late"] e5') == []


def test_parsing_stops_at_result():
    roots = parse_pgn_to_tree("1. e4 e5 1-0 2. Nf3 Nc6")
    assert mainline_sans(roots) == ["e4", "e5"]


def test_illegal_move_truncates_its_branch(capsys):
    roots = parse_pgn_to_tree("1. e4 e5 2. Ke3 Nc6")

    assert mainline_sans(roots) == ["e4", "e5"]
    assert "Dropping branch at Ke3" in capsys.readouterr().out


def test_illegal_move_in_variation_leaves_the_rest():
    roots = parse_pgn_to_tree("1. e4 e5 (1... Ke7 2. d4) 2. Nf3 Nc6")

    assert child_sans(roots[0]) == ["e5"]
    assert mainline_sans(roots) == ["e4", "e5", "Nf3", "Nc6"]


def test_illegal_first_move_gives_empty_forest():
    assert parse_pgn_to_tree("1. e5 d4") == []


def test_same_move_in_variation_is_merged():
    roots = parse_pgn_to_tree("1. e4 e5 (1... e5 2. d4) 2. Nf3")

    e4 = roots[0]
    assert child_sans(e4) == ["e5"]
    assert child_sans(e4.children[0]) == ["Nf3", "d4"]


def test_san_is_made_canonical():
    roots = parse_pgn_to_tree("1. e4 e5 2. Ngf3 Nbc6 3. 0-0-0")
    assert mainline_sans(roots) == ["e4", "e5", "Nf3", "Nc6"]

    roots = parse_pgn_to_tree("1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 4. 0-0")
    assert mainline_sans(roots)[-1] == "O-O"


def test_promotion_and_mate_notation():
    roots = parse_pgn_to_tree(
        "1. d4 d5 2. c4 e5 3. dxe5 d4 4. e3 Bb4+ 5. Bd2 dxe3 6. Bxb4 exf2+ "
        "7. Ke2 fxg1=N+ 8. Ke1 Qh4+"
    )
    sans = mainline_sans(roots)
    assert "fxg1=N+" in sans
    assert sans[-1] == "Qh4+"

    legal = parse_pgn_to_tree(
        "1. e4 e5 2. Nf3 d6 3. Bc4 Bg4 4. Nc3 g6 5. Nxe5 Bxd1 6. Bxf7+ Ke7 7. Nd5#"
    )
    assert mainline_sans(legal)[-1] == "Nd5#"


def test_building_twice_gives_equal_forests():
    pgn = "1. e4 e5 (1... c5 2. Nf3 d6) 2. Nf3 {main} Nc6 (2... d6 3. d4) 3. Bb5"
    assert same_forest(parse_pgn_to_tree(pgn), parse_pgn_to_tree(pgn))
    assert not same_forest(parse_pgn_to_tree(pgn), parse_pgn_to_tree(pgn + " a6"))


def test_build_from_another_starting_position():
    board = chess.Board()
    board.push_san("e4")
    roots = build_tree(parse_movetext("1... e5 2. Nf3"), board)

    assert mainline_sans(roots) == ["e5", "Nf3"]
    assert roots[0].color == chess.BLACK
    assert board.move_stack == [chess.Move.from_uci("e2e4")]


def test_deep_nesting_does_not_recurse():
    depth = 3000
    pgn = "1. e4" + " (1. d4" * depth + ")" * depth
    roots = parse_pgn_to_tree(pgn)

    assert [root.san for root in roots] == ["e4", "d4"]


def test_long_line_does_not_recurse():
    shuffle = "Nf3 Nf6 Ng1 Ng8 " * 300
    roots = parse_pgn_to_tree(shuffle)

    assert len(list(roots[0].walk())) == 1200
    assert len(roots[0].mainline()) == 1200
    assert forest_to_movetext(roots).startswith("1. Nf3 Nf6 2. Ng1 Ng8 3. Nf3")
    assert len(format_tree(roots).splitlines()) == 1

    assert same_forest(roots, parse_pgn_to_tree(shuffle))
    assert roots == parse_pgn_to_tree(shuffle)
    assert repr(roots[0]).startswith("MoveNode(san='Nf3'")


def test_forest_to_movetext():
    pgn = "1. e4 e5 (1... c5 2. Nf3) 2. Nf3 Nc6"
    roots = parse_pgn_to_tree(pgn)

    assert forest_to_movetext(roots) == pgn


def test_forest_to_movetext_numbers_black_after_comment():
    roots = parse_pgn_to_tree("1. e4 {King's pawn} e5 2. Nf3")
    assert forest_to_movetext(roots) == "1. e4 {King's pawn} 1... e5 2. Nf3"


def test_forest_to_movetext_parses_back_to_the_same_forest():
    roots = parse_pgn_to_tree(
        "1. e4 (1. d4 d5 2. c4) 1... e5 2. Nf3 (2. f4 exf4 (2... d5)) Nc6 3. Bb5"
    )
    assert same_forest(parse_pgn_to_tree(forest_to_movetext(roots)), roots)


def test_format_tree_indents_branches():
    roots = parse_pgn_to_tree("1. e4 e5 2. Nf3 (2. f4 exf4) Nc6")

    assert format_tree(roots).splitlines() == [
        "1.e4 1...e5",
        "    2.Nf3 2...Nc6",
        "    2.f4 2...exf4",
    ]


def test_leaves():
    roots = parse_pgn_to_tree("1. e4 e5 2. Nf3 (2. f4 exf4) Nc6")
    assert [leaf.san for leaf in roots[0].leaves()] == ["Nc6", "exf4"]
