import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

import chess

RESULT_MARKERS = ("1-0", "0-1", "1/2-1/2", "*")


class MovetextError(ValueError):
    pass


@dataclass
class MoveToken:
    san: str
    comments: list[str] = field(default_factory=list)
    # each alternative is a sequence of tokens branching from the position
    # *before* this token, i.e. siblings of this move, not of its replies
    alternatives: list[list["MoveToken"]] = field(default_factory=list)


@dataclass
class MoveNode:
    san: str
    fen: str  # position after the move
    uci: str
    color: chess.Color  # side that made the move
    move_number: int
    comment: str = ""
    # left out of the generated __repr__ and __eq__, which would recurse
    children: list["MoveNode"] = field(
        default_factory=list, repr=False, compare=False
    )

    def __str__(self):
        return f"{self.move_verbose} ({len(self.children)})"

    @property
    def is_leaf(self):
        return not self.children

    @property
    def move_verbose(self):
        dots = "." if self.color == chess.WHITE else "..."
        return f"{self.move_number}{dots}{self.san}"

    def walk(self) -> Iterator["MoveNode"]:
        """Depth first, main line before variations"""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def leaves(self) -> list["MoveNode"]:
        return [node for node in self.walk() if node.is_leaf]

    def mainline(self) -> list["MoveNode"]:
        line = [self]
        while line[-1].children:
            line.append(line[-1].children[0])
        return line


def find_node(nodes: list[MoveNode], san: str) -> Optional[MoveNode]:
    for node in nodes:
        if node.san == san:
            return node
    return None


def walk_forest(roots: list[MoveNode]) -> Iterator[MoveNode]:
    for root in roots:
        yield from root.walk()


LEXEME_REGEX = re.compile(
    r"""(?x)                            # verbose 💬
      (?P<comment>\{[^}]*\})            # {comment}
    | (?P<unclosed>\{)                  # { with no closing brace
    | (?P<line_comment>;[^\n]*)         # ; rest of line
    | (?P<tag>\[[^\]]*\])               # [Event "?"]
    | (?P<open>\()
    | (?P<close>\))
    | (?P<result>(?:1-0|0-1|1/2-1/2|\*)(?=[\s()]|$))
    | (?P<nag>\$\d+)
    | (?P<number>\d+\.+)                # 1. or 1... (may be glued to a move)
    | (?P<move>[^\s(){};$\[\]]+)
    | (?P<space>\s+)
    | (?P<stray>.)                      # anything else is broken
    """
)

MOVE_PARTS_REGEX = re.compile(
    r"""(?x)
    ^(?:\d+\.+)?                        # move number, if glued on
    ([^!?]*)                            # san
    ([!?]*)$                            # glyphs, discarded
    """
)

SAN_SHAPE_REGEX = re.compile(
    r"""(?x)
    ^(?:
        [NBRQK][a-h]?[1-8]?x?[a-h][1-8]             # pieces
        |
        (?:[a-h]x)?[a-h][1-8](?:=?[NBRQnbrq])?      # pawns and promotions
        |
        [O0]-[O0](?:-[O0])?                         # castles
    )
    [+#]?$                                          # check/mate
    """
)


def get_lexemes(text: str) -> Iterator[tuple[str, str]]:
    for m in LEXEME_REGEX.finditer(text):
        yield m.lastgroup, m.group()


def get_move_san(raw: str) -> str:
    m = MOVE_PARTS_REGEX.match(raw)
    san = m.group(1) if m else raw
    if not SAN_SHAPE_REGEX.match(san):
        raise MovetextError(f"Not a move: {raw}")
    return san


@dataclass
class SequenceFrame:
    tokens: list[MoveToken]
    # comments seen before the first move of a sequence go to that move
    pending_comments: list[str] = field(default_factory=list)


def tokenize_movetext(text: str) -> list[MoveToken]:
    """
    Turns movetext into a list of main line tokens, with variations hanging
    off the token they replace:

        1. e4 e5 (1... c5 2. Nf3) 2. Nf3

        e4, e5 [alternatives: [c5, Nf3]], Nf3

    Nesting uses an explicit stack of sequence frames rather than recursion;
    user-authored movetext can nest as deep as it likes.

    Raises MovetextError for anything we can't make sense of. Illegal moves
    are *not* caught here (that takes a board); only the shape of the text.
    """
    main = SequenceFrame(tokens=[])
    stack = [main]
    seen_move = False

    for kind, value in get_lexemes(text):
        frame = stack[-1]

        if kind in ("space", "nag", "number", "line_comment"):
            continue

        elif kind == "tag":
            # headers only make sense before the movetext starts
            if seen_move or len(stack) > 1:
                raise MovetextError(f"Unexpected tag in movetext: {value}")

        elif kind == "comment":
            comment = value[1:-1].strip()
            if not comment:
                continue
            if frame.tokens:
                frame.tokens[-1].comments.append(comment)
            else:
                frame.pending_comments.append(comment)

        elif kind == "open":
            if not frame.tokens:
                raise MovetextError("Variation has no move to branch from")
            variation = SequenceFrame(tokens=[])
            frame.tokens[-1].alternatives.append(variation.tokens)
            stack.append(variation)

        elif kind == "close":
            if len(stack) == 1:
                raise MovetextError("Unbalanced parens: unexpected ')'")
            stack.pop()

        elif kind == "result":
            if len(stack) > 1:
                raise MovetextError(f"Result {value} inside a variation")
            # first game only; whatever follows is ignored
            break

        elif kind == "move":
            token = MoveToken(san=get_move_san(value))
            token.comments.extend(frame.pending_comments)
            frame.pending_comments = []
            frame.tokens.append(token)
            seen_move = True

        elif kind == "unclosed":
            raise MovetextError("Unclosed comment brace")

        else:
            raise MovetextError(f"Unexpected character {value!r}")

    if len(stack) > 1:
        raise MovetextError(f"Unbalanced parens, depth {len(stack) - 1}")

    return main.tokens


def parse_movetext(text: str) -> list[MoveToken]:
    """
    Forgiving front door to the tokenizer: no result marker is the same
    as "*", and anything malformed comes back as an empty list, which
    callers take to mean "invalid PGN".
    """
    if not text or not text.strip():
        return []
    try:
        return tokenize_movetext(text.strip())
    except MovetextError as e:
        print(f"❌ PGN parse error: {e} ➤ {text.strip()[:40]}")
        return []


def build_tree(
    tokens: list[MoveToken], board: Optional[chess.Board] = None
) -> list[MoveNode]:
    """
    Replays tokens on a board to make a forest of MoveNodes. The returned
    list holds the first move and, after it, the first moves of each of its
    alternatives; continuations become children.

    Each work item is (tokens, index, board before tokens[index], target list).
    Boards in work items are never mutated after being queued, so every
    branch point has its own snapshot. Alternatives go on the stack below
    the continuation and in reverse, so nodes land in each list in the same
    order a depth first recursive build would give.

    A move the board rejects ends its branch (and that token's alternatives)
    quietly; earlier moves and other branches stand. If the very first move
    fails, the forest is empty.
    """
    roots: list[MoveNode] = []
    if not tokens:
        return roots

    start = board.copy(stack=False) if board else chess.Board()
    work = [(tokens, 0, start, roots)]

    while work:
        sequence, index, before, target = work.pop()
        if index >= len(sequence):
            continue

        token = sequence[index]
        after = before.copy(stack=False)
        try:
            move = after.parse_san(token.san)
        except ValueError as e:
            print(
                f"⚠️  Dropping branch at {token.san}: {e} | board move "
                f"{before.fullmove_number}, white turn {before.turn}"
            )
            continue

        # canonical san so that e.g. "Ngf3" and "Nf3" are the same move
        san = after.san(move)
        color = after.turn
        move_number = after.fullmove_number
        after.push(move)
        comment = " ".join(token.comments)

        node = find_node(target, san)
        if node is None:
            node = MoveNode(
                san=san,
                fen=after.fen(),
                uci=move.uci(),
                color=color,
                move_number=move_number,
                comment=comment,
            )
            target.append(node)
        elif comment and not node.comment:
            node.comment = comment

        for alternative in reversed(token.alternatives):
            work.append((alternative, 0, before, target))
        work.append((sequence, index + 1, after, node.children))

    return roots


def parse_pgn_to_tree(
    pgn: str, board: Optional[chess.Board] = None
) -> list[MoveNode]:
    return build_tree(parse_movetext(pgn), board)


def render_move(node: MoveNode, force_number: bool) -> str:
    if node.color == chess.WHITE:
        return f"{node.move_number}. {node.san}"
    if force_number:
        return f"{node.move_number}... {node.san}"
    return node.san


def forest_to_movetext(roots: list[MoveNode]) -> str:
    """
    Inverse of parse_pgn_to_tree, more or less: main line first, then
    sibling alternatives in parens, then on down the main line. Black moves
    get "..." numbers after a comment or a variation.

    1. e4 e5 (1... c5 2. Nf3) 2. Nf3 Nc6
    """
    parts: list[str] = []
    work: list = [(roots, True)]

    while work:
        item = work.pop()
        if isinstance(item, str):
            parts.append(item)
            continue

        siblings, force_number = item
        if not siblings:
            continue

        main, alternatives = siblings[0], siblings[1:]
        parts.append(render_move(main, force_number))
        if main.comment:
            parts.append(f"{{{main.comment}}}")

        if main.children:
            work.append((main.children, bool(alternatives or main.comment)))
        for alternative in reversed(alternatives):
            work.append(")")
            work.append(([alternative], True))
            work.append("(")

    text = ""
    for part in parts:
        if not text or text.endswith("(") or part == ")":
            text += part
        else:
            text += f" {part}"
    return text


def format_tree(roots: list[MoveNode], indent: str = "    ") -> str:
    """
    One line per unbranched stretch of moves, indented under the
    move it branches from:

    1.e4 1...e5 2.Nf3
        2...Nc6 3.Bc4
        2...d6 3.d4
    """
    lines = []
    stack = [(root, 0) for root in reversed(roots)]

    while stack:
        node, depth = stack.pop()
        chain = [node]
        while len(chain[-1].children) == 1:
            chain.append(chain[-1].children[0])

        text = " ".join(n.move_verbose for n in chain)
        comments = [n.comment for n in chain if n.comment]
        if comments:
            text += "  {" + " | ".join(comments) + "}"
        lines.append(f"{indent * depth}{text}")

        last = chain[-1]
        stack.extend((child, depth + 1) for child in reversed(last.children))

    return "\n".join(lines)
