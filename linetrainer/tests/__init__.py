import chess

from linetrainer.analysis import AnalysisRequest, Evaluation
from linetrainer.pgn_tree import MoveNode
from linetrainer.repertoire import LineDescriptor, RepertoireIndex, build_line


def make_line(pgn, player_color="w", name="Test Line", id_="test", custom=False):
    descriptor = LineDescriptor(
        id=id_, name=name, pgn=pgn, player_color=player_color
    )
    return build_line(descriptor, custom=custom)


def make_index(*lines, store=None):
    """lines as (id, name, pgn, color) tuples"""
    index = RepertoireIndex(store=store)
    for id_, name, pgn, color in lines:
        index.add(
            LineDescriptor(id=id_, name=name, pgn=pgn, player_color=color),
            custom=False,
        )
    return index


def mainline_sans(roots: list[MoveNode]) -> list[str]:
    return [node.san for node in roots[0].mainline()] if roots else []


def child_sans(node: MoveNode) -> list[str]:
    return [child.san for child in node.children]


def walk_with_parents(roots):
    """(parent fen, node) for every node; the roots' parent is the start"""
    stack = [(chess.STARTING_FEN, root) for root in reversed(roots)]
    while stack:
        parent_fen, node = stack.pop()
        yield parent_fen, node
        stack.extend((node.fen, child) for child in reversed(node.children))


def play_through(session, sans):
    """
    Plays the sans in order, the trainee's moves through play() and the
    computer's by checking what computer_move() chose.
    """
    results = []
    for san in sans:
        if session.is_player_turn:
            results.append(session.play(san))
        else:
            result = session.computer_move()
            assert result is not None, f"Computer had no move, expected {san}"
            assert result.san == san, f"Computer played {result.san}, expected {san}"
            results.append(result)
    return results


class FakeAnalysis:
    """
    Stands in for UciAnalysisEngine: evaluations come back right away,
    best moves only when a test calls deliver().
    """

    available = True

    def __init__(self, evaluation=Evaluation("cp", 25)):
        self.evaluation = evaluation
        self.requests = []  # (request, callback)
        self.evaluations = 0

    def evaluate(self, fen, on_evaluation):
        self.evaluations += 1
        request = AnalysisRequest(fen=fen)
        on_evaluation(request, self.evaluation)
        return request

    def best_move(self, fen, on_best_move):
        if self.requests:
            self.requests[-1][0].cancel()
        request = AnalysisRequest(fen=fen)
        self.requests.append((request, on_best_move))
        return request

    def deliver(self, uci, index=-1):
        request, callback = self.requests[index]
        callback(request, chess.Move.from_uci(uci))
        return request


def same_forest(left: list[MoveNode], right: list[MoveNode]) -> bool:
    """Node by node, children included, without recursion"""
    stack = [(left, right)]
    while stack:
        a, b = stack.pop()
        if len(a) != len(b):
            return False
        for x, y in zip(a, b):
            if x != y:
                return False
            stack.append((x.children, y.children))
    return True
