"""
Walking move trees as moves are played.

LineTraversal follows one opening line; CandidateSet follows every line of
a color at once ("blind" mode) and keeps one of them as the target that
computer moves are drawn from.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Optional

from linetrainer.pgn_tree import MoveNode, find_node

if TYPE_CHECKING:
    from linetrainer.repertoire import OpeningLine

IN_BOOK = "in_book"
OUT_OF_BOOK = "out_of_book"
LINE_COMPLETE = "line_complete"
DEVIATED = "deviated"

LineState = Literal["in_book", "out_of_book", "line_complete", "deviated"]

STRICT = "strict"  # trainer: leaving the line is a failure
PERMISSIVE = "permissive"  # explorer: leaving the line hands off to the engine

Policy = Literal["strict", "permissive"]


class TraversalError(Exception):
    pass


class LineTraversal:
    def __init__(
        self,
        line: OpeningLine,
        policy: Policy = STRICT,
        rng: Optional[random.Random] = None,
    ):
        self.line = line
        self.policy = policy
        self.rng = rng or random.Random()
        self.pointer: Optional[MoveNode] = None  # None is the root
        self.state: LineState = IN_BOOK

    def __str__(self):
        at = self.pointer.move_verbose if self.pointer else "root"
        return f"{self.line.name} @ {at} ({self.state})"

    @property
    def is_terminal(self):
        return self.state in (LINE_COMPLETE, DEVIATED)

    def continuations(self) -> list[MoveNode]:
        if self.state != IN_BOOK:
            return []
        return self.pointer.children if self.pointer else self.line.roots

    def advance(self, san: str) -> LineState:
        if self.is_terminal:
            raise TraversalError(f"Line is finished ({self.state}); reset first")
        if self.state == OUT_OF_BOOK:
            return self.state  # the engine's problem now

        node = find_node(self.continuations(), san)
        if node is None:
            if self.policy == STRICT:
                self.state = DEVIATED
            else:
                self.leave_book()
            return self.state

        self.pointer = node
        if node.is_leaf:
            self.state = LINE_COMPLETE
        return self.state

    def choose_reply(self) -> Optional[MoveNode]:
        """Uniformly random book move, or None when the book is exhausted"""
        children = self.continuations()
        if not children:
            return None
        return self.rng.choice(children)

    def leave_book(self):
        self.pointer = None
        self.state = OUT_OF_BOOK

    def resync(self, sans: list[str]) -> LineState:
        """
        Recompute where we are from the moves on the board, e.g. after an
        undo. Never ends up DEVIATED: a history that wanders off the tree
        is simply out of book.
        """
        self.reset()
        for san in sans:
            node = find_node(self.continuations(), san)
            if node is None:
                self.leave_book()
                break
            self.pointer = node
        if self.state == IN_BOOK and self.pointer and self.pointer.is_leaf:
            self.state = LINE_COMPLETE
        return self.state

    def reset(self):
        self.pointer = None
        self.state = IN_BOOK


@dataclass
class Candidate:
    line: OpeningLine
    pointer: Optional[MoveNode] = None

    def continuations(self) -> list[MoveNode]:
        return self.pointer.children if self.pointer else self.line.roots

    @property
    def is_complete(self):
        return self.pointer is not None and self.pointer.is_leaf


@dataclass
class CandidateUpdate:
    state: LineState
    switched_to: str = ""  # display name of the new target, if it changed
    candidates_left: int = 0


@dataclass
class CandidateSet:
    """
    Every line still consistent with the moves played. The set only
    shrinks as moves come in; lines come back on reset(), or when rewind()
    takes moves back.
    """

    lines: list[OpeningLine]
    rng: random.Random = field(default_factory=random.Random)
    candidates: list[Candidate] = field(init=False, default_factory=list)
    target: Optional[Candidate] = field(init=False, default=None)
    state: LineState = field(init=False, default=IN_BOOK)
    history: list[tuple[list[Candidate], Optional[Candidate], LineState]] = field(
        init=False, default_factory=list
    )

    def __post_init__(self):
        self.reset()

    def __len__(self):
        return len(self.candidates)

    def reset(self):
        self.candidates = [Candidate(line) for line in self.lines]
        self.target = self.rng.choice(self.candidates) if self.candidates else None
        self.state = IN_BOOK
        self.history = []

    def continuations(self) -> list[MoveNode]:
        if self.target is None or self.state != IN_BOOK:
            return []
        return self.target.continuations()

    def advance(self, san: str) -> CandidateUpdate:
        if self.state != IN_BOOK:
            raise TraversalError(f"Blind session is finished ({self.state})")

        self.history.append((self.candidates, self.target, self.state))

        survivors = []
        new_target = None
        for candidate in self.candidates:
            node = find_node(candidate.continuations(), san)
            if node is None:
                continue
            moved = Candidate(candidate.line, node)
            survivors.append(moved)
            if candidate is self.target:
                new_target = moved

        self.candidates = survivors
        if not survivors:
            self.target = None
            self.state = DEVIATED
            return CandidateUpdate(DEVIATED)

        switched_to = ""
        if new_target is None:
            new_target = self.rng.choice(survivors)
            switched_to = new_target.line.name
        self.target = new_target

        if self.target.is_complete:
            self.state = LINE_COMPLETE

        return CandidateUpdate(self.state, switched_to, len(survivors))

    def choose_reply(self) -> Optional[MoveNode]:
        """Computer moves come from the target line only"""
        children = self.continuations()
        if not children:
            return None
        return self.rng.choice(children)

    def rewind(self, plies: int = 1):
        for _ in range(min(plies, len(self.history))):
            self.candidates, self.target, self.state = self.history.pop()
