from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Literal, Optional, Protocol

import chess

from linetrainer.pgn_tree import MoveNode, parse_pgn_to_tree

PlayerColor = Literal["w", "b"]

DIFFICULTIES = ("Easy", "Medium", "Hard")
LINE_TYPES = ("Trap", "Gambit", "Opening")

# first move ➤ (category id, category name), in display order
CATEGORIES = {
    "e4": ("kings-pawn", "King's Pawn (e4)"),
    "d4": ("queens-pawn", "Queen's Pawn (d4)"),
    "c4": ("english", "English Opening (c4)"),
    "Nf3": ("reti", "Reti / Flank (Nf3)"),
}
OTHER_CATEGORY = ("other", "Other Openings")


class InvalidLineError(ValueError):
    pass


@dataclass
class LineDescriptor:
    """What a user (or openings.py) supplies to describe a line"""

    name: str
    pgn: str
    player_color: PlayerColor = "w"
    difficulty: str = "Medium"
    type_: str = "Opening"
    description: str = ""
    id: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "pgn": self.pgn,
            "playerColor": self.player_color,
            "difficulty": self.difficulty,
            "type": self.type_,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineDescriptor":
        return cls(
            id=data.get("id", ""),
            name=data["name"],
            pgn=data["pgn"],
            player_color=data.get("playerColor", "w"),
            difficulty=data.get("difficulty", "Medium"),
            type_=data.get("type", "Opening"),
            description=data.get("description", ""),
        )


@dataclass
class OpeningLine:
    id: str
    name: str
    pgn: str
    player_color: PlayerColor
    difficulty: str = "Medium"
    type_: str = "Opening"
    description: str = ""
    is_custom: bool = False
    roots: list[MoveNode] = field(default_factory=list, repr=False)

    def __str__(self):
        return f"{self.name} ({self.id})"

    @property
    def player_side(self) -> chess.Color:
        return chess.WHITE if self.player_color == "w" else chess.BLACK

    @property
    def group_name(self):
        # "Sicilian Defense: Najdorf" ➤ "Sicilian Defense"
        return self.name.split(":")[0].strip()

    def to_descriptor(self) -> LineDescriptor:
        return LineDescriptor(
            id=self.id,
            name=self.name,
            pgn=self.pgn,
            player_color=self.player_color,
            difficulty=self.difficulty,
            type_=self.type_,
            description=self.description,
        )


@dataclass
class LineGroup:
    id: str
    name: str
    lines: list[OpeningLine] = field(default_factory=list)


@dataclass
class LineCategory:
    id: str
    name: str
    groups: list[LineGroup] = field(default_factory=list)


class LineStore(Protocol):
    def load(self) -> list[LineDescriptor]: ...

    def save(self, lines: list[OpeningLine]) -> None: ...


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def build_line(descriptor: LineDescriptor, *, custom: bool = False) -> OpeningLine:
    if not descriptor.name.strip():
        raise InvalidLineError("A line needs a name")
    if descriptor.player_color not in ("w", "b"):
        raise InvalidLineError(
            f"Player color must be 'w' or 'b', got {descriptor.player_color!r}"
        )

    roots = parse_pgn_to_tree(descriptor.pgn)
    if not roots:
        raise InvalidLineError("Invalid PGN! Please check your notation.")

    return OpeningLine(
        id=descriptor.id or str(uuid.uuid4()),
        name=descriptor.name.strip(),
        pgn=descriptor.pgn.strip(),
        player_color=descriptor.player_color,
        difficulty=descriptor.difficulty,
        type_=descriptor.type_,
        description=descriptor.description or ("Custom opening" if custom else ""),
        is_custom=custom,
        roots=roots,
    )


class RepertoireIndex:
    """
    Every known line by id, in the order added. Trees are built once on
    the way in and shared, read only, by every session that uses them.
    """

    def __init__(self, store: Optional[LineStore] = None):
        self.store = store
        self._lines: dict[str, OpeningLine] = {}

    def __len__(self):
        return len(self._lines)

    def __iter__(self) -> Iterator[OpeningLine]:
        return iter(self._lines.values())

    def __contains__(self, line_id):
        return line_id in self._lines

    def all(self) -> list[OpeningLine]:
        return list(self._lines.values())

    def get(self, line_id: str) -> Optional[OpeningLine]:
        return self._lines.get(line_id)

    def for_color(self, player_color: PlayerColor) -> list[OpeningLine]:
        return [line for line in self if line.player_color == player_color]

    def custom_lines(self) -> list[OpeningLine]:
        return [line for line in self if line.is_custom]

    def add(
        self, descriptor: LineDescriptor, *, custom: bool = True, persist: bool = True
    ) -> OpeningLine:
        if descriptor.id and descriptor.id in self._lines:
            raise InvalidLineError(f"Line {descriptor.id} already exists")

        line = build_line(descriptor, custom=custom)
        self._lines[line.id] = line

        if custom and persist:
            self.save_custom_lines()
        return line

    def delete(self, line_id: str) -> bool:
        """Only custom lines can go; built-ins are always there"""
        line = self._lines.get(line_id)
        if line is None or not line.is_custom:
            return False
        del self._lines[line_id]
        self.save_custom_lines()
        return True

    def save_custom_lines(self):
        if self.store is not None:
            self.store.save(self.custom_lines())

    def categorized(self) -> list[LineCategory]:
        categories: dict[str, LineCategory] = {}
        for line in self:
            first_move = line.roots[0].san if line.roots else ""
            category_id, category_name = CATEGORIES.get(first_move, OTHER_CATEGORY)
            category = categories.setdefault(
                category_id, LineCategory(category_id, category_name)
            )

            group_id = slugify(line.group_name)
            group = next((g for g in category.groups if g.id == group_id), None)
            if group is None:
                group = LineGroup(group_id, line.group_name)
                category.groups.append(group)
            group.lines.append(line)

        order = [category_id for category_id, _ in CATEGORIES.values()]
        order.append(OTHER_CATEGORY[0])
        return sorted(categories.values(), key=lambda c: order.index(c.id))


def build_repertoire(
    descriptors: Optional[Iterable[LineDescriptor]] = None,
    store: Optional[LineStore] = None,
) -> RepertoireIndex:
    """
    Built-in lines first, then whatever custom lines the store has. Broken
    built-ins are a bug and raise; broken stored lines are skipped.
    """
    if descriptors is None:
        from linetrainer.openings import BUILTIN_LINES

        descriptors = BUILTIN_LINES

    index = RepertoireIndex(store=store)
    for descriptor in descriptors:
        index.add(descriptor, custom=False)

    if store is not None:
        for descriptor in store.load():
            try:
                index.add(descriptor, custom=True, persist=False)
            except InvalidLineError as e:
                print(f"⚠️  Skipping stored line: {e}")

    return index
