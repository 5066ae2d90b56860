from django.core.management.base import BaseCommand

from linetrainer.repertoire import (
    DIFFICULTIES,
    LINE_TYPES,
    InvalidLineError,
    LineDescriptor,
    build_repertoire,
)
from linetrainer.storage import CustomLineStore


class Command(BaseCommand):
    help = "Add a custom opening line"  # noqa: A003

    def add_arguments(self, parser):
        parser.add_argument("--name", required=True)
        parser.add_argument(
            "--pgn", required=True, help='e.g. "1. e4 e5 2. Nf3 (2. f4 exf4) Nc6"'
        )
        parser.add_argument("--color", choices=["w", "b"], default="w")
        parser.add_argument("--difficulty", choices=DIFFICULTIES, default="Medium")
        parser.add_argument("--type", choices=LINE_TYPES, default="Opening")
        parser.add_argument("--description", default="")

    def handle(self, *args, **options):
        index = build_repertoire(store=CustomLineStore())
        descriptor = LineDescriptor(
            name=options["name"],
            pgn=options["pgn"],
            player_color=options["color"],
            difficulty=options["difficulty"],
            type_=options["type"],
            description=options["description"],
        )

        try:
            line = index.add(descriptor)
        except InvalidLineError as e:
            self.stderr.write(f"❌ {e}")
            return

        self.stdout.write(f"✅ Added {line.name} ({line.id})")
