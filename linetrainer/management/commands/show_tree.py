from django.core.management.base import BaseCommand, CommandError

from linetrainer.pgn_tree import forest_to_movetext, format_tree, parse_pgn_to_tree
from linetrainer.repertoire import build_repertoire
from linetrainer.storage import CustomLineStore


class Command(BaseCommand):
    help = "Print the move tree of a line, or of some movetext"  # noqa: A003

    def add_arguments(self, parser):
        parser.add_argument("line_id", nargs="?")
        parser.add_argument("--pgn", help="Movetext to parse instead of a line")
        parser.add_argument(
            "--movetext", action="store_true", help="Also print it back as movetext"
        )

    def handle(self, *args, **options):
        if options["pgn"]:
            roots = parse_pgn_to_tree(options["pgn"])
        elif options["line_id"]:
            line = build_repertoire(store=CustomLineStore()).get(options["line_id"])
            if line is None:
                raise CommandError(f"No such line: {options['line_id']}")
            self.stdout.write(f"{line.name} ({line.player_color})")
            roots = line.roots
        else:
            raise CommandError("Give a line id or --pgn")

        if not roots:
            self.stderr.write("❌ Invalid PGN! Please check your notation.")
            return

        self.stdout.write(format_tree(roots))
        if options["movetext"]:
            self.stdout.write(forest_to_movetext(roots))
