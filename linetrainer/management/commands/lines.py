from django.core.management.base import BaseCommand

from linetrainer.repertoire import build_repertoire
from linetrainer.storage import CustomLineStore


class Command(BaseCommand):
    help = "List the opening lines by first move and family"  # noqa: A003

    def add_arguments(self, parser):
        parser.add_argument("--color", choices=["w", "b"], help="Only this color")

    def handle(self, *args, **options):
        index = build_repertoire(store=CustomLineStore())
        color = options["color"]

        for category in index.categorized():
            groups = [
                [line for line in group.lines if line.player_color in (color or "wb")]
                for group in category.groups
            ]
            if not any(groups):
                continue

            self.stdout.write(f"\n{category.name}")
            for lines in groups:
                for line in lines:
                    custom = "*" if line.is_custom else " "
                    self.stdout.write(
                        f"  {custom} {line.id:<24} {line.player_color}  "
                        f"{line.difficulty:<6}  {line.type_:<7}  {line.name}"
                    )
