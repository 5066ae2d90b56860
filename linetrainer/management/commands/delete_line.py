from django.core.management.base import BaseCommand

from linetrainer.repertoire import build_repertoire
from linetrainer.storage import CustomLineStore


class Command(BaseCommand):
    help = "Delete a custom opening line"  # noqa: A003

    def add_arguments(self, parser):
        parser.add_argument("line_id")

    def handle(self, *args, **options):
        index = build_repertoire(store=CustomLineStore())
        line = index.get(options["line_id"])

        if line is None:
            self.stderr.write(f"No such line: {options['line_id']}")
        elif not line.is_custom:
            self.stderr.write(f"{line.name} is built in and can't be deleted")
        elif index.delete(line.id):
            self.stdout.write(f"🗑️  Deleted {line.name}")
