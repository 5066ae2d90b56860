from django.core.management.base import BaseCommand
from django.db.models import Count, Max, Q
from django.utils import timezone

from linetrainer.models import TrainingResult
from linetrainer.util import get_time_ago


class Command(BaseCommand):
    help = "Print training result totals by line and mode"  # noqa: A003

    def handle(self, *args, **options):
        now = timezone.now()
        rows = (
            TrainingResult.objects.values("line_id", "line_name", "mode")
            .annotate(
                total_count=Count("id"),
                passed_count=Count("id", filter=Q(passed=True)),
                last_trained=Max("datetime"),
            )
            .order_by("line_name", "mode")
        )

        if not rows:
            self.stdout.write("No training results yet")
            return

        grand_total = grand_passed = 0
        for row in rows:
            total = row["total_count"]
            passed = row["passed_count"]
            percent = int((passed / total) * 100) if total else 0
            grand_total += total
            grand_passed += passed
            self.stdout.write(
                f"{row['line_name']:<28} {row['mode']:<8} "
                f"{passed:>3}/{total:>3} ({percent}%)  "
                f"{get_time_ago(now, row['last_trained'])}"
            )

        percent = int((grand_passed / grand_total) * 100) if grand_total else 0
        self.stdout.write(f"\nTotal: {grand_passed}/{grand_total} ({percent}%)")
