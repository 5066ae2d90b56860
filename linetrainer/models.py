from django.db import models
from django.utils import timezone


class KeyValue(models.Model):
    """
    Small JSON documents by key, e.g. the custom lines list:

    {"key": "chess-trainer-custom-openings", "value": [{"id": ..., "pgn": ...}]}
    """

    key = models.CharField(max_length=100, unique=True)
    value = models.JSONField(default=list, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.key


class TrainingResult(models.Model):
    line_id = models.CharField(max_length=100, db_index=True)
    line_name = models.CharField(max_length=100)
    mode = models.CharField(max_length=10)  # trainer, explorer, blind
    passed = models.BooleanField(default=False)
    plies = models.IntegerField(default=0)
    datetime = models.DateTimeField(default=timezone.now, editable=False, db_index=True)

    def __str__(self):
        outcome = "passed" if self.passed else "failed"
        return f"{self.line_name} ({self.mode}) {outcome}"
