from typing import Optional

from django.conf import settings

from linetrainer.models import KeyValue
from linetrainer.repertoire import LineDescriptor, OpeningLine


class CustomLineStore:
    """
    User-authored lines as one JSON list under a single key. Every save
    replaces the whole list.
    """

    def __init__(self, key: Optional[str] = None):
        self.key = key or settings.CUSTOM_LINES_STORAGE_KEY

    def load(self) -> list[LineDescriptor]:
        row = KeyValue.objects.filter(key=self.key).first()
        if row is None or not isinstance(row.value, list):
            return []

        descriptors = []
        for item in row.value:
            try:
                descriptors.append(LineDescriptor.from_dict(item))
            except (KeyError, TypeError, AttributeError) as e:
                print(f"⚠️  Skipping malformed stored line {item!r}: {e}")
        return descriptors

    def save(self, lines: list[OpeningLine]):
        value = [line.to_descriptor().to_dict() for line in lines]
        KeyValue.objects.update_or_create(key=self.key, defaults={"value": value})
