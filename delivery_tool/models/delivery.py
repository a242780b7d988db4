"""Delivery data models"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from functools import total_ordering
from typing import Dict, Any

from ..api.exceptions import PersistenceError
from ..constants import TIMESTAMP_FORMAT

TIMESTAMP_PATTERN = re.compile(
    r"^(?P<stamp>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\.(?P<millis>\d{3}) "
    r"GMT(?P<offset>Z|[+-]\d{2}:\d{2})$"
)


def _local_now() -> datetime:
    return datetime.now().astimezone()


def format_timestamp(value: datetime) -> str:
    """
    Format a creation timestamp for persistence

    The format is ``yyyy-MM-dd HH:mm:ss.SSS GMT<offset>`` where the offset
    is ``Z`` for UTC and ``+HH:MM``/``-HH:MM`` otherwise.

    Args:
        value: Timestamp (naive values are taken as local time)

    Returns:
        Formatted string
    """
    if value.tzinfo is None:
        value = value.astimezone()
    offset = value.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        offset_text = "Z"
    else:
        sign = "+" if offset > timedelta(0) else "-"
        minutes = abs(int(offset.total_seconds())) // 60
        offset_text = f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"
    millis = value.microsecond // 1000
    return f"{value.strftime(TIMESTAMP_FORMAT)}.{millis:03d} GMT{offset_text}"


def parse_timestamp(text: str) -> datetime:
    """
    Parse a timestamp written by :func:`format_timestamp`

    Raises:
        PersistenceError: Text does not follow the timestamp format
    """
    match = TIMESTAMP_PATTERN.match(text.strip()) if text else None
    if not match:
        raise PersistenceError(f"Invalid delivery timestamp: {text!r}")

    offset_text = match.group("offset")
    if offset_text == "Z":
        tz = timezone.utc
    else:
        sign = 1 if offset_text[0] == "+" else -1
        hours, minutes = offset_text[1:].split(":")
        tz = timezone(sign * timedelta(hours=int(hours), minutes=int(minutes)))

    stamp = datetime.strptime(match.group("stamp"), TIMESTAMP_FORMAT)
    return stamp.replace(microsecond=int(match.group("millis")) * 1000, tzinfo=tz)


@total_ordering
@dataclass(eq=False)
class Delivery:
    """One recorded release

    Deliveries are equal when their names are equal. They sort newest
    first; deliveries created at the same instant are ordered by name.
    """

    name: str
    integrator: str = ""
    created: datetime = field(default_factory=_local_now)

    def __post_init__(self):
        """Normalize the creation timestamp"""
        if self.created.tzinfo is None:
            self.created = self.created.astimezone()
        # Persisted timestamps carry milliseconds only
        self.created = self.created.replace(microsecond=(self.created.microsecond // 1000) * 1000)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Delivery):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __lt__(self, other: "Delivery") -> bool:
        if not isinstance(other, Delivery):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def sort_key(self):
        """Key implementing the newest-first total order"""
        return (-self.created.timestamp(), self.name)

    def compare(self, other: "Delivery") -> int:
        """Three-way comparison: negative if this delivery sorts first"""
        if self.name == other.name:
            return 0
        return -1 if self.sort_key() < other.sort_key() else 1

    @property
    def created_text(self) -> str:
        """Creation timestamp in persisted form"""
        return format_timestamp(self.created)

    def __str__(self) -> str:
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "name": self.name,
            "integrator": self.integrator,
            "created": self.created_text,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Delivery':
        """Create from dictionary"""
        return cls(
            name=data["name"],
            integrator=data.get("integrator", ""),
            created=parse_timestamp(data["created"]),
        )


@dataclass(frozen=True)
class DeliveryKey:
    """Key of one piece of delivery information: (delivery, importer)"""

    delivery_name: str
    importer_name: str

    @classmethod
    def of(cls, delivery: Delivery, importer_name: str) -> 'DeliveryKey':
        """Build a key from a delivery object"""
        return cls(delivery.name, importer_name)

    def __str__(self) -> str:
        return f"{self.delivery_name}:{self.importer_name}"
