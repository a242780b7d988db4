"""Operation result models"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..constants import XML_CREATION_REPORT


class OperationStatus(Enum):
    """Outcome of an operation"""
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass
class ErrorDetail:
    """Recoverable error recorded while computing"""

    code: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.context}


@dataclass
class Result:
    """Status, errors and warnings of an operation"""

    status: OperationStatus
    message: str = ""
    errors: List[ErrorDetail] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    started: datetime = field(default_factory=datetime.now)
    finished: Optional[datetime] = None

    @property
    def duration(self) -> Optional[float]:
        """Seconds spent, once finished"""
        if self.finished is None:
            return None
        return (self.finished - self.started).total_seconds()

    def add_error(self, code: str, message: str, **context) -> None:
        self.errors.append(ErrorDetail(code, message, context))

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def complete(self, status: Optional[OperationStatus] = None) -> None:
        self.finished = datetime.now()
        if status is not None:
            self.status = status

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "status": self.status.value,
            "message": self.message,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": list(self.warnings),
            "metadata": dict(self.metadata),
            "duration": self.duration,
        }


@dataclass
class DeliveryResult(Result):
    """Result of computing the information of a new delivery

    ``creation_report`` collects copies of every error element produced
    while computing. ``failure`` holds the fatal exception that aborted the
    computation, if any.
    """

    delivery_name: str = ""
    computed: int = 0
    creation_report: ET.Element = field(default_factory=lambda: ET.Element(XML_CREATION_REPORT))
    failure: Optional[BaseException] = None

    @property
    def report_entries(self) -> int:
        """Number of error elements in the creation report"""
        return len(self.creation_report)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "delivery_name": self.delivery_name,
            "computed": self.computed,
            "report_entries": self.report_entries,
            "failure": str(self.failure) if self.failure else None,
        })
        return data
