"""
Results produced by graph analysis and catalog validation.
"""
from typing import List, Dict, Tuple, Any
from dataclasses import dataclass, field
from datetime import datetime, timezone

SYSTEM_SCOPE = "system"


@dataclass
class CycleInfo:
    """A dependency cycle. path[0] == path[-1]."""

    path: List[str]
    description: str

    @classmethod
    def from_path(cls, path: List[str]) -> "CycleInfo":
        return cls(path=list(path), description=" -> ".join(path))

    @property
    def members(self) -> List[str]:
        """Distinct services on the cycle, in path order."""
        return self.path[:-1]


@dataclass
class ImpactInfo:
    """A service affected by a change to another service."""

    service: str
    is_required: bool
    path: List[str]
    description: str


@dataclass
class ValidationSummary:
    """
    Result of one catalog validation pass. Built fresh for every pass.
    """

    successful: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)
    warnings: Dict[str, List[str]] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def add_warning(self, service_name: str, warning: str) -> None:
        self.warnings.setdefault(service_name, []).append(warning)

    @property
    def successful_count(self) -> int:
        return len(self.successful)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def warning_count(self) -> int:
        """Total number of warnings across all services, including system scope."""
        return sum(len(w) for w in self.warnings.values())

    @property
    def total_count(self) -> int:
        return self.successful_count + self.failed_count

    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def is_successful(self) -> bool:
        """True when no service failed. Warnings do not count."""
        return not self.failed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "successful": list(self.successful),
            "failed": [{"service": name, "reason": reason} for name, reason in self.failed],
            "warnings": {name: list(w) for name, w in self.warnings.items()},
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
            "counts": {
                "total": self.total_count,
                "successful": self.successful_count,
                "failed": self.failed_count,
                "warnings": self.warning_count,
            },
        }
