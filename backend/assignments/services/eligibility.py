"""Attendance threshold resolution and access decisions.

The threshold configuration is administrator-maintained and may change at any
time; callers load it once with `load_threshold_config()` and pass the
resulting snapshot through a whole evaluation.
"""
import datetime
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from django.conf import settings

from academics.models import AttendancePolicy
from assignments.models import Assignment


DEFAULT_REQUIREMENT = 70.0


@dataclass(frozen=True)
class ThresholdConfig:
    default_requirement: float = DEFAULT_REQUIREMENT
    rules: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    version: Optional[datetime.datetime] = None

    def requirement_for(self, key: str) -> Optional[float]:
        value = self.rules.get(key)
        return float(value) if value is not None else None


@dataclass(frozen=True)
class Eligibility:
    can_access: bool
    required_percent: float


def threshold_key(department: str, year: str, course: str) -> str:
    return f'{department}_{year}_{course}'


def load_threshold_config() -> ThresholdConfig:
    """Snapshot the current AttendancePolicy (latest row wins)."""
    fallback = float(getattr(settings, 'ASSIGNMENT_DEFAULT_ATTENDANCE_REQUIREMENT', DEFAULT_REQUIREMENT))
    policy = AttendancePolicy.objects.order_by('-updated_at', '-pk').first()
    if policy is None:
        return ThresholdConfig(default_requirement=fallback)
    return ThresholdConfig(
        default_requirement=float(policy.default_requirement),
        rules=MappingProxyType(dict(policy.rules or {})),
        version=policy.updated_at,
    )


def required_percent(department: str, year: str, course: str, config: ThresholdConfig,
                     assignment: Optional[Assignment] = None) -> float:
    """Return the attendance percentage a student must reach.

    A batch_attendance assignment with rules uses the lowest bracket floor;
    otherwise the per-(department, year, course) rule applies, falling back
    to the configured default.
    """
    if assignment is not None and assignment.type == Assignment.TYPE_BATCH_ATTENDANCE and assignment.rules:
        return float(min(rule['min'] for rule in assignment.rules))

    specific = config.requirement_for(threshold_key(department, year, course))
    if specific is not None:
        return specific
    return float(config.default_requirement)


def evaluate_eligibility(percent: float, department: str, year: str, course: str,
                         config: ThresholdConfig, assignment: Optional[Assignment] = None) -> Eligibility:
    """Decide access for an attendance `percent`.

    personalized and batch_attendance assignments use attendance only to pick
    questions, so they are always accessible. Deadlines are not checked here.
    """
    required = required_percent(department, year, course, config, assignment=assignment)
    if assignment is not None and assignment.is_special_type:
        return Eligibility(can_access=True, required_percent=required)
    return Eligibility(can_access=percent >= required, required_percent=required)
