"""
Harness Models - Data classes for audit, doctor and evolution results.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

DIMENSION_MAX_SCORE = 3


class Dimension(str, Enum):
    """Scored facets of repository maturity, in declaration order."""

    REPOSITORY_KNOWLEDGE = "repository_knowledge"
    ARCHITECTURE_ENFORCEMENT = "architecture_enforcement"
    AGENT_LEGIBILITY = "agent_legibility"
    GOLDEN_PRINCIPLES = "golden_principles"
    AGENT_WORKFLOW = "agent_workflow"
    GARBAGE_COLLECTION = "garbage_collection"


MAX_TOTAL_SCORE = DIMENSION_MAX_SCORE * len(Dimension)


class DoctorStatus(str, Enum):
    """Outcome of a single doctor check."""

    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"


class AutomationPack(str, Enum):
    """Automation pack as requested by the user."""

    NONE = "none"
    AUTO = "auto"
    AGENT_FACTORY = "agent-factory"


@dataclass
class AuditScore:
    """Accumulator for one dimension. Findings are append-only."""

    score: int = 0
    max: int = DIMENSION_MAX_SCORE
    findings: list[str] = field(default_factory=list)

    def award(self, finding: str) -> None:
        """Add one point (capped at max) and record the finding."""
        self.score = min(self.score + 1, self.max)
        self.findings.append(finding)

    def note(self, finding: str) -> None:
        """Record a finding without changing the score."""
        self.findings.append(finding)

    def to_dict(self) -> dict[str, Any]:
        return {"score": self.score, "max": self.max, "findings": list(self.findings)}


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class AuditResult:
    """Complete audit of one repository."""

    project: str
    timestamp: str = field(default_factory=_utc_timestamp)
    scores: dict[Dimension, AuditScore] = field(
        default_factory=lambda: {dimension: AuditScore() for dimension in Dimension}
    )
    maturity_level: str = "L0: Manual"
    recommendations: list[str] = field(default_factory=list)
    max_score: int = MAX_TOTAL_SCORE

    @property
    def total_score(self) -> int:
        return sum(score.score for score in self.scores.values())

    def recommend(self, recommendation: str) -> None:
        self.recommendations.append(recommendation)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON-ready audit document."""
        return {
            "project": self.project,
            "timestamp": self.timestamp,
            "scores": {
                dimension.value: score.to_dict()
                for dimension, score in self.scores.items()
            },
            "total_score": self.total_score,
            "max_score": self.max_score,
            "maturity_level": self.maturity_level,
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class EvolutionStep:
    """Numbered action on an evolution path."""

    step: int
    action: str
    description: str
    automated: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "step": self.step,
            "action": self.action,
            "description": self.description,
            "automated": self.automated,
        }


@dataclass(frozen=True)
class EvolutionPath:
    """Static plan between two adjacent maturity levels."""

    from_level: str
    to_level: str
    goal: str
    steps: tuple[EvolutionStep, ...]
    success_criteria: str


@dataclass(frozen=True)
class DoctorCheck:
    """Named check with status and fix text (empty only when passing)."""

    check: str
    status: DoctorStatus
    fix: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"check": self.check, "status": self.status.value, "fix": self.fix}


@dataclass
class DoctorReport:
    """Doctor checks for one target directory."""

    project: str
    target: str
    checks: list[DoctorCheck] = field(default_factory=list)

    def count(self, status: DoctorStatus) -> int:
        return sum(1 for check in self.checks if check.status == status)

    @property
    def summary(self) -> dict[str, int]:
        return {
            "passed": self.count(DoctorStatus.PASS),
            "failed": self.count(DoctorStatus.FAIL),
            "warnings": self.count(DoctorStatus.WARN),
            "total": len(self.checks),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "command": "doctor",
            "project": self.project,
            "target": self.target,
            "summary": self.summary,
            "checks": [check.to_dict() for check in self.checks],
        }


@dataclass(frozen=True)
class PackResolution:
    """Requested automation pack resolved to a concrete selection."""

    requested: AutomationPack
    selected: AutomationPack
    reason: str


@dataclass
class ScaffoldResult:
    """Artifacts touched by a scaffolding run."""

    created: list[str] = field(default_factory=list)
    already_present: list[str] = field(default_factory=list)

    def record(self, artifact: str, created: bool) -> None:
        if created:
            self.created.append(artifact)
        else:
            self.already_present.append(artifact)

    def extend(self, other: "ScaffoldResult") -> None:
        self.created.extend(other.created)
        self.already_present.extend(other.already_present)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "created": list(self.created),
            "already_present": list(self.already_present),
        }
