"""Harness engine - repository maturity audits, evolution plans and scaffolding."""

__version__ = "0.3.0"

from .audit import run_audit
from .config import AuditPolicy, load_config
from .doctor import run_doctor
from .errors import (
    ConfigurationError,
    HarnessError,
    ScaffoldConflictError,
    ScaffoldWriteError,
    TargetNotFoundError,
    UnknownAutomationPackError,
)
from .evolution import apply_evolution, plan_evolution, run_evolve
from .maturity import resolve_maturity_level
from .models import AuditResult, AuditScore, Dimension, DoctorReport, DoctorStatus
from .scaffold import InitOptions, run_init

__all__ = [
    "AuditPolicy",
    "AuditResult",
    "AuditScore",
    "ConfigurationError",
    "Dimension",
    "DoctorReport",
    "DoctorStatus",
    "HarnessError",
    "InitOptions",
    "ScaffoldConflictError",
    "ScaffoldWriteError",
    "TargetNotFoundError",
    "UnknownAutomationPackError",
    "apply_evolution",
    "load_config",
    "plan_evolution",
    "resolve_maturity_level",
    "run_audit",
    "run_doctor",
    "run_evolve",
    "run_init",
]
