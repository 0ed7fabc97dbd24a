"""Integration test fixtures.

Re-exports fixtures from main conftest for integration tests.
"""

# Re-export fixtures from main conftest
from tests.conftest import (
    clean_env,
    project_root,
    scaffolded_project,
    temp_project,
)

__all__ = [
    "clean_env",
    "project_root",
    "scaffolded_project",
    "temp_project",
]
