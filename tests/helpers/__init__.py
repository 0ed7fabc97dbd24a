"""Test helpers for repo-harness.

- Builders: write files, manifests and workflows into a temporary repository
- Assertions: finding and doctor-check helpers with readable failures
"""

from .assertions import (
    assert_check,
    assert_finding,
    assert_no_finding,
)
from .builders import (
    write_file,
    write_json,
    write_lines,
    write_rich_repository,
    write_workflow,
)

__all__ = [
    # Builders
    "write_file",
    "write_json",
    "write_lines",
    "write_rich_repository",
    "write_workflow",
    # Assertions
    "assert_finding",
    "assert_no_finding",
    "assert_check",
]
