"""Issue deduplication, string validity and the per-package check runner."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from .types import NonConformantField, Package, PackageLevelCheck, PkgResult

if TYPE_CHECKING:
    from .document import Document

_INVALID_VALUES = frozenset({"noassertion", "none"})


@dataclass
class DeduplicatedIssue:
    """A top-level issue merged across every spec that reported it."""

    error_type: str
    error_message: str
    check_name: str = ""
    non_conformant_with_specs: list[str] = field(default_factory=list)


def deduplicate_issues(issues: list[NonConformantField]) -> list[DeduplicatedIssue]:
    """Merge issues with the same message, tagging each with the specs that found it."""
    deduplicated: list[DeduplicatedIssue] = []
    seen_messages: set[str] = set()
    for issue in issues:
        message = issue.error.error_msg
        if message in seen_messages:
            continue
        seen_messages.add(message)
        specs = sorted(
            {
                spec
                for other in issues
                if other.error.error_msg == message
                for spec in other.reported_by_spec
            }
        )
        deduplicated.append(
            DeduplicatedIssue(
                error_type=issue.error.error_type,
                error_message=message,
                check_name=issue.check_name,
                non_conformant_with_specs=specs,
            )
        )
    return deduplicated


def is_valid_string(value: str) -> bool:
    """True unless the value is empty, NOASSERTION or NONE (in any case)."""
    return bool(value) and value.lower() not in _INVALID_VALUES


def run_pkg_level_checks(
    doc: "Document",
    checks: Iterable[PackageLevelCheck],
    spec_name: str,
) -> list[PkgResult]:
    """Run every check on every package; packages without issues are included too."""
    checks = list(checks)
    return [
        PkgResult(
            package=Package(name=pack.name, spdx_id=pack.spdx_id),
            errors=[
                issue
                for check in checks
                for issue in check.impl(pack, spec_name, check.name)
            ],
        )
        for pack in doc.packages
    ]