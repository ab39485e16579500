"""A conformance spec: a named set of document and package checks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from .types import NonConformantField, PackageLevelCheck, PkgResult, TopLevelCheck
from .util import run_pkg_level_checks

if TYPE_CHECKING:
    from .document import Document


class SpecChecker:
    """Runs one spec's checks and keeps the issues they find."""

    def __init__(
        self,
        name: str,
        top_level_checks: Iterable[TopLevelCheck],
        pkg_level_checks: Iterable[PackageLevelCheck],
    ) -> None:
        self.name = name
        self.top_level_checks = list(top_level_checks)
        self.pkg_level_checks = list(pkg_level_checks)
        self.issues: list[NonConformantField] = []
        self.pkg_results: list[PkgResult] = []

    def __repr__(self) -> str:
        return f"SpecChecker(name={self.name!r})"

    def run_top_level_checks(self, doc: "Document") -> None:
        """Run the document checks, adding their issues to those already found."""
        for check in self.top_level_checks:
            found = check.impl(doc, self.name)
            for issue in found:
                issue.check_name = check.name
            self.issues.extend(found)

    def check_packages(self, doc: "Document") -> None:
        """Run the package checks, replacing any earlier package results."""
        self.pkg_results = run_pkg_level_checks(doc, self.pkg_level_checks, self.name)

    def check_names(self) -> list[str]:
        """Names of all checks, document checks first."""
        return self.top_level_check_names() + self.package_level_check_names()

    def top_level_check_names(self) -> list[str]:
        return [check.name for check in self.top_level_checks]

    def package_level_check_names(self) -> list[str]:
        return [check.name for check in self.pkg_level_checks]