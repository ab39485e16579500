"""The checker that runs several specs on one SBOM and merges what they find."""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from .document import Document, parse_sbom
from .eo import eo_checker
from .google import google_checker
from .spdx_spec import spdx_checker
from .spec import SpecChecker
from .types import (
    CheckSummary,
    NonConformantField,
    Output,
    PkgResult,
    SpecSummary,
    Summary,
)
from .util import DeduplicatedIssue, deduplicate_issues


class NoSpecError(ValueError):
    """Raised when a checker is created without any spec."""

    def __init__(self) -> None:
        super().__init__("the checker has no spec(s). BaseChecker needs at least one spec")


_SPEC_FACTORIES = {
    "google": google_checker,
    "eo": eo_checker,
    "spdx": spdx_checker,
}


class BaseChecker:
    """Runs the checks of every spec it holds and combines their results."""

    def __init__(self, spec_checkers: Optional[Iterable[SpecChecker]] = None) -> None:
        self.spec_checkers: list[SpecChecker] = list(spec_checkers or [])
        self.document: Optional[Document] = None
        self.top_level_results: list[DeduplicatedIssue] = []
        self.pkg_results: list[PkgResult] = []
        self.errs_and_packs: dict[str, list[str]] = {}

    def __repr__(self) -> str:
        names = [spec.name for spec in self.spec_checkers]
        return f"BaseChecker(specs={names!r})"

    # --- setting up -------------------------------------------------------

    def with_sbom(self, data: Union[str, bytes, Any]) -> "BaseChecker":
        """A new checker with these specs and the given SBOM; earlier results are dropped."""
        document = parse_sbom(data)
        checker = BaseChecker(self.spec_checkers)
        checker.document = document
        return checker

    def with_sbom_file(self, path: Union[str, Path]) -> "BaseChecker":
        """Like with_sbom, reading the SBOM from a file."""
        return self.with_sbom(Path(path).read_bytes())

    def add_spec(self, spec: SpecChecker) -> None:
        self.spec_checkers.append(spec)

    def add_google_spec(self) -> None:
        self.spec_checkers.append(google_checker())

    def add_eo_spec(self) -> None:
        self.spec_checkers.append(eo_checker())

    def add_spdx_spec(self) -> None:
        self.spec_checkers.append(spdx_checker())

    def reset_results(self) -> None:
        self.top_level_results = []
        self.pkg_results = []

    # --- queries over the results -----------------------------------------

    def _is_top_level_check(self, check_name: str) -> bool:
        return any(
            check_name in spec.top_level_check_names() for spec in self.spec_checkers
        )

    def _is_package_check(self, check_name: str) -> bool:
        return any(
            check_name in spec.package_level_check_names() for spec in self.spec_checkers
        )

    def _failed_pkg_percentage(self, check_name: str) -> float:
        failures = sum(
            1
            for result in self.pkg_results
            for issue in result.errors
            if issue.check_name == check_name
        )
        if failures == 0:
            return 0.0
        return failures / self.number_of_sbom_packages() * 100

    def _failed_pkg_level_check(self, check_name: str) -> bool:
        return any(
            issue.check_name == check_name
            for result in self.pkg_results
            for issue in result.errors
        )

    def _failed_top_level_check(self, check_name: str) -> bool:
        return any(issue.check_name == check_name for issue in self.top_level_results)

    def all_checks(self) -> list[CheckSummary]:
        """Every check that runs, the specs that include it and how it went."""
        specs_by_check: dict[str, list[str]] = {}
        for spec in self.spec_checkers:
            for check in spec.check_names():
                specs_by_check.setdefault(check, []).append(spec.name)

        summaries = []
        for check_name, specs in specs_by_check.items():
            is_pkg = self._is_package_check(check_name)
            is_top = self._is_top_level_check(check_name)
            if is_pkg and is_top:
                raise ValueError(
                    f"check {check_name!r} is both a document and a package check; "
                    "the likely reason is duplicate naming"
                )
            summary = CheckSummary(name=check_name, specs=specs)
            if is_pkg:
                summary.failed_pkgs_percent = self._failed_pkg_percentage(check_name)
            else:
                summary.passed_high_level = not self._failed_top_level_check(check_name)
            summaries.append(summary)
        return summaries

    def spec_summaries(self) -> dict[str, SpecSummary]:
        """A summary for each spec, keyed by spec name."""
        summaries: dict[str, SpecSummary] = {}
        for spec in self.spec_checkers:
            checks = spec.check_names()
            summary = summaries.setdefault(spec.name, SpecSummary(total_checks=len(checks)))
            failed = {
                check
                for check in checks
                if self._failed_pkg_level_check(check) or self._failed_top_level_check(check)
            }
            summary.passed_checks = len(checks) - len(failed)
            summary.conformant = not failed
        return summaries

    def text_summary(self) -> str:
        """A readable account of the issues found, in a stable order."""
        total = self.number_of_sbom_packages()
        failed = total - self.number_of_compliant_packages()
        top_level = sorted(
            f"{issue.error_message}. [{' '.join(issue.non_conformant_with_specs)}]"
            for issue in self.top_level_results
        )
        package_level = sorted(
            f"{len(packages)}/{total} {'package' if len(packages) == 1 else 'packages'}"
            f" failed: {error}"
            for error, packages in self.errs_and_packs.items()
        )
        lines = [
            f"Analyzed SBOM package with {total} packages. "
            f"{failed} of these packages failed the conformance checks.\n",
            "\nTop-level conformance issues:\n",
            *(line + "\n" for line in top_level),
            "\nConformance issues in packages:\n",
            *(line + "\n" for line in package_level),
        ]
        return "".join(lines)

    def results(self) -> Output:
        """Everything the last run found."""
        total = self.number_of_sbom_packages()
        summary = Summary(
            spec_summaries=self.spec_summaries(),
            total_sbom_packages=total,
            failed_sbom_packages=total - self.number_of_compliant_packages(),
        )
        return Output(
            text_summary=self.text_summary(),
            summary=summary,
            pkg_results=self.pkg_results,
            errs_and_packs=self.errs_and_packs,
            checks_in_run=self.all_checks(),
        )

    def number_of_compliant_packages(self) -> int:
        return sum(1 for result in self.pkg_results if not result.errors)

    def number_of_sbom_packages(self) -> int:
        return len(self.pkg_results)

    # --- running ----------------------------------------------------------

    def _require_document(self) -> Document:
        if self.document is None:
            raise ValueError("no SBOM has been set on this checker")
        return self.document

    def run_checks(self) -> None:
        """Run the document checks and then the package checks of every spec."""
        doc = self._require_document()

        issues: list[NonConformantField] = []
        for spec in self.spec_checkers:
            spec.run_top_level_checks(doc)
            issues.extend(spec.issues)
        self.top_level_results = deduplicate_issues(issues)

        pkg_results: list[PkgResult] = []
        for spec in self.spec_checkers:
            spec.check_packages(doc)
            pkg_results.extend(spec.pkg_results)
        merged = merge_pkg_results(pkg_results)
        self.errs_and_packs = create_err_and_pkg_map(merged)
        self.pkg_results = deduplicate_package_results(merged)


def new_checker(specs: Iterable[Union[str, SpecChecker]]) -> BaseChecker:
    """A checker for the given specs, named ('google', 'eo', 'spdx') or given as checkers."""
    checker = BaseChecker()
    for spec in specs:
        if isinstance(spec, SpecChecker):
            checker.add_spec(spec)
            continue
        factory = _SPEC_FACTORIES.get(spec.lower())
        if factory is None:
            raise ValueError(f"{spec} is not a valid spec")
        checker.add_spec(factory())
    if not checker.spec_checkers:
        raise NoSpecError()
    return checker


def _same_package(first: PkgResult, second: PkgResult) -> bool:
    a, b = first.package, second.package
    if a is None or b is None:
        return False
    if a.name and b.name:
        return a.name == b.name
    if a.spdx_id and b.spdx_id:
        return a.spdx_id == b.spdx_id
    return False


def merge_pkg_results(packs: list[PkgResult]) -> list[PkgResult]:
    """Combine the results each spec gave for the same package into one."""
    merged: list[PkgResult] = []
    for pack in packs:
        if any(_same_package(done, pack) for done in merged):
            continue
        merged.append(
            PkgResult(
                package=pack.package,
                errors=[
                    issue
                    for other in packs
                    if _same_package(pack, other)
                    for issue in other.errors
                ],
            )
        )
    return merged


def deduplicate_package_results(merged_packs: list[PkgResult]) -> list[PkgResult]:
    """Fold identical issues of a package into one that lists every reporting spec."""
    cleaned_packs: list[PkgResult] = []
    for pack in merged_packs:
        if any(_same_package(done, pack) for done in cleaned_packs):
            continue
        cleaned: list[NonConformantField] = []
        by_message: dict[str, NonConformantField] = {}
        for issue in pack.errors:
            existing = by_message.get(issue.error.error_msg)
            if existing is None:
                copy = dataclasses.replace(
                    issue, reported_by_spec=list(issue.reported_by_spec)
                )
                by_message[issue.error.error_msg] = copy
                cleaned.append(copy)
                continue
            for spec in issue.reported_by_spec:
                if spec not in existing.reported_by_spec:
                    existing.reported_by_spec.append(spec)
        cleaned_packs.append(PkgResult(package=pack.package, errors=cleaned))
    return cleaned_packs


def create_err_and_pkg_map(merged_packs: list[PkgResult]) -> dict[str, list[str]]:
    """Map each error message to the packages (by name, else SPDX id) that have it."""
    errs_and_packs: dict[str, list[str]] = {}
    for pack in merged_packs:
        package = pack.package
        package_name = ""
        if package is not None:
            package_name = package.name or package.spdx_id
        for issue in pack.errors:
            names = errs_and_packs.setdefault(issue.error.error_msg, [])
            if package_name not in names:
                names.append(package_name)
    return errs_and_packs