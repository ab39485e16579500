"""Result records, check descriptions and issue constructors shared by all specs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from .document import Document, SbomPackage

# Conformance specs.
GOOGLE = "Google"
EO = "EO"
SPDX = "SPDX"

# Names of the fields the checks look at.
SPDX_VERSION = "SPDX Version"
DATA_LICENSE = "Data License"
SPDX_ID = "SPDX ID"
DOCUMENT_NAMESPACE = "Document Namespace"
DOCUMENT_NAME = "Document Name"
CREATOR = "Creator"
CREATED = "Created"
LICENSE_IDENTIFIER = "License Identifier"
EXTRACTED_TEXT = "Extracted Text"
LICENSE_CROSS_REFERENCES = "LicenseCrossReferences"
PACKAGE_NAME = "PackageName"
PACKAGE_SPDX_IDENTIFIER = "PackageSPDXIdentifier"
PACKAGE_VERSION = "PackageVersion"
PACKAGE_DOWNLOAD_LOCATION = "PackageDownloadLocation"
PACKAGE_VERIFICATION_CODE = "PackageVerificationCode"
PACKAGE_LICENSE_CONCLUDED = "PackageLicenseConcluded"
PACKAGE_LICENSE_INFO_FROM_FILES = "PackageLicenseInfoFromFiles"
PACKAGE_EXTERNAL_REFERENCES = "PackageExternalReferences"
PACKAGE_SUPPLIER = "PackageSupplier"
RELATIONSHIP_TYPE = "Relationship Type"

MISSING_FIELD = "missingField"
FORMAT_ERROR = "formatError"


@dataclass
class FieldError:
    """The kind of a conformance problem and its message."""

    error_type: str
    error_msg: str

    def to_dict(self) -> dict[str, Any]:
        return {"errorType": self.error_type, "errorMsg": self.error_msg}


@dataclass
class NonConformantField:
    """One conformance issue, with the check and specs that reported it."""

    error: FieldError
    check_name: str = ""
    reported_by_spec: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"error": self.error.to_dict()}
        if self.check_name:
            result["checkName"] = self.check_name
        result["reportedBySpec"] = list(self.reported_by_spec)
        return result


@dataclass
class Package:
    """Identifies an SBOM package in the results."""

    name: str = ""
    spdx_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.name:
            result["name"] = self.name
        if self.spdx_id:
            result["spdxId"] = self.spdx_id
        return result


@dataclass
class PkgResult:
    """The issues found in one package."""

    package: Optional[Package] = None
    errors: list[NonConformantField] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.package is not None:
            result["package"] = self.package.to_dict()
        if self.errors:
            result["errors"] = [error.to_dict() for error in self.errors]
        return result


TopLevelImpl = Callable[["Document", str], list[NonConformantField]]
PackageLevelImpl = Callable[["SbomPackage", str, str], list[NonConformantField]]


@dataclass(frozen=True)
class TopLevelCheck:
    """A named check run once on the whole document."""

    name: str
    impl: TopLevelImpl


@dataclass(frozen=True)
class PackageLevelCheck:
    """A named check run on every package of the document."""

    name: str
    impl: PackageLevelImpl


@dataclass
class CheckSummary:
    """A check, the specs that include it and how it went."""

    name: str
    specs: list[str] = field(default_factory=list)
    failed_pkgs_percent: Optional[float] = None
    passed_high_level: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.failed_pkgs_percent is not None:
            result["failedPkgsPercent"] = self.failed_pkgs_percent
        if self.passed_high_level is not None:
            result["passedHighLevel"] = self.passed_high_level
        result["name"] = self.name
        result["specs"] = list(self.specs)
        return result


@dataclass
class SpecSummary:
    """How many of one spec's checks passed."""

    conformant: bool = False
    passed_checks: int = 0
    total_checks: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "conformant": self.conformant,
            "passedChecks": self.passed_checks,
            "totalChecks": self.total_checks,
        }


@dataclass
class Summary:
    """Package counts and per-spec summaries of a run."""

    spec_summaries: Optional[dict[str, SpecSummary]] = None
    total_sbom_packages: int = 0
    failed_sbom_packages: int = 0

    def to_dict(self) -> dict[str, Any]:
        summaries = (
            None
            if self.spec_summaries is None
            else {name: s.to_dict() for name, s in self.spec_summaries.items()}
        )
        return {
            "specSummaries": summaries,
            "totalSbomPackages": self.total_sbom_packages,
            "failedSbomPackages": self.failed_sbom_packages,
        }


@dataclass
class Output:
    """Everything a run reports, ready to be turned into JSON."""

    text_summary: str = ""
    summary: Optional[Summary] = None
    errs_and_packs: Optional[dict[str, list[str]]] = None
    pkg_results: Optional[list[PkgResult]] = None
    checks_in_run: list[CheckSummary] = field(default_factory=list)
    total_sbom_packages: int = 0
    failed_sbom_packages: int = 0

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "textSummary": self.text_summary,
            "summary": None if self.summary is None else self.summary.to_dict(),
        }
        if self.errs_and_packs:
            result["errsAndPacks"] = {
                error: list(packages) for error, packages in self.errs_and_packs.items()
            }
        if self.pkg_results:
            result["pkgResults"] = [pkg.to_dict() for pkg in self.pkg_results]
        result["checksInRun"] = [check.to_dict() for check in self.checks_in_run]
        result["totalSbomPackages"] = self.total_sbom_packages
        result["failedSbomPackages"] = self.failed_sbom_packages
        return result


def _issue(error_type: str, message: str, spec: str) -> NonConformantField:
    return NonConformantField(
        error=FieldError(error_type=error_type, error_msg=message),
        reported_by_spec=[spec],
    )


def create_field_error(field: str, spec: str) -> NonConformantField:
    """An issue for a document-level field that is missing."""
    return _issue(MISSING_FIELD, f"SBOM has no {field} field", spec)


def other_license_error(license_name: str, spec: str, err: str) -> NonConformantField:
    """An issue for a badly formatted other-licence entry."""
    return _issue(
        FORMAT_ERROR,
        f"SBOM Other License {license_name} is formatted incorrectly: {err}",
        spec,
    )


def create_wrongly_formatted_field_error(field: str, spec: str) -> NonConformantField:
    """An issue for a document-level field with a bad format."""
    return _issue(FORMAT_ERROR, f"SBOM field {field} is formatted incorrectly", spec)


def mandatory_package_field_error(field: str, spec: str) -> NonConformantField:
    """An issue for a package that lacks a mandatory field."""
    return _issue(MISSING_FIELD, f"has no {field} field", spec)


def output_from_input(
    pkg_results: Optional[list[PkgResult]],
    errs_and_packs: Optional[dict[str, list[str]]],
    total_sbom_pkgs: int,
    failed_sbom_packages: int,
    checks_in_run: list[CheckSummary],
) -> Output:
    """Build an output record without a text summary or spec summaries."""
    return Output(
        pkg_results=pkg_results,
        errs_and_packs=errs_and_packs,
        total_sbom_packages=total_sbom_pkgs,
        failed_sbom_packages=failed_sbom_packages,
        checks_in_run=list(checks_in_run),
    )