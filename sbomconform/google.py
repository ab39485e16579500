"""The Google spec: its own checks and the checker that bundles them."""

from __future__ import annotations

from typing import TYPE_CHECKING

from . import common, types
from .spec import SpecChecker
from .types import FieldError, NonConformantField, PackageLevelCheck, TopLevelCheck
from .util import is_valid_string

if TYPE_CHECKING:
    from .document import Document, SbomPackage

LICENSE_REF_PREFIX = "LicenseRef-"


def other_licensing_information_fields(
    doc: "Document", spec: str
) -> list[NonConformantField]:
    """Check that the document lists other licences and that each is well formed."""
    if not doc.other_licenses:
        return [types.create_field_error(types.LICENSE_IDENTIFIER, spec)]

    issues: list[NonConformantField] = []
    for index, lic in enumerate(doc.other_licenses):
        license_name = ""
        if lic.license_identifier == "":
            license_name = f"License index {index}"
            issues.append(types.other_license_error(license_name, spec, "No LicenseID"))
        if not lic.license_identifier.startswith(LICENSE_REF_PREFIX):
            issues.append(
                types.other_license_error(
                    license_name,
                    spec,
                    "LicenseID should be prefixed with 'LicenseRef-'",
                )
            )
        if not is_valid_string(lic.extracted_text):
            issues.append(
                types.other_license_error(license_name, spec, "Extracted Text is required")
            )
        if not lic.license_cross_references:
            issues.append(
                types.other_license_error(
                    license_name, spec, "License Cross Reference is required."
                )
            )
        else:
            issues.extend(
                types.other_license_error(
                    license_name,
                    spec,
                    "Invalid license cross reference. Cannot be '', 'noassert' or 'none'.",
                )
                for reference in lic.license_cross_references
                if not is_valid_string(reference)
            )
    return issues


def _license_issue(spec: str) -> NonConformantField:
    return NonConformantField(
        error=FieldError(
            error_type=types.MISSING_FIELD,
            error_msg=(
                "has neither Concluded License nor License From Files. "
                "Both of these cannot be absent from a package."
            ),
        ),
        reported_by_spec=[spec],
    )


def check_concluded_license(
    package: "SbomPackage", spec: str, check_name: str
) -> list[NonConformantField]:
    """Check that a package has a concluded licence or licences from its files."""
    concluded_exists = is_valid_string(package.license_concluded)
    from_files_exists = bool(package.license_info_from_files) and not any(
        value.lower() == "none" for value in package.license_info_from_files
    )
    if concluded_exists or from_files_exists:
        return []
    issue = _license_issue(spec)
    issue.check_name = check_name
    return [issue]


def check_package_originator(
    package: "SbomPackage", spec: str, check_name: str
) -> list[NonConformantField]:
    """Check that a package names a supplier together with its type."""
    supplier = package.supplier
    if supplier is None or supplier.supplier == "" or supplier.supplier_type == "":
        issue = types.mandatory_package_field_error(types.PACKAGE_SUPPLIER, spec)
        issue.check_name = check_name
        return [issue]
    return []


def google_checker() -> SpecChecker:
    """A checker holding the Google spec's checks."""
    top_level_checks = [
        TopLevelCheck(
            "Check that the SBOM has an SPDX version", common.sbom_has_spdx_version
        ),
        TopLevelCheck("Check that the SBOM has a data license", common.sbom_has_data_license),
        TopLevelCheck(
            "Check that the SBOM has an SPDXIdentifier", common.sbom_has_spdx_identifier
        ),
        TopLevelCheck(
            "Check that the SBOM has a Document Name", common.sbom_has_document_name
        ),
        TopLevelCheck(
            "Check that the SBOM has a Document Namespace",
            common.sbom_has_document_namespace,
        ),
        TopLevelCheck(
            "Check that the SBOM has at least one creator",
            common.sbom_has_at_least_one_creator,
        ),
        TopLevelCheck(
            "Check that the SBOMs creator is formatted correctly",
            common.sbom_has_correct_creation_info,
        ),
        TopLevelCheck(
            "Check the SBOMs other licensing fields", other_licensing_information_fields
        ),
    ]
    package_level_checks = [
        PackageLevelCheck("Check that SBOM packages have a name", common.must_have_name),
        PackageLevelCheck(
            "Check that SBOM packages' ID is correctly formatted", common.check_spdx_id
        ),
        PackageLevelCheck(
            "Check that SBOM packages have specified the supplier as Google",
            check_package_originator,
        ),
        PackageLevelCheck(
            "Check that SBOM packages have not left both PackageLicenseConcluded "
            "and PackageLicenseInfoFromFiles empty",
            check_concluded_license,
        ),
    ]
    return SpecChecker(types.GOOGLE, top_level_checks, package_level_checks)