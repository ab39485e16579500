"""The EO spec: its package checks and the checker that bundles them."""

from __future__ import annotations

from typing import TYPE_CHECKING

from . import common, types
from .spec import SpecChecker
from .types import (
    FieldError,
    NonConformantField,
    PackageLevelCheck,
    TopLevelCheck,
)
from .util import is_valid_string

if TYPE_CHECKING:
    from .document import Document, SbomPackage


def check_relationships_fields(doc: "Document", spec: str) -> list[NonConformantField]:
    """Report every relationship whose type is missing or not asserted."""
    return [
        types.create_wrongly_formatted_field_error(types.RELATIONSHIP_TYPE, spec)
        for relationship in doc.relationships
        if not is_valid_string(relationship.relationship)
    ]


def _missing_package_supplier(spec: str) -> NonConformantField:
    return NonConformantField(
        error=FieldError(
            error_type=types.MISSING_FIELD,
            error_msg="The supplier field is missing",
        ),
        reported_by_spec=[spec],
    )


def must_have_supplier(
    package: "SbomPackage", spec: str, check_name: str
) -> list[NonConformantField]:
    """Check that a package names a supplier."""
    if package.supplier is None or package.supplier.supplier == "":
        issue = _missing_package_supplier(spec)
        issue.check_name = check_name
        return [issue]
    return []


def must_have_valid_version(
    package: "SbomPackage", spec: str, check_name: str
) -> list[NonConformantField]:
    """Check that a package has a usable version."""
    if is_valid_string(package.version):
        return []
    issue = types.mandatory_package_field_error(types.PACKAGE_VERSION, spec)
    issue.check_name = check_name
    return [issue]


def must_have_external_references(
    package: "SbomPackage", spec: str, check_name: str
) -> list[NonConformantField]:
    """Check that a package has at least one external reference."""
    if package.external_references:
        return []
    issue = types.mandatory_package_field_error(types.PACKAGE_EXTERNAL_REFERENCES, spec)
    issue.check_name = check_name
    return [issue]


def eo_checker() -> SpecChecker:
    """A checker holding the EO spec's checks."""
    top_level_checks = [
        TopLevelCheck("Check that the SBOM has a version", common.sbom_has_spdx_version),
        TopLevelCheck(
            "Check that the SBOM has an SPDX version", common.sbom_has_spdx_version
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
            "Check that the SBOMs packages are correctly formatted",
            check_relationships_fields,
        ),
    ]
    package_level_checks = [
        PackageLevelCheck("Check that SBOM packages have a name", common.must_have_name),
        PackageLevelCheck(
            "Check that SBOM packages have a valid version", must_have_valid_version
        ),
        PackageLevelCheck("Check that the package has a supplier", must_have_supplier),
        PackageLevelCheck(
            "Check that SBOM packages have external references",
            must_have_external_references,
        ),
    ]
    return SpecChecker(types.EO, top_level_checks, package_level_checks)