"""The SPDX spec: its package checks and the checker that bundles them."""

from __future__ import annotations

from typing import TYPE_CHECKING

from . import common, types
from .spec import SpecChecker
from .types import NonConformantField, PackageLevelCheck, TopLevelCheck
from .util import is_valid_string

if TYPE_CHECKING:
    from .document import SbomPackage


def check_download_location(
    package: "SbomPackage", spec: str, check_name: str
) -> list[NonConformantField]:
    """Check that a package has a usable download location."""
    if is_valid_string(package.download_location):
        return []
    issue = types.mandatory_package_field_error(types.PACKAGE_DOWNLOAD_LOCATION, spec)
    issue.check_name = check_name
    return [issue]


def check_verification_code(
    package: "SbomPackage", spec: str, check_name: str
) -> list[NonConformantField]:
    """Check that a package whose files were analysed has a verification code."""
    if not package.files_analyzed:
        return []
    code = package.verification_code
    if code is not None and is_valid_string(code.value):
        return []
    issue = types.mandatory_package_field_error(types.PACKAGE_VERIFICATION_CODE, spec)
    issue.check_name = check_name
    return [issue]


def spdx_checker() -> SpecChecker:
    """A checker holding the SPDX spec's checks."""
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
    ]
    package_level_checks = [
        PackageLevelCheck("Check that SBOM packages have a name", common.must_have_name),
        PackageLevelCheck(
            "Check that SBOM packages' ID is correctly formatted", common.check_spdx_id
        ),
        PackageLevelCheck(
            "Check that SBOM packages' verification code is correctly formatted",
            check_verification_code,
        ),
        PackageLevelCheck(
            "Check that SBOM packages' download location is correctly formatted",
            check_download_location,
        ),
    ]
    return SpecChecker(types.SPDX, top_level_checks, package_level_checks)