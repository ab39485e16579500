"""Checks that several specs share."""

from __future__ import annotations

import re
from datetime import datetime
from typing import TYPE_CHECKING

from . import types
from .document import SPDX_REF_PREFIX, render_element_id
from .types import FieldError, NonConformantField
from .util import is_valid_string

if TYPE_CHECKING:
    from .document import Document, SbomPackage

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.\d+)?"
    r"(?:Z|[+-](\d{2}):(\d{2}))"
)

# Characters accepted in the part of a package SPDX identifier after the prefix.
_IDSTRING_CHARS = frozenset(
    "-./0123456789"
    "BCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
)


def _format_issue(message: str, spec: str) -> NonConformantField:
    return NonConformantField(
        error=FieldError(error_type=types.FORMAT_ERROR, error_msg=message),
        reported_by_spec=[spec],
    )


def _missing_if_invalid(value: str, field: str, spec: str) -> list[NonConformantField]:
    return [] if is_valid_string(value) else [types.create_field_error(field, spec)]


def sbom_has_spdx_version(doc: "Document", spec: str) -> list[NonConformantField]:
    return _missing_if_invalid(doc.spdx_version, types.SPDX_VERSION, spec)


def sbom_has_data_license(doc: "Document", spec: str) -> list[NonConformantField]:
    return _missing_if_invalid(doc.data_license, types.DATA_LICENSE, spec)


def sbom_has_spdx_identifier(doc: "Document", spec: str) -> list[NonConformantField]:
    if doc.spdx_identifier == "":
        return [types.create_field_error(types.SPDX_ID, spec)]
    return []


def sbom_has_document_name(doc: "Document", spec: str) -> list[NonConformantField]:
    # The reported field name is the namespace one, as the checks have always done.
    return _missing_if_invalid(doc.document_name, types.DOCUMENT_NAMESPACE, spec)


def sbom_has_document_namespace(doc: "Document", spec: str) -> list[NonConformantField]:
    return _missing_if_invalid(doc.document_namespace, types.DOCUMENT_NAMESPACE, spec)


def sbom_has_at_least_one_creator(doc: "Document", spec: str) -> list[NonConformantField]:
    if doc.creation_info is None or not doc.creation_info.creators:
        return [types.create_field_error(types.CREATOR, spec)]
    return []


def _is_rfc3339(value: str) -> bool:
    match = _RFC3339.fullmatch(value)
    if match is None:
        return False
    year, month, day, hour, minute, second, off_h, off_m = match.groups()
    try:
        datetime(int(year), int(month), int(day), int(hour), int(minute), int(second))
    except ValueError:
        return False
    if off_h is not None and (int(off_h) >= 24 or int(off_m) >= 60):
        return False
    return True


def _wrong_date_format(created: str, spec: str) -> NonConformantField:
    return _format_issue(
        "The 'Created' field is formatted incorrectly. "
        f"It is {created}. "
        "The correct format is YYYY-MM-DDThh:mm:ssZ",
        spec,
    )


def _wrong_creator_name(creator: str, spec: str) -> NonConformantField:
    return _format_issue(
        f"Creator organization is {creator}, but should always be 'Google LLC'.",
        spec,
    )


def _wrong_creator_type(spec: str) -> NonConformantField:
    return _format_issue(
        "Creator type is 'Person', but can only be 'Organization' or 'Tool'.",
        spec,
    )


def sbom_has_correct_creation_info(doc: "Document", spec: str) -> list[NonConformantField]:
    """Check the creation time format and the creators' types and names."""
    info = doc.creation_info
    if info is None:
        return [types.create_field_error(types.CREATED, spec)]
    issues = _missing_if_invalid(info.created, types.CREATED, spec)
    if not _is_rfc3339(info.created):
        issues.append(_wrong_date_format(info.created, spec))
    for creator in info.creators:
        if creator.creator_type == "Organization":
            if creator.creator != "Google LLC":
                issues.append(_wrong_creator_name(creator.creator, spec))
        elif creator.creator_type == "Person":
            issues.append(_wrong_creator_type(spec))
    return issues


def _with_check(issue: NonConformantField, check_name: str) -> list[NonConformantField]:
    issue.check_name = check_name
    return [issue]


def check_spdx_id(
    package: "SbomPackage", spec: str, check_name: str
) -> list[NonConformantField]:
    """Check that a package has an SPDX identifier made of allowed characters."""
    if package.spdx_id == "":
        return _with_check(
            types.mandatory_package_field_error(types.PACKAGE_SPDX_IDENTIFIER, spec),
            check_name,
        )
    element_id = render_element_id(package.spdx_id)
    if not element_id.startswith(SPDX_REF_PREFIX):
        return _with_check(
            _format_issue(
                "SPDX Identifier for package %s is non-conformant. "
                'The format should be SPDXRef-"[idstring]"',
                spec,
            ),
            check_name,
        )
    idstring = element_id[len(SPDX_REF_PREFIX):]
    if not set(idstring) <= _IDSTRING_CHARS:
        return _with_check(
            _format_issue(
                "SPDX Identifier is non-conformant. "
                'It should have letters, numbers, "." and/or "-"',
                spec,
            ),
            check_name,
        )
    return []


def must_have_name(
    package: "SbomPackage", spec: str, check_name: str
) -> list[NonConformantField]:
    """Check that a package has a usable name."""
    if is_valid_string(package.name):
        return []
    return _with_check(
        types.mandatory_package_field_error(types.PACKAGE_NAME, spec), check_name
    )