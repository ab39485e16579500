import pytest

from sbomconform import common
from sbomconform.document import CreationInfo, Creator, Document, SbomPackage
from sbomconform.types import (
    CREATED,
    CREATOR,
    DATA_LICENSE,
    DOCUMENT_NAMESPACE,
    PACKAGE_NAME,
    PACKAGE_SPDX_IDENTIFIER,
    SPDX_ID,
    SPDX_VERSION,
    create_field_error,
    mandatory_package_field_error,
)

GOOD_CREATED = "2023-01-01T00:00:00Z"


def _messages(issues):
    return [issue.error.error_msg for issue in issues]


def _doc(**kwargs):
    defaults = dict(
        spdx_version="SPDX-2.3",
        data_license="CC0-1.0",
        spdx_identifier="DOCUMENT",
        document_name="doc",
        document_namespace="https://example.com/doc",
        creation_info=CreationInfo(
            creators=[Creator(creator="Google LLC", creator_type="Organization")],
            created=GOOD_CREATED,
        ),
    )
    defaults.update(kwargs)
    return Document(**defaults)


def test_complete_document_passes_all_top_level_checks():
    doc = _doc()
    for check in (
        common.sbom_has_spdx_version,
        common.sbom_has_data_license,
        common.sbom_has_spdx_identifier,
        common.sbom_has_document_name,
        common.sbom_has_document_namespace,
        common.sbom_has_at_least_one_creator,
        common.sbom_has_correct_creation_info,
    ):
        assert check(doc, "SPDX") == []


@pytest.mark.parametrize(
    "check,kwargs,field",
    [
        (common.sbom_has_spdx_version, {"spdx_version": ""}, SPDX_VERSION),
        (common.sbom_has_spdx_version, {"spdx_version": "NOASSERTION"}, SPDX_VERSION),
        (common.sbom_has_data_license, {"data_license": "none"}, DATA_LICENSE),
        (common.sbom_has_spdx_identifier, {"spdx_identifier": ""}, SPDX_ID),
        (common.sbom_has_document_name, {"document_name": ""}, DOCUMENT_NAMESPACE),
        (common.sbom_has_document_namespace, {"document_namespace": ""}, DOCUMENT_NAMESPACE),
        (common.sbom_has_at_least_one_creator, {"creation_info": None}, CREATOR),
        (
            common.sbom_has_at_least_one_creator,
            {"creation_info": CreationInfo(created=GOOD_CREATED)},
            CREATOR,
        ),
    ],
)
def test_missing_document_fields(check, kwargs, field):
    issues = check(_doc(**kwargs), "Google")
    assert issues == [create_field_error(field, "Google")]


def test_creation_info_missing():
    issues = common.sbom_has_correct_creation_info(_doc(creation_info=None), "EO")
    assert issues == [create_field_error(CREATED, "EO")]


def test_wrong_creator_organization():
    info = CreationInfo(
        creators=[Creator(creator="Some Other Company", creator_type="Organization")],
        created=GOOD_CREATED,
    )
    issues = common.sbom_has_correct_creation_info(_doc(creation_info=info), "EO")
    assert _messages(issues) == [
        "Creator organization is Some Other Company, but should always be 'Google LLC'."
    ]
    assert issues[0].error.error_type == "formatError"
    assert issues[0].reported_by_spec == ["EO"]


def test_person_creator_rejected_tool_accepted():
    info = CreationInfo(
        creators=[
            Creator(creator="Jane", creator_type="Person"),
            Creator(creator="builder-1.0", creator_type="Tool"),
        ],
        created=GOOD_CREATED,
    )
    issues = common.sbom_has_correct_creation_info(_doc(creation_info=info), "EO")
    assert _messages(issues) == [
        "Creator type is 'Person', but can only be 'Organization' or 'Tool'."
    ]


@pytest.mark.parametrize(
    "created", ["2023-01-01T00:00:00Z", "2023-06-30T12:34:56.789+02:00"]
)
def test_valid_created_formats(created):
    info = CreationInfo(created=created)
    assert common.sbom_has_correct_creation_info(_doc(creation_info=info), "EO") == []


@pytest.mark.parametrize("created", ["2023-01-01", "2023-13-01T00:00:00Z", "yesterday"])
def test_bad_created_format(created):
    info = CreationInfo(created=created)
    issues = common.sbom_has_correct_creation_info(_doc(creation_info=info), "EO")
    assert len(issues) == 1
    assert created in issues[0].error.error_msg
    assert issues[0].error.error_msg.endswith("The correct format is YYYY-MM-DDThh:mm:ssZ")


def test_empty_created_reports_missing_and_format():
    info = CreationInfo(created="")
    issues = common.sbom_has_correct_creation_info(_doc(creation_info=info), "EO")
    assert len(issues) == 2
    assert issues[0] == create_field_error(CREATED, "EO")
    assert issues[1].error.error_type == "formatError"


@pytest.mark.parametrize("spdx_id", ["foo", "Package-1", "pkg.2"])
def test_check_spdx_id_accepts(spdx_id):
    assert common.check_spdx_id(SbomPackage(spdx_id=spdx_id), "Google", "id check") == []


def test_check_spdx_id_missing():
    issues = common.check_spdx_id(SbomPackage(), "Google", "id check")
    expected = mandatory_package_field_error(PACKAGE_SPDX_IDENTIFIER, "Google")
    assert _messages(issues) == [expected.error.error_msg]
    assert issues[0].check_name == "id check"


@pytest.mark.parametrize("spdx_id", ["foo_bar", "foo bar", "ümlaut"])
def test_check_spdx_id_rejects_bad_characters(spdx_id):
    issues = common.check_spdx_id(SbomPackage(spdx_id=spdx_id), "SPDX", "id check")
    assert _messages(issues) == [
        'SPDX Identifier is non-conformant. It should have letters, numbers, "." and/or "-"'
    ]
    assert issues[0].check_name == "id check"
    assert issues[0].reported_by_spec == ["SPDX"]


@pytest.mark.parametrize("name", ["", "NOASSERTION", "NONE"])
def test_must_have_name_rejects(name):
    issues = common.must_have_name(SbomPackage(name=name), "EO", "name check")
    assert _messages(issues) == ["has no PackageName field"]
    assert issues[0].check_name == "name check"
    assert issues[0] .error == mandatory_package_field_error(PACKAGE_NAME, "EO").error


def test_must_have_name_accepts():
    assert common.must_have_name(SbomPackage(name="Foo"), "EO", "name check") == []