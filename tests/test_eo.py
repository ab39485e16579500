import pytest

from sbomconform import types
from sbomconform.document import (
    Document,
    ExternalReference,
    Relationship,
    SbomPackage,
    Supplier,
    parse_json,
)
from sbomconform.eo import (
    check_relationships_fields,
    eo_checker,
    must_have_external_references,
    must_have_supplier,
    must_have_valid_version,
)


def _good_package(**overrides):
    values = dict(
        name="Foo",
        spdx_id="foo",
        version="v1",
        supplier=Supplier(supplier="foo", supplier_type="Organization"),
        external_references=[
            ExternalReference("PACKAGE-MANAGER", "purl", "pkg:foo")
        ],
    )
    values.update(overrides)
    return SbomPackage(**values)


def test_relationships_with_valid_types_pass():
    doc = Document(relationships=[Relationship("SPDXRef-a", "DEPENDS_ON", "SPDXRef-b")])
    assert check_relationships_fields(doc, "EO") == []


@pytest.mark.parametrize("kind", ["", "NOASSERTION", "none"])
def test_relationship_without_type_is_reported(kind):
    doc = Document(relationships=[Relationship("SPDXRef-a", kind, "SPDXRef-b")])
    issues = check_relationships_fields(doc, "EO")
    expected = types.create_wrongly_formatted_field_error(types.RELATIONSHIP_TYPE, "EO")
    assert len(issues) == 1
    assert issues[0].error == expected.error
    assert issues[0].reported_by_spec == ["EO"]


def test_each_bad_relationship_is_reported():
    doc = Document(
        relationships=[
            Relationship("SPDXRef-a", "", "SPDXRef-b"),
            Relationship("SPDXRef-a", "CONTAINS", "SPDXRef-c"),
            Relationship("SPDXRef-b", "", "SPDXRef-c"),
        ]
    )
    assert len(check_relationships_fields(doc, "EO")) == 2


def test_missing_supplier():
    issues = must_have_supplier(_good_package(supplier=None), "EO", "check")
    assert len(issues) == 1
    assert issues[0].error.error_type == "missingField"
    assert issues[0].error.error_msg == "The supplier field is missing"
    assert issues[0].check_name == "check"
    assert issues[0].reported_by_spec == ["EO"]


def test_empty_supplier_name_is_missing():
    package = _good_package(supplier=Supplier(supplier="", supplier_type="Organization"))
    assert len(must_have_supplier(package, "EO", "check")) == 1


def test_noassertion_supplier_passes():
    package = _good_package(supplier=Supplier(supplier="NOASSERTION"))
    assert must_have_supplier(package, "EO", "check") == []


@pytest.mark.parametrize("version", ["", "NOASSERTION", "None"])
def test_invalid_version(version):
    issues = must_have_valid_version(_good_package(version=version), "EO", "c")
    assert [i.error.error_msg for i in issues] == ["has no PackageVersion field"]
    assert issues[0].check_name == "c"


def test_valid_version_passes():
    assert must_have_valid_version(_good_package(), "EO", "c") == []


def test_missing_external_references():
    issues = must_have_external_references(
        _good_package(external_references=[]), "EO", "c"
    )
    assert [i.error.error_msg for i in issues] == [
        "has no PackageExternalReferences field"
    ]


def test_external_references_present_pass():
    assert must_have_external_references(_good_package(), "EO", "c") == []


def test_eo_checker_check_names():
    checker = eo_checker()
    assert checker.name == "EO"
    assert checker.top_level_check_names() == [
        "Check that the SBOM has a version",
        "Check that the SBOM has an SPDX version",
        "Check that the SBOM has at least one creator",
        "Check that the SBOMs creator is formatted correctly",
        "Check that the SBOMs packages are correctly formatted",
    ]
    assert checker.package_level_check_names() == [
        "Check that SBOM packages have a name",
        "Check that SBOM packages have a valid version",
        "Check that the package has a supplier",
        "Check that SBOM packages have external references",
    ]


def test_eo_checker_on_conformant_package():
    doc = parse_json(
        """{
            "spdxVersion": "SPDX-2.3",
            "name": "SimpleSBOM",
            "packages": [{
                "name": "Foo",
                "SPDXID": "SPDXRef-foo",
                "versionInfo": "v1",
                "supplier": "Organization: foo",
                "externalRefs": [{
                    "referenceCategory": "PACKAGE-MANAGER",
                    "referenceType": "purl",
                    "referenceLocator": "pkg:foo"
                }]
            }]
        }"""
    )
    checker = eo_checker()
    checker.check_packages(doc)
    assert len(checker.pkg_results) == 1
    assert checker.pkg_results[0].package == types.Package(name="Foo", spdx_id="foo")
    assert checker.pkg_results[0].errors == []


def test_eo_checker_missing_supplier_package():
    checker = eo_checker()
    checker.check_packages(Document(packages=[_good_package(supplier=None)]))
    errors = checker.pkg_results[0].errors
    assert len(errors) == 1
    assert errors[0].check_name == "Check that the package has a supplier"
    assert errors[0].reported_by_spec == ["EO"]


def test_eo_top_level_checks_tag_check_names():
    checker = eo_checker()
    checker.run_top_level_checks(Document())
    names = {issue.check_name for issue in checker.issues}
    assert "Check that the SBOM has a version" in names
    assert "Check that the SBOM has at least one creator" in names
    assert all(issue.reported_by_spec == ["EO"] for issue in checker.issues)