from sbomconform.common import must_have_name, sbom_has_spdx_version
from sbomconform.document import Document, SbomPackage
from sbomconform.spec import SpecChecker
from sbomconform.types import (
    SPDX_VERSION,
    PackageLevelCheck,
    TopLevelCheck,
    create_field_error,
)

VERSION_CHECK = "Check that the SBOM has an SPDX version"
NAME_CHECK = "Check that SBOM packages have a name"


def _checker():
    return SpecChecker(
        "EO",
        [TopLevelCheck(name=VERSION_CHECK, impl=sbom_has_spdx_version)],
        [PackageLevelCheck(name=NAME_CHECK, impl=must_have_name)],
    )


def test_check_names_lists_top_level_first():
    checker = _checker()
    assert checker.top_level_check_names() == [VERSION_CHECK]
    assert checker.package_level_check_names() == [NAME_CHECK]
    assert checker.check_names() == [VERSION_CHECK, NAME_CHECK]


def test_run_top_level_checks_tags_issues_with_check_name():
    checker = _checker()
    checker.run_top_level_checks(Document())
    assert len(checker.issues) == 1
    issue = checker.issues[0]
    assert issue.check_name == VERSION_CHECK
    assert issue.error == create_field_error(SPDX_VERSION, "EO").error
    assert issue.reported_by_spec == ["EO"]


def test_run_top_level_checks_accumulates():
    checker = _checker()
    checker.run_top_level_checks(Document())
    checker.run_top_level_checks(Document())
    assert len(checker.issues) == 2


def test_run_top_level_checks_clean_document():
    checker = _checker()
    checker.run_top_level_checks(Document(spdx_version="SPDX-2.3"))
    assert checker.issues == []


def test_check_packages_replaces_results():
    checker = _checker()
    checker.check_packages(Document(packages=[SbomPackage(spdx_id="foo")]))
    assert len(checker.pkg_results) == 1
    result = checker.pkg_results[0]
    assert result.package.spdx_id == "foo"
    assert [e.error.error_msg for e in result.errors] == ["has no PackageName field"]
    assert result.errors[0].check_name == NAME_CHECK

    checker.check_packages(
        Document(packages=[SbomPackage(name="A", spdx_id="a"), SbomPackage(name="B", spdx_id="b")])
    )
    assert [r.package.name for r in checker.pkg_results] == ["A", "B"]
    assert all(r.errors == [] for r in checker.pkg_results)