"""An SPDX 2.3 document model with JSON, YAML and tag-value readers."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import yaml

SPDX_REF_PREFIX = "SPDXRef-"
NOASSERTION = "NOASSERTION"

_TAG_RE = re.compile(r"[A-Za-z][A-Za-z0-9]*")


class SbomParseError(ValueError):
    """Raised when an SBOM cannot be read."""


def render_element_id(element_id: str) -> str:
    """Return the full SPDX identifier for a stripped element id."""
    return SPDX_REF_PREFIX + element_id


def _element_id(value: str) -> str:
    value = value.strip()
    if not value.startswith(SPDX_REF_PREFIX):
        raise SbomParseError(f"expected prefix {SPDX_REF_PREFIX}, got {value}")
    if ":" in value:
        raise SbomParseError(f"invalid character in identifier {value}")
    stripped = value[len(SPDX_REF_PREFIX):]
    if not stripped:
        raise SbomParseError(f"identifier {value} is empty after the prefix")
    return stripped


def _split_actor(text: str, what: str) -> tuple[str, str]:
    kind, sep, name = text.partition(": ")
    if not sep:
        raise SbomParseError(f"failed to parse {what} '{text}'")
    return kind, name


@dataclass
class Creator:
    """A creator of the document, such as a tool or organisation."""

    creator: str
    creator_type: str = ""

    @classmethod
    def parse(cls, text: str) -> "Creator":
        kind, name = _split_actor(text, "Creator")
        return cls(creator=name, creator_type=kind)


@dataclass
class CreationInfo:
    creators: list[Creator] = field(default_factory=list)
    created: str = ""
    creator_comment: str = ""
    license_list_version: str = ""


@dataclass
class Supplier:
    """A package supplier or originator."""

    supplier: str
    supplier_type: str = ""

    @classmethod
    def parse(cls, text: str, what: str = "Supplier") -> "Supplier":
        if text == NOASSERTION:
            return cls(supplier=text)
        kind, name = _split_actor(text, what)
        return cls(supplier=name, supplier_type=kind)


@dataclass
class VerificationCode:
    value: str = ""
    excluded_files: list[str] = field(default_factory=list)


@dataclass
class ExternalReference:
    category: str = ""
    ref_type: str = ""
    locator: str = ""
    comment: str = ""


@dataclass
class OtherLicense:
    license_identifier: str = ""
    extracted_text: str = ""
    license_name: str = ""
    license_cross_references: list[str] = field(default_factory=list)
    license_comment: str = ""


@dataclass
class Relationship:
    ref_a: str = ""
    relationship: str = ""
    ref_b: str = ""
    comment: str = ""


@dataclass
class SbomPackage:
    name: str = ""
    spdx_id: str = ""
    version: str = ""
    file_name: str = ""
    supplier: Optional[Supplier] = None
    originator: Optional[Supplier] = None
    download_location: str = ""
    files_analyzed: bool = True
    verification_code: Optional[VerificationCode] = None
    homepage: str = ""
    license_concluded: str = ""
    license_info_from_files: list[str] = field(default_factory=list)
    license_declared: str = ""
    copyright_text: str = ""
    summary: str = ""
    description: str = ""
    comment: str = ""
    external_references: list[ExternalReference] = field(default_factory=list)


@dataclass
class Document:
    spdx_version: str = ""
    data_license: str = ""
    spdx_identifier: str = ""
    document_name: str = ""
    document_namespace: str = ""
    creation_info: Optional[CreationInfo] = None
    packages: list[SbomPackage] = field(default_factory=list)
    other_licenses: Optional[list[OtherLicense]] = None
    relationships: list[Relationship] = field(default_factory=list)


# --- mapping (JSON / YAML) reading -------------------------------------------


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise SbomParseError(f"field '{key}' must be a string")
    return value


def _list(data: dict, key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise SbomParseError(f"field '{key}' must be a list")
    return value


def _mapping(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise SbomParseError(f"{what} must be an object")
    return value


def _strings(data: dict, key: str) -> list[str]:
    values = _list(data, key)
    if not all(isinstance(v, str) for v in values):
        raise SbomParseError(f"field '{key}' must hold strings")
    return values


def _package_from_mapping(data: dict) -> SbomPackage:
    package = SbomPackage(
        name=_text(data, "name"),
        version=_text(data, "versionInfo"),
        file_name=_text(data, "packageFileName"),
        download_location=_text(data, "downloadLocation"),
        homepage=_text(data, "homepage"),
        license_concluded=_text(data, "licenseConcluded"),
        license_info_from_files=_strings(data, "licenseInfoFromFiles"),
        license_declared=_text(data, "licenseDeclared"),
        copyright_text=_text(data, "copyrightText"),
        summary=_text(data, "summary"),
        description=_text(data, "description"),
        comment=_text(data, "comment"),
    )
    if spdx_id := _text(data, "SPDXID"):
        package.spdx_id = _element_id(spdx_id)
    if supplier := _text(data, "supplier"):
        package.supplier = Supplier.parse(supplier)
    if originator := _text(data, "originator"):
        package.originator = Supplier.parse(originator, "Originator")
    analyzed = data.get("filesAnalyzed")
    if analyzed is not None:
        if not isinstance(analyzed, bool):
            raise SbomParseError("field 'filesAnalyzed' must be a boolean")
        package.files_analyzed = analyzed
    code = data.get("packageVerificationCode")
    if code is not None:
        code = _mapping(code, "packageVerificationCode")
        package.verification_code = VerificationCode(
            value=_text(code, "packageVerificationCodeValue"),
            excluded_files=_strings(code, "packageVerificationCodeExcludedFiles"),
        )
    package.external_references = [
        ExternalReference(
            category=_text(ref, "referenceCategory"),
            ref_type=_text(ref, "referenceType"),
            locator=_text(ref, "referenceLocator"),
            comment=_text(ref, "comment"),
        )
        for ref in (_mapping(r, "externalRefs entry") for r in _list(data, "externalRefs"))
    ]
    return package


def _document_from_mapping(data: Any) -> Document:
    data = _mapping(data, "SBOM document")
    doc = Document(
        spdx_version=_text(data, "spdxVersion"),
        data_license=_text(data, "dataLicense"),
        document_name=_text(data, "name"),
        document_namespace=_text(data, "documentNamespace"),
    )
    if spdx_id := _text(data, "SPDXID"):
        doc.spdx_identifier = _element_id(spdx_id)

    info = data.get("creationInfo")
    if info is not None:
        info = _mapping(info, "creationInfo")
        doc.creation_info = CreationInfo(
            creators=[Creator.parse(c) for c in _strings(info, "creators")],
            created=_text(info, "created"),
            creator_comment=_text(info, "comment"),
            license_list_version=_text(info, "licenseListVersion"),
        )

    doc.packages = [
        _package_from_mapping(_mapping(p, "package")) for p in _list(data, "packages")
    ]

    if data.get("hasExtractedLicensingInfos") is not None:
        doc.other_licenses = [
            OtherLicense(
                license_identifier=_text(lic, "licenseId"),
                extracted_text=_text(lic, "extractedText"),
                license_name=_text(lic, "name"),
                license_cross_references=_strings(lic, "seeAlsos"),
                license_comment=_text(lic, "comment"),
            )
            for lic in (
                _mapping(item, "hasExtractedLicensingInfos entry")
                for item in _list(data, "hasExtractedLicensingInfos")
            )
        ]

    doc.relationships = [
        Relationship(
            ref_a=_text(rel, "spdxElementId"),
            relationship=_text(rel, "relationshipType"),
            ref_b=_text(rel, "relatedSpdxElement"),
            comment=_text(rel, "comment"),
        )
        for rel in (_mapping(r, "relationship") for r in _list(data, "relationships"))
    ]
    document_ref = render_element_id(doc.spdx_identifier or "DOCUMENT")
    doc.relationships.extend(
        Relationship(ref_a=document_ref, relationship="DESCRIBES", ref_b=described)
        for described in _strings(data, "documentDescribes")
    )
    return doc


def parse_json(text: str) -> Document:
    """Read an SPDX 2.3 document from JSON text."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SbomParseError(f"invalid JSON: {exc}") from exc
    return _document_from_mapping(data)


class _StringDateLoader(yaml.SafeLoader):
    """A safe loader that keeps dates and timestamps as strings."""


_StringDateLoader.yaml_implicit_resolvers = {
    first: [(tag, rx) for tag, rx in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def parse_yaml(text: str) -> Document:
    """Read an SPDX 2.3 document from YAML text."""
    try:
        data = yaml.load(text, Loader=_StringDateLoader)
    except yaml.YAMLError as exc:
        raise SbomParseError(f"invalid YAML: {exc}") from exc
    return _document_from_mapping(data)


# --- tag-value reading --------------------------------------------------------


def _tag_value_pairs(text: str):
    pending: Optional[tuple[str, list[str]]] = None
    for lineno, raw in enumerate(text.splitlines(), 1):
        if pending is not None:
            tag, parts = pending
            if "</text>" in raw:
                parts.append(raw[: raw.index("</text>")])
                yield tag, "\n".join(parts)
                pending = None
            else:
                parts.append(raw)
            continue
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        tag, sep, value = line.partition(":")
        tag, value = tag.strip(), value.strip()
        if not sep or not _TAG_RE.fullmatch(tag):
            raise SbomParseError(f"line {lineno}: expected 'Tag: value'")
        if value.startswith("<text>"):
            body = value[len("<text>"):]
            if "</text>" in body:
                yield tag, body[: body.index("</text>")]
            else:
                pending = (tag, [body])
        else:
            yield tag, value
    if pending is not None:
        raise SbomParseError(f"unterminated <text> block for tag {pending[0]}")


def _verification_code(value: str) -> VerificationCode:
    code, sep, rest = value.partition("(excludes:")
    if not sep:
        return VerificationCode(value=value.strip())
    excluded = rest.rstrip().rstrip(")")
    return VerificationCode(
        value=code.strip(),
        excluded_files=[f.strip() for f in excluded.split(",") if f.strip()],
    )


def _package_tag(package: SbomPackage, tag: str, value: str) -> None:
    match tag:
        case "PackageVersion":
            package.version = value
        case "PackageFileName":
            package.file_name = value
        case "PackageSupplier":
            package.supplier = Supplier.parse(value)
        case "PackageOriginator":
            package.originator = Supplier.parse(value, "Originator")
        case "PackageDownloadLocation":
            package.download_location = value
        case "FilesAnalyzed":
            if value.lower() not in ("true", "false"):
                raise SbomParseError(f"invalid FilesAnalyzed value '{value}'")
            package.files_analyzed = value.lower() == "true"
        case "PackageVerificationCode":
            package.verification_code = _verification_code(value)
        case "PackageHomePage":
            package.homepage = value
        case "PackageLicenseConcluded":
            package.license_concluded = value
        case "PackageLicenseInfoFromFiles":
            package.license_info_from_files.append(value)
        case "PackageLicenseDeclared":
            package.license_declared = value
        case "PackageCopyrightText":
            package.copyright_text = value
        case "PackageSummary":
            package.summary = value
        case "PackageDescription":
            package.description = value
        case "PackageComment":
            package.comment = value
        case "ExternalRef":
            parts = value.split()
            if len(parts) != 3:
                raise SbomParseError(f"invalid ExternalRef '{value}'")
            category, ref_type, locator = parts
            package.external_references.append(
                ExternalReference(category=category, ref_type=ref_type, locator=locator)
            )


_PACKAGE_TAGS = frozenset(
    {
        "PackageVersion", "PackageFileName", "PackageSupplier", "PackageOriginator",
        "PackageDownloadLocation", "FilesAnalyzed", "PackageVerificationCode",
        "PackageHomePage", "PackageLicenseConcluded", "PackageLicenseInfoFromFiles",
        "PackageLicenseDeclared", "PackageCopyrightText", "PackageSummary",
        "PackageDescription", "PackageComment", "ExternalRef",
    }
)


def parse_tag_value(text: str) -> Document:
    """Read an SPDX 2.3 document from tag-value text."""
    doc = Document()
    state = "document"
    package: Optional[SbomPackage] = None
    license_: Optional[OtherLicense] = None
    seen_any = False

    def creation_info() -> CreationInfo:
        if doc.creation_info is None:
            doc.creation_info = CreationInfo()
        return doc.creation_info

    for tag, value in _tag_value_pairs(text):
        seen_any = True
        if tag in _PACKAGE_TAGS:
            if package is None:
                raise SbomParseError(f"tag {tag} appears before any PackageName")
            _package_tag(package, tag, value)
            continue
        match tag:
            case "SPDXVersion":
                doc.spdx_version = value
            case "DataLicense":
                doc.data_license = value
            case "SPDXID":
                if state == "document":
                    doc.spdx_identifier = _element_id(value)
                elif state == "package" and package is not None:
                    package.spdx_id = _element_id(value)
            case "DocumentName":
                doc.document_name = value
            case "DocumentNamespace":
                doc.document_namespace = value
            case "Creator":
                creation_info().creators.append(Creator.parse(value))
            case "Created":
                creation_info().created = value
            case "CreatorComment":
                creation_info().creator_comment = value
            case "LicenseListVersion":
                creation_info().license_list_version = value
            case "PackageName":
                package = SbomPackage(name=value)
                doc.packages.append(package)
                state = "package"
            case "FileName":
                state = "file"
            case "SnippetSPDXID":
                state = "snippet"
            case "LicenseID":
                license_ = OtherLicense(license_identifier=value)
                if doc.other_licenses is None:
                    doc.other_licenses = []
                doc.other_licenses.append(license_)
                state = "license"
            case "ExtractedText" | "LicenseName" | "LicenseCrossReference" | "LicenseComment":
                if license_ is None:
                    raise SbomParseError(f"tag {tag} appears before any LicenseID")
                if tag == "ExtractedText":
                    license_.extracted_text = value
                elif tag == "LicenseName":
                    license_.license_name = value
                elif tag == "LicenseCrossReference":
                    license_.license_cross_references.append(value)
                else:
                    license_.license_comment = value
            case "Relationship":
                parts = value.split()
                if len(parts) != 3:
                    raise SbomParseError(f"invalid Relationship '{value}'")
                ref_a, kind, ref_b = parts
                doc.relationships.append(
                    Relationship(ref_a=ref_a, relationship=kind, ref_b=ref_b)
                )
            case "RelationshipComment":
                if not doc.relationships:
                    raise SbomParseError("RelationshipComment without a Relationship")
                doc.relationships[-1].comment = value
            case _:
                pass
    if not seen_any:
        raise SbomParseError("no tag-value pairs found")
    return doc


def parse_sbom(data: Union[str, bytes, Any]) -> Document:
    """Read an SBOM as JSON, then tag-value, then YAML; the first that works wins."""
    if hasattr(data, "read"):
        data = data.read()
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SbomParseError("could not parse SBOM") from exc
    last_error: Optional[SbomParseError] = None
    for parser in (parse_json, parse_tag_value, parse_yaml):
        try:
            return parser(data)
        except SbomParseError as exc:
            last_error = exc
    raise SbomParseError("could not parse SBOM") from last_error