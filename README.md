# sbomconform

`sbomconform` checks an SPDX 2.3 SBOM against one or more conformance
specs and reports which packages and which document-level fields fall
short. Three specs are built in:

- **Google** (`sbomconform.google.google_checker`): document metadata,
  creators, other licensing fields, package names, package SPDX IDs,
  suppliers and license information.
- **EO** (`sbomconform.eo.eo_checker`): SPDX version, creators,
  relationship types, package names, versions, suppliers and external
  references.
- **SPDX** (`sbomconform.spdx_spec.spdx_checker`): document metadata,
  creators, package names, package SPDX IDs, verification codes and
  download locations.

An SBOM may be given as JSON, tag-value or YAML; the readers are tried in
that order and the first that succeeds is used. When several specs are
run together, an identical finding is reported once, listing every spec
that raised it.

## Installation

```
pip install .
```

## Command line

```
sbomconform --sbom path/to/sbom.json
```

Options (each may also be written with a single dash, e.g. `-sbom`):

| Option | Meaning |
| --- | --- |
| `--sbom PATH` | SBOM to check. Defaults to `testdata/sboms/simple.json`. |
| `--specs LIST` | Comma-separated specs: `google`, `eo`, `spdx`, or `all` (default). `all` cannot be combined with others. |
| `--focus MODE` | `package` (default) lists each failing package with its errors; `error` lists each issue with the number of packages it affects. |
| `--output FORMAT` | `text` (default) or `json`. |
| `--spec-summary LIST` | Show passed/total checks and conformance for the given specs. Takes the same values as `--specs`. |
| `--text-summary [BOOL]` | Print the textual summary. On by default; `--text-summary false` turns it off. |
| `--get-all-results [BOOL]` | Print all results as JSON and stop. |
| `--get-checks [BOOL]` | List every check in the run, the specs it belongs to and how it fared. |

Invalid option values are reported with a message and the command exits
with status 1. A `--focus` value other than `package` or `error` is
reported, and then only the summaries are printed.

Example: only the EO spec, grouped by error, as JSON:

```
sbomconform --sbom sbom.json --specs eo --focus error --output json
```

## Library use

```python
import json

from sbomconform.base import new_checker

checker = new_checker(["eo", "google", "spdx"]).with_sbom_file("sbom.json")
checker.run_checks()
print(checker.text_summary())
print(json.dumps(checker.results().to_dict(), indent=2))
```

`new_checker` takes spec names (`"google"`, `"eo"`, `"spdx"`) or
`SpecChecker` objects such as those returned by `eo_checker()`. It raises
`NoSpecError` when given no spec and `ValueError` for an unknown name.

`with_sbom` accepts text, bytes or a file-like object; `with_sbom_file`
reads a path. Both return a fresh checker that keeps the specs but none
of the earlier results, and raise `sbomconform.document.SbomParseError`
when the document can be read in none of the supported formats.
`run_checks` raises `ValueError` if no SBOM has been set.

After `run_checks()` a checker offers:

- `results()`: an `Output` with the text summary, package counts, spec
  summaries, per-package results, a map of error messages to affected
  packages and the checks in the run; `to_dict()` gives a JSON-ready
  mapping.
- `all_checks()`: one `CheckSummary` per check, with its specs and either
  the percentage of failed packages or whether a document-level check
  passed.
- `spec_summaries()`: per spec, passed and total checks and whether the
  SBOM conforms.
- `number_of_sbom_packages()` and `number_of_compliant_packages()`.

Documents can also be read directly with `parse_json`, `parse_yaml`,
`parse_tag_value` or `parse_sbom` from `sbomconform.document`.

## Limits

The document readers keep only the SPDX fields the checks look at
(document metadata, creation info, packages, other licenses and
relationships). Files and snippets are skipped, and documents cannot be
written back out.

## Running the tests

```
pip install ".[test]"
pytest
```