"""Command-line front end: check an SBOM against one or more specs and report."""

from __future__ import annotations

import argparse
import json
from typing import Iterable, Optional, Sequence

from .base import BaseChecker, new_checker
from .document import SbomParseError
from .types import output_from_input

VALID_FOCUS = ("package", "error")
VALID_OUTPUT = ("text", "json")
VALID_SPECS = ("google", "eo", "spdx", "all")

GREEN_CHECK = "\u2705"
RED_CROSS = "\u274c"

_TRUE_WORDS = frozenset({"1", "t", "T", "true", "TRUE", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "false", "FALSE", "False"})


def remove_duplicates(items: Iterable[str]) -> list[str]:
    """The items with later repeats dropped, first occurrences kept in order."""
    return list(dict.fromkeys(items))


def _flag_bool(value: str) -> bool:
    if value in _TRUE_WORDS:
        return True
    if value in _FALSE_WORDS:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value {value!r}")


def _bracketed(items: Iterable[str]) -> str:
    return "[" + " ".join(items) + "]"


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sbomconform",
        description="Check an SBOM for conformance with one or more specs.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--sbom", "-sbom",
        default="testdata/sboms/simple.json",
        help="The path to the SBOM file to check. The SBOM can be in JSON, YAML or "
        "Tagvalue format.",
    )
    parser.add_argument(
        "--specs", "-specs",
        default="all",
        help="The specs to check. Options are: 'google', 'eo', 'spdx', 'all' (default).",
    )
    parser.add_argument(
        "--focus", "-focus",
        default="package",
        help="'package' displays each failing package and its errors; 'error' displays "
        "the issues found and the packages that have them.",
    )
    parser.add_argument(
        "--output", "-output",
        default="text",
        help="The output format. Options are 'text' or 'json'.",
    )
    parser.add_argument(
        "--spec-summary", "-spec-summary",
        default="",
        help="View summary of particular specs. Same options as the specs flag.",
    )
    for flag, default, text in (
        ("text-summary", True, "Print a textual summary."),
        ("get-all-results", False, "Print all results in JSON format."),
        ("get-checks", False, "Print the checks in the analysis."),
    ):
        parser.add_argument(
            f"--{flag}", f"-{flag}",
            dest=flag.replace("-", "_"),
            nargs="?",
            const=True,
            default=default,
            type=_flag_bool,
            help=text,
        )
    return parser


def _validate_specs(spec_flag: str) -> Optional[list[str]]:
    specs = spec_flag.split(",")
    if "all" in specs and len(specs) != 1:
        print("If you choose 'all' specs, you cannot choose any other.")
        print("sbom-conformance found the following specs: ", _bracketed(specs))
        return None
    cleaned = remove_duplicates(specs)
    for spec in cleaned:
        if spec not in VALID_SPECS:
            print(spec, "is not a valid spec")
            return None
    if not cleaned:
        print("We need at least one spec")
        return None
    return cleaned


def _validate_spec_summary(summary_flag: str) -> Optional[list[str]]:
    if summary_flag == "":
        return []
    requested = summary_flag.split(",")
    distinct = remove_duplicates(requested)
    for spec in distinct:
        if spec not in VALID_SPECS:
            print(spec, "is not a valid spec")
            return None
        if spec.lower() == "all" and len(distinct) != 1:
            print("If you set --spec-summary to 'all', don't specify other specs")
    return requested


def _expand_specs(specs: Iterable[str]) -> list[str]:
    names: list[str] = []
    for spec in specs:
        if spec == "all":
            names.extend(("eo", "google", "spdx"))
        else:
            names.append(spec)
    return names


def _checks_report(checker: BaseChecker) -> str:
    lines = []
    for check in checker.all_checks():
        line = f"{check.name} | " + "".join(f"{spec} " for spec in check.specs) + "| "
        if check.failed_pkgs_percent is not None:
            symbol = GREEN_CHECK if check.failed_pkgs_percent == 0 else RED_CROSS
            line += f"{100 - check.failed_pkgs_percent:.0f}% packages passed {symbol}\n"
        elif check.passed_high_level:
            line += f"Passed {GREEN_CHECK}\n"
        else:
            line += f"Failed {RED_CROSS}\n"
        lines.append(line)
    return "".join(lines)


def _spec_summary_line(spec_name: str, summary) -> str:
    conformant = (
        f"Conformant {GREEN_CHECK}" if summary.conformant else f"NOT conformant {RED_CROSS}"
    )
    return (
        f"{spec_name}: {summary.passed_checks}/{summary.total_checks} checks passed"
        f" | {conformant}\n"
    )


def _spec_summaries_report(checker: BaseChecker, requested: list[str]) -> str:
    summaries = checker.results().summary.spec_summaries or {}
    if requested[0].lower() == "all":
        return "".join(_spec_summary_line(name, s) for name, s in summaries.items())
    return "".join(
        _spec_summary_line(name, s)
        for chosen in requested
        for name, s in summaries.items()
        if name.casefold() == chosen.casefold()
    )


def _print_top_level_issues(checker: BaseChecker) -> None:
    print("\nTop-level issues:")
    for issue in checker.top_level_results:
        print(
            "Issue:\n  ",
            issue.error_message,
            "\n   NonConformant With Specs: ",
            _bracketed(issue.non_conformant_with_specs),
        )


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line; returns the exit status."""
    args = _parser().parse_args(argv)

    if args.sbom == "":
        print("You need to provide an SBOM.")
        return 1
    outputs = args.output.split(",")
    if len(outputs) != 1:
        print("You can only choose one output format")
        return 1
    chosen_output = outputs[0]
    if chosen_output not in VALID_OUTPUT:
        print(
            "You have to choose any of the following as the output: ",
            _bracketed(VALID_OUTPUT),
        )
        return 1

    specs = _validate_specs(args.specs)
    if specs is None:
        return 1
    specs_for_summary = _validate_spec_summary(args.spec_summary)
    if specs_for_summary is None:
        return 1

    if args.focus not in VALID_FOCUS:
        print("The --focus flag needs to be either 'package' or 'error'")

    try:
        checker = new_checker(_expand_specs(specs)).with_sbom_file(args.sbom)
    except OSError as exc:
        print(f"error opening File: {exc}")
        return 1
    except SbomParseError as exc:
        print(exc)
        return 1

    checker.run_checks()

    print("Results")
    total = checker.number_of_sbom_packages()
    failed = total - checker.number_of_compliant_packages()

    if args.text_summary:
        print(checker.results().text_summary)

    if args.get_all_results:
        _print_json(checker.results().to_dict())
        return 0

    if args.get_checks:
        print(_checks_report(checker))

    if specs_for_summary:
        print(_spec_summaries_report(checker, specs_for_summary))

    if args.focus == "package":
        if chosen_output == "text":
            for pack in checker.pkg_results:
                if not pack.errors:
                    continue
                name = pack.package.name if pack.package is not None else ""
                print("\npackage", name, ": ")
                for issue in pack.errors:
                    print(
                        "  error: ",
                        issue.error.error_msg,
                        "\n     required by spec(s): ",
                        _bracketed(issue.reported_by_spec),
                    )
            _print_top_level_issues(checker)
        else:
            output = output_from_input(
                checker.pkg_results, None, total, failed, checker.all_checks()
            )
            _print_json(output.to_dict())
    elif args.focus == "error":
        if chosen_output == "text":
            for error, packages in checker.errs_and_packs.items():
                noun = "package" if len(packages) == 1 else "packages"
                print(f"{error} --- affects {len(packages)}/{total} {noun}")
            _print_top_level_issues(checker)
        else:
            output = output_from_input(
                None, checker.errs_and_packs, total, failed, checker.all_checks()
            )
            _print_json(output.to_dict())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())