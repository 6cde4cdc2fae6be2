"""Tests for license allow-list validation and aggregation."""

from __future__ import annotations

import itertools

import pytest

from noticegen.errors import LicenseViolation
from noticegen.types import DependencySource, Violation
from noticegen.validate import (
    DETERMINISTIC_TIMESTAMP,
    check_dependencies,
    merge_records,
    validate_dependencies,
)
from tests.unit.notice_test_utils import record

PNPM = DependencySource.PNPM


class TestScenarios:
    """Reference scenarios for the validator."""

    def test_allowed_package_produces_single_entry(self) -> None:
        report = validate_dependencies([record("libfoo", "1.0", {"MIT"})], [], ["MIT"], [])

        assert [(e.name, e.version) for e in report.entries] == [("libfoo", "1.0")]
        assert report.generated_at == DETERMINISTIC_TIMESTAMP

    def test_disallowed_license_is_violation(self) -> None:
        with pytest.raises(LicenseViolation) as exc_info:
            validate_dependencies([record("libbar", "2.0", {"GPL-3.0"})], [], ["MIT"], [])

        assert exc_info.value.violations == (
            Violation(
                package="libbar",
                version="2.0",
                offending_licenses=frozenset({"GPL-3.0"}),
                source=DependencySource.CARGO,
            ),
        )

    def test_ignored_package_yields_empty_report(self) -> None:
        report = validate_dependencies(
            [record("libbar", "2.0", {"GPL-3.0"})], [], ["MIT"], ["libbar"]
        )

        assert report.entries == ()

    def test_missing_license_is_violation_with_empty_offending_set(self) -> None:
        report, violations = check_dependencies([record("nolicense", "0.1", set())], [], ["MIT"], [])

        assert report is None
        assert len(violations) == 1
        assert violations[0].package == "nolicense"
        assert violations[0].offending_licenses == frozenset()


class TestValidation:
    def test_subset_of_allow_list_never_violates(self) -> None:
        allowed = {"MIT", "Apache-2.0", "BSD-3-Clause"}
        records = [
            record("a", licenses={"MIT"}),
            record("b", licenses={"MIT", "Apache-2.0"}),
            record("c", licenses=allowed),
        ]

        _, violations = check_dependencies(records, [], allowed, [])

        assert violations == []

    def test_partial_overlap_reports_only_offending_licenses(self) -> None:
        _, violations = check_dependencies(
            [record("dual", licenses={"MIT", "GPL-2.0"})], [], ["MIT"], []
        )

        assert violations[0].offending_licenses == frozenset({"GPL-2.0"})

    def test_empty_allow_list_allows_nothing(self) -> None:
        records = [record("a"), record("b", source=PNPM)]

        report, violations = check_dependencies(records, [], [], [])

        assert report is None
        assert [v.package for v in violations] == ["a", "b"]

    def test_empty_allow_list_still_honours_ignores(self) -> None:
        report = validate_dependencies([record("internal")], [], [], ["internal"])

        assert report.entries == ()

    def test_all_violations_are_reported_not_just_first(self) -> None:
        cargo = [record("x", licenses={"GPL-3.0"}), record("ok")]
        pnpm = [record("y", licenses={"AGPL-3.0"}, source=PNPM), record("z", licenses=set(), source=PNPM)]

        with pytest.raises(LicenseViolation) as exc_info:
            validate_dependencies(cargo, pnpm, ["MIT"], [])

        assert [v.package for v in exc_info.value.violations] == ["x", "y", "z"]
        assert "3 dependency license violation(s)" in str(exc_info.value)
        assert "(no license declared)" in str(exc_info.value)

    def test_ignored_packages_never_reported(self) -> None:
        cargo = [record("private", licenses={"Proprietary"}), record("private", "2.0", set())]
        pnpm = [record("private", licenses={"MIT"}, source=PNPM), record("public")]

        report = validate_dependencies(cargo, pnpm, ["MIT"], ["private"])

        assert [e.name for e in report.entries] == ["public"]

    def test_ignore_match_is_exact_on_name(self) -> None:
        _, violations = check_dependencies(
            [record("private-extra", licenses={"GPL-3.0"})], [], ["MIT"], ["private"]
        )

        assert [v.package for v in violations] == ["private-extra"]


class TestAggregation:
    def test_same_package_in_both_ecosystems_kept_separately(self) -> None:
        report = validate_dependencies(
            [record("shared", "1.0")], [record("shared", "1.0", source=PNPM)], ["MIT"], []
        )

        assert [(e.name, e.source) for e in report.entries] == [
            ("shared", DependencySource.CARGO),
            ("shared", PNPM),
        ]

    def test_duplicate_triples_fold_their_licenses(self) -> None:
        merged = merge_records(
            [record("dup", "1.0", {"MIT"})],
            [record("dup", "1.0", {"Apache-2.0"}), record("dup", "1.1")],
        )

        assert [(r.name, r.version, sorted(r.licenses)) for r in merged] == [
            ("dup", "1.0", ["Apache-2.0", "MIT"]),
            ("dup", "1.1", ["MIT"]),
        ]

    def test_duplicate_display_fields_do_not_depend_on_order(self) -> None:
        registry = record(
            "dup",
            "1.0",
            {"MIT"},
            license_expression="MIT",
            package_url="https://crates.io/crates/dup/1.0",
            notices=frozenset({"Copyright (c) Registry"}),
        )
        git = record(
            "dup",
            "1.0",
            {"GPL-3.0-only"},
            license_expression="GPL-3.0-only",
            package_url="git+https://example.com/dup#abc",
            notices=frozenset({"Copyright (c) Fork"}),
        )

        (forward,) = merge_records([registry, git])
        (backward,) = merge_records([git, registry])

        assert forward == backward
        assert forward.licenses == frozenset({"MIT", "GPL-3.0-only"})
        assert forward.license_expression == "(GPL-3.0-only) AND (MIT)"
        assert forward.package_url == "git+https://example.com/dup#abc"
        assert forward.notices == frozenset({"Copyright (c) Registry", "Copyright (c) Fork"})

    def test_entries_sorted_by_name_then_version(self) -> None:
        records = [
            record("zeta", "1.0"),
            record("alpha", "1.10.0"),
            record("alpha", "1.9.0"),
            record("alpha", "1.2.0"),
        ]

        report = validate_dependencies(records, [], ["MIT"], [])

        assert [(e.name, e.version) for e in report.entries] == [
            ("alpha", "1.2.0"),
            ("alpha", "1.9.0"),
            ("alpha", "1.10.0"),
            ("zeta", "1.0"),
        ]

    def test_report_licenses_is_sorted_union(self) -> None:
        report = validate_dependencies(
            [record("a", licenses={"MIT"}), record("b", licenses={"Apache-2.0", "MIT"})],
            [],
            ["MIT", "Apache-2.0"],
            [],
        )

        assert report.licenses == ["Apache-2.0", "MIT"]

    def test_generated_at_is_passed_through(self) -> None:
        report = validate_dependencies([], [], ["MIT"], [], generated_at="2026-01-01T00:00:00Z")

        assert report.generated_at == "2026-01-01T00:00:00Z"
        assert report.entries == ()


class TestDeterminism:
    RECORDS = [
        record("b", "2.0"),
        record("a", "1.0", {"Apache-2.0"}),
        record("c", "0.1", source=PNPM),
        record("a", "0.9", {"GPL-3.0"}),
    ]

    def test_permutations_give_same_report(self) -> None:
        reports = {
            validate_dependencies(perm, [], ["MIT", "Apache-2.0", "GPL-3.0"], [])
            for perm in itertools.permutations(self.RECORDS)
        }

        assert len(reports) == 1

    def test_permutations_give_same_violations(self) -> None:
        results = {
            tuple(check_dependencies(perm[:2], perm[2:], ["MIT"], [])[1])
            for perm in itertools.permutations(self.RECORDS)
        }

        assert len(results) == 1
        (violations,) = results
        assert [(v.package, v.version) for v in violations] == [("a", "0.9"), ("a", "1.0")]

    def test_conflicting_duplicates_fail_in_every_order(self) -> None:
        mit = record("dup", "1.0", {"MIT"})
        gpl = record("dup", "1.0", {"GPL-3.0"})

        results = {
            tuple(check_dependencies(list(perm), [], ["MIT"], [])[1])
            for perm in itertools.permutations([mit, gpl, record("other")])
        }

        assert results == {
            (
                Violation(
                    package="dup",
                    version="1.0",
                    offending_licenses=frozenset({"GPL-3.0"}),
                    source=DependencySource.CARGO,
                ),
            )
        }

    def test_conflicting_duplicates_across_lists_give_same_report(self) -> None:
        mit = record("dup", "1.0", {"MIT"})
        apache = record("dup", "1.0", {"Apache-2.0"})

        first = validate_dependencies([mit], [apache], ["MIT", "Apache-2.0"], [])
        second = validate_dependencies([apache], [mit], ["MIT", "Apache-2.0"], [])

        assert first == second
        assert first.entries[0].licenses == frozenset({"MIT", "Apache-2.0"})
