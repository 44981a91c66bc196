"""Tests for archreview.violations: severity buckets and the violation store."""

from __future__ import annotations

from pathlib import Path

from archreview.violations import (
    ReviewResult,
    Severity,
    Violation,
    ViolationCode,
    ViolationStore,
)

ROOT = Path("/test-project")


class TestViolationCode:
    def test_codes_carry_default_severity(self) -> None:
        assert ViolationCode.LAYER_VIOLATION.severity is Severity.ERROR
        assert ViolationCode.ANY_TYPE.severity is Severity.WARNING
        assert ViolationCode.MULTIPLE_INTERFACES.severity is Severity.INFO

    def test_str_is_label(self) -> None:
        assert str(ViolationCode.REPOSITORY_DI) == "REPOSITORY_DI"

    def test_codes_are_distinct_members(self) -> None:
        # Members sharing a severity must not collapse into aliases.
        assert len(ViolationCode) == 12


class TestViolationStore:
    def test_add_error(self) -> None:
        store = ViolationStore(ROOT)
        store.add(
            Severity.ERROR,
            ROOT / "src" / "domain" / "User.ts",
            10,
            ViolationCode.LAYER_VIOLATION,
            "Domain cannot import from infrastructure",
        )
        assert store.result.errors == [
            Violation(
                severity=Severity.ERROR,
                file="src/domain/User.ts",
                line=10,
                code=ViolationCode.LAYER_VIOLATION,
                message="Domain cannot import from infrastructure",
            )
        ]
        assert store.result.stats.total_violations == 1

    def test_add_warning(self) -> None:
        store = ViolationStore(ROOT)
        store.add(
            Severity.WARNING,
            ROOT / "src" / "domain" / "interfaces" / "UserRepository.ts",
            5,
            ViolationCode.INTERFACE_NAMING,
            "Interface should be prefixed with I",
        )
        assert len(store.result.warnings) == 1
        assert store.result.warnings[0].code is ViolationCode.INTERFACE_NAMING

    def test_add_info_without_line(self) -> None:
        store = ViolationStore(ROOT)
        store.add(
            Severity.INFO,
            ROOT / "src" / "types.ts",
            None,
            ViolationCode.MULTIPLE_INTERFACES,
            "File contains multiple interfaces",
        )
        assert len(store.result.info) == 1
        assert store.result.info[0].line is None
        assert store.result.info[0].location == "src/types.ts"

    def test_total_counts_every_bucket(self) -> None:
        store = ViolationStore(ROOT)
        path = ROOT / "src" / "test.ts"
        store.add(Severity.ERROR, path, 1, ViolationCode.PARSE_ERROR, "a")
        store.add(Severity.WARNING, path, 2, ViolationCode.ANY_TYPE, "b")
        store.add(Severity.INFO, path, 3, ViolationCode.MULTIPLE_INTERFACES, "c")
        result = store.result
        assert result.stats.total_violations == 3
        assert result.stats.total_violations == (
            len(result.errors) + len(result.warnings) + len(result.info)
        )

    def test_no_deduplication(self) -> None:
        store = ViolationStore(ROOT)
        path = ROOT / "src" / "test.ts"
        store.report(ViolationCode.SERVICE_DI, path, 4, "same")
        store.report(ViolationCode.SERVICE_DI, path, 4, "same")
        assert len(store.result.warnings) == 2
        assert store.result.stats.total_violations == 2

    def test_report_uses_code_severity(self) -> None:
        store = ViolationStore(ROOT)
        store.report(ViolationCode.REPOSITORY_LOCATION, ROOT / "src" / "x.ts", 1, "m")
        assert len(store.result.errors) == 1


class TestReviewResult:
    def test_failed_only_with_errors(self) -> None:
        result = ReviewResult()
        assert not result.failed
        result.warnings.append(
            Violation(Severity.WARNING, "src/a.ts", None, ViolationCode.ANY_TYPE, "m")
        )
        assert not result.failed
        result.errors.append(
            Violation(Severity.ERROR, "src/a.ts", 1, ViolationCode.LAYER_VIOLATION, "m")
        )
        assert result.failed

    def test_violation_to_dict(self) -> None:
        v = Violation(Severity.ERROR, "src/a.ts", 3, ViolationCode.LAYER_VIOLATION, "msg")
        assert v.to_dict() == {
            "file": "src/a.ts",
            "line": 3,
            "code": "LAYER_VIOLATION",
            "message": "msg",
        }
        assert v.location == "src/a.ts:3"
