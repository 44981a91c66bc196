"""Tests for archreview.config: options and .archreview.yml loading."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from archreview.config import CONFIG_FILENAME, ReviewOptions, load_options
from archreview.errors import ReviewError

if TYPE_CHECKING:
    from pathlib import Path


class TestLoadOptions:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_options(tmp_path) == ReviewOptions()

    def test_review_section(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text(
            "review:\n"
            "  source_dir: lib\n"
            "  detailed: true\n"
            "  format: json\n"
            "  skip_dirs: [generated, vendor]\n"
        )
        assert load_options(tmp_path) == ReviewOptions(
            detailed=True, format="json", source_dir="lib", skip_dirs=("generated", "vendor")
        )

    def test_single_skip_dir_string(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("review:\n  skip_dirs: generated\n")
        assert load_options(tmp_path).skip_dirs == ("generated",)

    def test_malformed_yaml_falls_back(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("review: [unclosed\n")
        with caplog.at_level("WARNING"):
            assert load_options(tmp_path) == ReviewOptions()
        assert "Failed to read" in caplog.text

    def test_non_mapping_falls_back(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("- just\n- a list\n")
        assert load_options(tmp_path) == ReviewOptions()

    def test_unknown_keys_ignored(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("review:\n  colour: blue\n  detailed: yes\n")
        with caplog.at_level("WARNING"):
            options = load_options(tmp_path)
        assert options.detailed is True
        assert "colour" in caplog.text

    def test_invalid_format_is_fatal(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("review:\n  format: html\n")
        with pytest.raises(ReviewError):
            load_options(tmp_path)

    @pytest.mark.parametrize("value", ['"false"', "0", "off-ish"])
    def test_non_boolean_flag_is_ignored(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture, value: str
    ) -> None:
        (tmp_path / CONFIG_FILENAME).write_text(f"review:\n  detailed: {value}\n  fix: {value}\n")
        with caplog.at_level("WARNING"):
            options = load_options(tmp_path)
        assert options.detailed is False
        assert options.fix is False
        assert "expected true or false" in caplog.text


class TestMerged:
    def test_none_overrides_are_ignored(self) -> None:
        base = ReviewOptions(source_dir="lib", detailed=True)
        merged = base.merged(source_dir=None, detailed=None, format="json")
        assert merged == ReviewOptions(source_dir="lib", detailed=True, format="json")
