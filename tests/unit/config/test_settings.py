# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for settings loading and precedence."""

from __future__ import annotations

from pathlib import Path

import pytest

from pydantic import ValidationError

from codeseam.config.chunker import ChunkerSettings, DocCommentSettings, PerformanceSettings
from codeseam.config.settings import CodeSeamSettings, get_settings, reset_settings
from codeseam.engine.chunker.assembler import DeclarationPolicy
from codeseam.engine.chunker.boundary import MAX_NESTING_DEPTH
from codeseam.exceptions import ConfigurationError


pytestmark = [pytest.mark.unit]


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty working directory, so no stray config files are picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.mark.unit
class TestDefaults:
    """Settings with no configuration at all."""

    def test_chunker_defaults(self, workdir: Path) -> None:
        settings = CodeSeamSettings()
        assert settings.chunker.declaration_policy is DeclarationPolicy.SIGNATURE
        assert settings.chunker.performance.max_file_size_mb == 10
        assert settings.chunker.performance.max_nesting_depth == 100
        assert settings.chunker.performance.max_chunks_per_file is None
        assert settings.chunker.concurrency.executor == "process"
        assert settings.chunker.doc_comments.blank_line_tolerance is None

    def test_logging_defaults(self, workdir: Path) -> None:
        assert CodeSeamSettings().logging == {"level": 30, "use_rich": True}

    def test_limits_are_validated(self) -> None:
        with pytest.raises(ValidationError):
            PerformanceSettings(max_chunks_per_file=0)
        with pytest.raises(ValidationError):
            PerformanceSettings(max_nesting_depth=MAX_NESTING_DEPTH + 1)
        assert PerformanceSettings(max_nesting_depth=MAX_NESTING_DEPTH).max_nesting_depth == 128
        with pytest.raises(ValidationError):
            DocCommentSettings(blank_line_tolerance=-1)

    def test_file_size_in_bytes(self) -> None:
        assert PerformanceSettings(max_file_size_mb=2).max_file_size_bytes == 2 * 1024 * 1024


@pytest.mark.unit
class TestSources:
    """Environment variables and TOML files."""

    def test_environment_overrides(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CODESEAM_CHUNKER__DECLARATION_POLICY", "proximity")
        monkeypatch.setenv("CODESEAM_CHUNKER__PERFORMANCE__MAX_CHUNKS_PER_FILE", "7")
        settings = CodeSeamSettings()
        assert settings.chunker.declaration_policy is DeclarationPolicy.PROXIMITY
        assert settings.chunker.performance.max_chunks_per_file == 7
        assert settings.chunker.performance.max_file_size_mb == 10

    def test_toml_in_working_directory(self, workdir: Path) -> None:
        (workdir / "codeseam.toml").write_text(
            '[chunker]\ndeclaration_policy = "keep_all"\n\n'
            "[chunker.doc_comments]\nblank_line_tolerance = 2\n"
        )
        settings = CodeSeamSettings()
        assert settings.chunker.declaration_policy is DeclarationPolicy.KEEP_ALL
        assert settings.chunker.doc_comments.blank_line_tolerance == 2

    def test_environment_beats_toml(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (workdir / "codeseam.toml").write_text('[chunker]\ndeclaration_policy = "keep_all"\n')
        monkeypatch.setenv("CODESEAM_CHUNKER__DECLARATION_POLICY", "signature")
        assert CodeSeamSettings().chunker.declaration_policy is DeclarationPolicy.SIGNATURE

    def test_init_arguments_win(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CODESEAM_CHUNKER__DECLARATION_POLICY", "proximity")
        settings = CodeSeamSettings(chunker=ChunkerSettings(declaration_policy="keep_all"))
        assert settings.chunker.declaration_policy is DeclarationPolicy.KEEP_ALL


@pytest.mark.unit
class TestFromConfig:
    """Loading one explicit file."""

    def test_loads_the_file(self, workdir: Path) -> None:
        path = workdir / "custom.toml"
        path.write_text("[chunker.performance]\nmax_nesting_depth = 12\n")
        settings = CodeSeamSettings.from_config(path)
        assert settings.chunker.performance.max_nesting_depth == 12

    def test_keyword_arguments_win(self, workdir: Path) -> None:
        path = workdir / "custom.toml"
        path.write_text("[logging]\nlevel = 20\n")
        assert CodeSeamSettings.from_config(path).logging == {"level": 20}
        assert CodeSeamSettings.from_config(path, logging={"level": 10}).logging == {"level": 10}

    def test_rejects_other_formats(self, workdir: Path) -> None:
        path = workdir / "codeseam.yaml"
        path.write_text("chunker: {}\n")
        with pytest.raises(ConfigurationError, match="Unsupported configuration file format"):
            CodeSeamSettings.from_config(path)

    def test_missing_file(self, workdir: Path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            CodeSeamSettings.from_config(workdir / "missing.toml")
        assert exc_info.value.details["file_path"].endswith("missing.toml")


@pytest.mark.unit
class TestGlobalSettings:
    """The process-wide instance."""

    def test_instance_is_cached_until_reset(self, workdir: Path) -> None:
        first = get_settings()
        assert get_settings() is first
        reset_settings()
        assert get_settings() is not first

    def test_config_file_rebuilds_the_instance(self, workdir: Path) -> None:
        before = get_settings()
        path = workdir / "other.toml"
        path.write_text('[chunker]\ndeclaration_policy = "proximity"\n')
        after = get_settings(path)
        assert after is not before
        assert get_settings() is after
        assert after.chunker.declaration_policy is DeclarationPolicy.PROXIMITY


@pytest.mark.unit
class TestDocCommentSettings:
    """Per-language tolerance lookup."""

    def test_tolerance_for(self) -> None:
        settings = DocCommentSettings(blank_line_tolerance=1, per_language={"python": 0})
        assert settings.tolerance_for("python") == 0
        assert settings.tolerance_for("c") == 1
        assert DocCommentSettings().tolerance_for("c") is None
