# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for language profiles, their registry and language detection."""

from __future__ import annotations

import logging
import pickle

from collections.abc import Iterator
from pathlib import Path

import pytest

from codeseam.core.chunks import ChunkKind
from codeseam.engine.chunker.profiles import (
    BlockStyle,
    Language,
    LanguageFamily,
    LanguageProfile,
    detect_file_language,
    detect_language,
    get_profile,
    profiles,
    register_profile,
    registered_languages,
)
from codeseam.engine.chunker.profiles.builtin import C
from codeseam.engine.chunker.profiles.registry import _extensions, _profiles, _tags
from codeseam.engine.chunker.structural import chunk
from codeseam.exceptions import ConfigurationError, UnsupportedLanguageError


pytestmark = [pytest.mark.unit]


@pytest.fixture
def toy_profile() -> Iterator[LanguageProfile]:
    """A minimal brace language registered for the duration of one test."""
    profile = LanguageProfile(
        name="Toy",
        aliases=("toylang",),
        extensions=("TOY",),
        line_comments=("--",),
        declaration_keywords={"proc": ChunkKind.FUNCTION, "record": ChunkKind.STRUCT},
    )
    yield register_profile(profile)
    for table in (_tags, _extensions):
        for key in [key for key, name in table.items() if name == profile.name]:
            del table[key]
    _profiles.pop(profile.name, None)


@pytest.mark.unit
class TestBuiltinProfiles:
    """The profiles registered at import time."""

    def test_builtin_languages(self) -> None:
        assert set(registered_languages()) >= {
            "c",
            "cpp",
            "java",
            "javascript",
            "typescript",
            "go",
            "rust",
            "python",
            "php",
            "scala",
            "ruby",
        }

    @pytest.mark.parametrize(
        ("tag", "name"),
        [
            ("c", "c"),
            ("C++", "cpp"),
            ("cxx", "cpp"),
            (" js ", "javascript"),
            ("ts", "typescript"),
            ("golang", "go"),
            ("rs", "rust"),
            ("py", "python"),
            ("rb", "ruby"),
            (Language.PHP, "php"),
            (Language.SCALA, "scala"),
            (Language.JAVA, "java"),
        ],
    )
    def test_lookup_by_any_tag(self, tag: str | Language, name: str) -> None:
        assert get_profile(tag).name == name

    def test_profile_passes_through(self) -> None:
        assert get_profile(C) is C

    def test_unknown_tag_raises(self) -> None:
        with pytest.raises(UnsupportedLanguageError) as exc_info:
            get_profile("cobol")
        assert exc_info.value.language == "cobol"
        assert "c" in exc_info.value.details["available"]

    def test_block_styles(self) -> None:
        assert get_profile("python").block_style is BlockStyle.INDENTATION
        assert get_profile("python").family is LanguageFamily.PYTHON_STYLE
        assert get_profile("go").block_style is BlockStyle.BRACE
        assert get_profile("ruby").block_style is BlockStyle.KEYWORD_END
        assert get_profile("ruby").family is LanguageFamily.RUBY_STYLE
        assert get_profile("scala").block_style is BlockStyle.BRACE

    def test_keyword_kinds(self) -> None:
        cpp = get_profile("cpp")
        assert cpp.keyword_kind("namespace") is ChunkKind.NAMESPACE
        assert cpp.keyword_kind("class") is ChunkKind.CLASS
        assert cpp.keyword_kind("int") is None
        assert get_profile("rust").keyword_kind("impl") is ChunkKind.CLASS

    def test_profiles_are_frozen(self) -> None:
        with pytest.raises(ValueError, match="frozen"):
            C.name = "d"  # type: ignore[misc]

    def test_profiles_view_is_read_only(self) -> None:
        view = profiles()
        assert view["c"] is C
        with pytest.raises(TypeError):
            view["d"] = C  # type: ignore[index]

    def test_profiles_pickle(self) -> None:
        restored = pickle.loads(pickle.dumps(get_profile("cpp")))
        assert restored == get_profile("cpp")
        assert restored.recognizers.operator_overload is not None


@pytest.mark.unit
class TestRegistration:
    """Registering profiles at runtime."""

    def test_registered_profile_is_usable(self, toy_profile: LanguageProfile) -> None:
        assert toy_profile.name == "toy"
        assert toy_profile.extensions == (".toy",)
        assert get_profile("TOYLANG") is toy_profile
        assert Language.is_member("toy")
        chunks = chunk(b"-- A record.\nrecord Pair { a; b; }\nproc swap(p) { p; }\n", "toy")
        assert [(c.kind, c.name) for c in chunks] == [
            (ChunkKind.STRUCT, "Pair"),
            (ChunkKind.FUNCTION, "swap"),
        ]
        assert chunks[0].doc_comment == "A record."

    def test_registered_extension_detection(self, toy_profile: LanguageProfile) -> None:
        assert detect_language("src/main.toy") == "toy"

    def test_conflicting_registration_raises(self, toy_profile: LanguageProfile) -> None:
        clash = LanguageProfile(name="other", aliases=("toylang",))
        with pytest.raises(ConfigurationError):
            register_profile(clash)
        assert "other" not in _profiles

    def test_replace_rebinds_tags(self, toy_profile: LanguageProfile) -> None:
        replacement = toy_profile.model_copy(update={"aliases": ("toy2",)})
        register_profile(replacement, replace=True)
        assert get_profile("toy2") is replacement
        assert "toylang" not in _tags

    def test_replace_never_takes_another_profiles_tags(self, toy_profile: LanguageProfile) -> None:
        c_profile = get_profile("c")
        grabber = toy_profile.model_copy(update={"aliases": ("toylang", "c")})
        with pytest.raises(ConfigurationError) as exc_info:
            register_profile(grabber, replace=True)
        assert exc_info.value.details["conflicting_tags"] == ["c"]
        assert exc_info.value.details["owners"] == ["c"]
        assert get_profile("c") is c_profile
        assert get_profile("toylang") is toy_profile

    def test_extension_takeover_is_logged(
        self, toy_profile: LanguageProfile, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.INFO, logger="codeseam")
        register_profile(toy_profile.model_copy(update={"extensions": (".toy", ".go")}), replace=True)
        try:
            assert detect_language("main.go") == "toy"
            assert "Extension .go moves from go to toy" in caplog.text
        finally:
            register_profile(get_profile("go"), replace=True)
        assert detect_language("main.go") == "go"


@pytest.mark.unit
class TestLanguageDetection:
    """Extension and content based detection."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("a/b/main.go", "go"),
            ("lib.rs", "rust"),
            ("App.JAVA", "java"),
            ("index.mjs", "javascript"),
            ("types.d.ts", "typescript"),
            ("tool.py", "python"),
            ("engine.cc", "cpp"),
            ("index.php", "php"),
            ("Main.scala", "scala"),
            ("Rakefile.rake", "ruby"),
            ("app.gemspec", "ruby"),
            ("README.md", None),
            ("Makefile", None),
        ],
    )
    def test_by_extension(self, path: str, expected: str | None) -> None:
        assert detect_language(path) == expected

    def test_c_header_with_cpp_markers_is_cpp(self) -> None:
        assert detect_language("x.h", b"namespace a { class B; }") == "cpp"

    def test_c_header_with_c_markers_is_c(self) -> None:
        assert detect_language("x.h", "typedef struct point point_t;\nint area(void);\n") == "c"

    def test_c_header_without_markers_defaults_to_cpp(self) -> None:
        assert detect_language("x.h", "#pragma once\n") == "cpp"
        assert detect_language("x.h") == "cpp"

    def test_c_file_with_cpp_markers_is_cpp(self) -> None:
        assert detect_language("x.c", "std::string s;") == "cpp"
        assert detect_language("x.c", "int main(void) { return 0; }") == "c"

    def test_detect_file_reads_ambiguous_files(self, tmp_path: Path) -> None:
        header = tmp_path / "point.h"
        header.write_text("struct point { int x; };\n")
        assert detect_file_language(header) == "c"
        assert detect_file_language(tmp_path / "never_read.go") == "go"
