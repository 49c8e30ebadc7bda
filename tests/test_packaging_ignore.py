"""Tests for the ignore rule engine."""

import pytest

from pydanube.packaging.ignore import (
    DEFAULT_IGNORE_PATTERNS,
    IgnoreMatcher,
    IgnoreRuleSet,
    is_ignored,
    load_ignore_rules,
    parse_ignore_text,
)


class TestParseIgnoreText:
    """Tests for parse_ignore_text."""

    def test_skips_blank_lines_and_comments(self):
        text = "# build output\n\n*.log\n   \nbuild/\n"
        assert parse_ignore_text(text) == ["*.log", "build/"]

    def test_keeps_escaped_hash(self):
        assert parse_ignore_text("\\#notes.md\n") == ["\\#notes.md"]

    def test_handles_windows_line_endings(self):
        assert parse_ignore_text("a.txt\r\nb.txt\r\n") == ["a.txt", "b.txt"]

    def test_empty_text(self):
        assert parse_ignore_text("") == []


class TestIsIgnored:
    """Tests for the pure pattern evaluation."""

    def test_simple_name_matches_at_any_depth(self):
        assert is_ignored(["secret.txt"], "secret.txt")
        assert is_ignored(["secret.txt"], "nested/dir/secret.txt")
        assert not is_ignored(["secret.txt"], "secret.txt.bak")

    def test_star_glob(self):
        assert is_ignored(["*.log"], "debug.log")
        assert is_ignored(["*.log"], "logs/app.log")
        assert not is_ignored(["*.log"], "debug.txt")

    def test_star_does_not_cross_directories(self):
        assert is_ignored(["doc/*.txt"], "doc/notes.txt")
        assert not is_ignored(["doc/*.txt"], "doc/server/arch.txt")

    def test_double_star_glob(self):
        assert is_ignored(["**/temp"], "temp")
        assert is_ignored(["**/temp"], "a/b/temp")
        assert is_ignored(["assets/**/*.map"], "assets/js/vendor/app.js.map")

    def test_leading_slash_anchors_to_root(self):
        assert is_ignored(["/build"], "build", is_directory=True)
        assert not is_ignored(["/build"], "src/build", is_directory=True)

    def test_negation_reincludes(self):
        patterns = ["*.log", "!keep.log"]
        assert is_ignored(patterns, "debug.log")
        assert not is_ignored(patterns, "keep.log")

    def test_later_pattern_wins(self):
        assert is_ignored(["!keep.log", "*.log"], "keep.log")

    def test_no_patterns(self):
        assert not is_ignored([], "index.html")


class TestDirectoryOnlyPatterns:
    """A trailing slash only matches directories."""

    def test_excludes_directory(self):
        assert is_ignored(["logs/"], "logs", is_directory=True)

    def test_does_not_exclude_file_with_same_name(self):
        assert not is_ignored(["logs/"], "logs", is_directory=False)

    def test_matches_contents_of_directory(self):
        assert is_ignored(["logs/"], "logs/app.log")

    def test_nested_directory(self):
        assert is_ignored(["logs/"], "server/logs", is_directory=True)
        assert not is_ignored(["logs/"], "server/logs")

    def test_trailing_slash_in_query_is_normalized(self):
        matcher = IgnoreMatcher(["logs/"])
        assert matcher.is_excluded("logs/", is_directory=True)


class TestIgnoreMatcher:
    """Tests for IgnoreMatcher."""

    def test_matches_raw_path(self):
        matcher = IgnoreMatcher(["dist/"])
        assert not matcher.matches("dist")
        assert matcher.matches("dist/")

    def test_keeps_patterns(self):
        matcher = IgnoreMatcher(iter(["a", "b"]))
        assert matcher.patterns == ["a", "b"]

    def test_contents_pattern_keeps_directory(self):
        """A trailing /** excludes what is inside, not the directory."""
        matcher = IgnoreMatcher(["dist/**"])
        assert not matcher.is_excluded("dist", is_directory=True)
        assert matcher.is_excluded("dist/index.html")
        assert matcher.is_excluded("dist/js", is_directory=True)
        assert matcher.is_excluded("dist/js/vendor.js")

    def test_contents_pattern_with_reinclude(self):
        matcher = IgnoreMatcher(["dist/**", "!dist/index.html"])
        assert not matcher.is_excluded("dist", is_directory=True)
        assert not matcher.is_excluded("dist/index.html")
        assert matcher.is_excluded("dist/app.js")

    def test_contents_pattern_keeps_original_text(self):
        assert IgnoreMatcher(["dist/**"]).patterns == ["dist/**"]

    @pytest.mark.parametrize("name", DEFAULT_IGNORE_PATTERNS)
    def test_default_names_exclude_directory_and_contents(self, name):
        matcher = IgnoreMatcher(DEFAULT_IGNORE_PATTERNS)
        assert matcher.is_excluded(name, is_directory=True)
        assert matcher.is_excluded(f"{name}/anything")
        assert matcher.is_excluded(f"sub/{name}", is_directory=True)


class TestIgnoreRuleSet:
    """Tests for IgnoreRuleSet."""

    def test_defaults_always_first(self):
        rules = IgnoreRuleSet()
        assert rules.sources[0].name == "defaults"
        assert rules.patterns == [".git", "node_modules", ".danube"]

    def test_add_appends_in_order(self):
        rules = IgnoreRuleSet()
        rules.add("first", ["*.log"])
        rules.add("second", ["!keep.log"])
        assert rules.patterns[-2:] == ["*.log", "!keep.log"]
        assert not rules.compile().is_excluded("keep.log")

    def test_rule_sets_do_not_share_defaults(self):
        first = IgnoreRuleSet()
        first.sources[0].patterns.append("extra")
        assert "extra" not in IgnoreRuleSet().patterns

    def test_add_file_missing(self, tmp_path):
        rules = IgnoreRuleSet()
        assert rules.add_file(tmp_path / ".gitignore") is False
        assert len(rules.sources) == 1

    def test_add_file(self, tmp_path):
        ignore_file = tmp_path / ".gitignore"
        ignore_file.write_text("# comment\nsecret.txt\n", encoding="utf-8")
        rules = IgnoreRuleSet()
        assert rules.add_file(ignore_file) is True
        assert rules.sources[-1].name == ".gitignore"
        assert rules.sources[-1].patterns == ["secret.txt"]

    def test_add_file_with_invalid_utf8(self, tmp_path):
        """Undecodable bytes do not stop the remaining patterns from loading."""
        ignore_file = tmp_path / ".gitignore"
        ignore_file.write_bytes(b"# caf\xe9\nsecret.txt\n")
        rules = IgnoreRuleSet()

        assert rules.add_file(ignore_file) is True

        assert rules.sources[-1].patterns == ["secret.txt"]
        assert rules.compile().is_excluded("secret.txt")


class TestLoadIgnoreRules:
    """Tests for load_ignore_rules."""

    def test_no_ignore_files(self, tmp_path):
        rules = load_ignore_rules(tmp_path)
        assert [source.name for source in rules.sources] == ["defaults"]

    def test_source_order(self, tmp_path):
        (tmp_path / ".daubeignore").write_text("b\n", encoding="utf-8")
        (tmp_path / ".gitignore").write_text("a\n", encoding="utf-8")

        rules = load_ignore_rules(tmp_path, ["c"])

        assert [source.name for source in rules.sources] == [
            "defaults",
            ".gitignore",
            ".daubeignore",
            "danube.json",
        ]
        assert rules.patterns[-3:] == ["a", "b", "c"]

    def test_daubeignore_overrides_gitignore(self, tmp_path):
        (tmp_path / ".gitignore").write_text("*.html\n", encoding="utf-8")
        (tmp_path / ".daubeignore").write_text("!index.html\n", encoding="utf-8")

        matcher = load_ignore_rules(tmp_path).compile()

        assert not matcher.is_excluded("index.html")
        assert matcher.is_excluded("about.html")

    def test_empty_extra_patterns_add_no_source(self, tmp_path):
        rules = load_ignore_rules(tmp_path, [])
        assert len(rules.sources) == 1

    def test_extra_patterns_cannot_drop_defaults(self, tmp_path):
        matcher = load_ignore_rules(tmp_path, ["*.bak"]).compile()
        assert matcher.is_excluded(".git", is_directory=True)
        assert matcher.is_excluded("backup.bak")
