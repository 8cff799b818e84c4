"""
Tests for version parsing and comparison.
"""

from packaging.version import Version

from mcp_provision.core.domain.version import latest, major_of, meets_minimum, parse_version


class TestParseVersion:
    def test_python_output(self):
        assert parse_version("Python 3.12.8") == Version("3.12.8")

    def test_node_output(self):
        assert parse_version("v23.11.0") == Version("23.11.0")

    def test_tool_with_suffix(self):
        assert parse_version("uv 0.6.3 (Homebrew 2025-02-24)") == Version("0.6.3")

    def test_empty_and_garbage(self):
        assert parse_version("") is None
        assert parse_version(None) is None
        assert parse_version("not a version") is None


class TestMeetsMinimum:
    def test_equal(self):
        assert meets_minimum("3.12", "3.12")

    def test_numeric_not_lexical(self):
        # "3.9" sorts after "3.12" as a string
        assert not meets_minimum("3.9.6", "3.12")
        assert meets_minimum("3.13", "3.12")

    def test_unparseable_installed(self):
        assert not meets_minimum(None, "3.12")
        assert not meets_minimum("unknown", "3.12")


class TestMajorAndLatest:
    def test_major_of(self):
        assert major_of("v23.1.0") == 23
        assert major_of(None) is None

    def test_latest_keeps_spelling(self):
        assert latest(["v18.20.4", "v23.11.0", "v9.0.0"]) == "v23.11.0"

    def test_latest_numeric(self):
        assert latest(["v9.11.2", "v10.0.0"]) == "v10.0.0"

    def test_latest_empty(self):
        assert latest([]) is None
        assert latest(["system"]) is None
