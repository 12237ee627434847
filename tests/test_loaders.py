"""Tests for the depth-guarded document loaders."""

import json

import pytest
import yaml

from dep_uplift.core import loaders
from dep_uplift.core.loaders import (
    MAX_NESTING_DEPTH,
    check_nesting_depth,
    load_json,
    load_toml,
    load_yaml,
)


class TestCheckNestingDepth:
    """Test the bracket depth scanner."""

    def test_within_limit(self):
        assert check_nesting_depth("[" * MAX_NESTING_DEPTH + "]" * MAX_NESTING_DEPTH)

    def test_exceeds_limit(self):
        depth = MAX_NESTING_DEPTH + 1
        assert not check_nesting_depth("[" * depth + "]" * depth)

    def test_unbalanced_closer(self):
        assert not check_nesting_depth("]")

    def test_brackets_inside_strings_ignored(self):
        content = '{"key": "' + "[" * 50 + '"}'
        assert check_nesting_depth(content)

    def test_escaped_quote_keeps_string_open(self):
        content = '{"key": "\\" [[[[ "}'
        assert check_nesting_depth(content, max_depth=2)

    def test_comments_ignored(self):
        content = "# " + "[" * 50 + "\nkey = 1\n"
        assert check_nesting_depth(content, comment_chars=("#",))
        assert not check_nesting_depth(content)

    def test_triple_quoted_strings(self):
        content = 'text = """\n' + "{" * 50 + '\n"""\n'
        assert check_nesting_depth(content, triple_quotes=True)

    def test_raw_quotes_have_no_escapes(self):
        """Test that a backslash before the closing quote of a literal string ends it."""
        content = "path = 'C:\\'\nvalue = [[1]]\n"
        assert check_nesting_depth(content, max_depth=1, quote_chars=("'",), raw_quote_chars=("'",)) is False
        assert check_nesting_depth(content, max_depth=2, quote_chars=("'",), raw_quote_chars=("'",))


class TestLoaders:
    """Test the JSON, TOML and YAML loaders."""

    def test_load_json(self):
        assert load_json('{"a": [1, 2]}') == {"a": [1, 2]}

    def test_load_json_too_deep(self):
        assert load_json("[" * 25 + "]" * 25) is None

    def test_load_json_custom_depth(self):
        assert load_json("[" * 25 + "]" * 25, max_depth=64) is not None

    def test_load_json_syntax_error_propagates(self):
        with pytest.raises(json.JSONDecodeError):
            load_json("{broken")

    def test_load_toml(self):
        assert load_toml('[tool]\nname = "x"\n') == {"tool": {"name": "x"}}

    def test_load_toml_too_deep(self):
        depth = MAX_NESTING_DEPTH + 1
        assert load_toml("value = " + "[" * depth + "]" * depth + "\n") is None

    def test_load_toml_commented_brackets_allowed(self):
        assert load_toml("# " + "[" * 50 + "\nvalue = 1\n") == {"value": 1}

    def test_load_yaml_safe(self):
        """Test that YAML tags constructing Python objects are refused."""
        with pytest.raises(yaml.YAMLError):
            load_yaml("!!python/object/apply:os.system ['echo hi']")

    def test_load_yaml(self):
        assert load_yaml("a:\n  - 1\n  - 2\n") == {"a": [1, 2]}

    def test_load_yaml_too_deep(self):
        depth = MAX_NESTING_DEPTH + 1
        assert load_yaml("value: " + "[" * depth + "]" * depth + "\n") is None

    def test_content_size_cap(self, monkeypatch):
        monkeypatch.setattr(loaders, "MAX_CONTENT_SIZE", 10)

        assert load_json('{"name": "too-long"}') is None
        assert load_toml('name = "too-long"') is None
        assert load_yaml("name: too-long-value") is None
