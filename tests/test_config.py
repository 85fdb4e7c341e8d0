"""
Tests for gsdgraph.config module.
"""

from pathlib import Path

import pytest


class TestConfigLoader:
    """Tests for configuration loading."""

    def test_load_config_with_defaults(self, tmp_path):
        """A minimal config is merged over the defaults."""
        from gsdgraph.config import load_config

        config_file = tmp_path / ".gsdgraph.toml"
        config_file.write_text('[project]\nplanning_dir = "plans"\n')

        config = load_config(config_file)

        assert config["project"]["planning_dir"] == "plans"
        assert config["pipeline"]["artifact_done_bytes"] == 50
        assert len(config["directories"]["sources"]) == 2

    def test_sources_table_array_replaces_defaults(self, tmp_path):
        from gsdgraph.config import load_config

        config_file = tmp_path / ".gsdgraph.toml"
        config_file.write_text(
            "[[directories.sources]]\n"
            'path = "docs"\n'
            'source_type = "docs"\n'
            'ignore = ["drafts"]\n'
        )

        config = load_config(config_file)

        assert config["directories"]["sources"] == [
            {"path": "docs", "source_type": "docs", "ignore": ["drafts"]}
        ]

    def test_invalid_toml_raises_config_error(self, tmp_path):
        from gsdgraph.config import load_config
        from gsdgraph.exceptions import ConfigError

        config_file = tmp_path / ".gsdgraph.toml"
        config_file.write_text("[project\nplanning_dir = ")

        with pytest.raises(ConfigError) as excinfo:
            load_config(config_file)

        assert excinfo.value.path == config_file
        assert "invalid TOML" in str(excinfo.value)

    def test_unreadable_config_raises_config_error(self, tmp_path):
        from gsdgraph.config import load_config
        from gsdgraph.exceptions import ConfigError

        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.toml")

    def test_find_config_file(self, tmp_path):
        from gsdgraph.config import find_config_file

        (tmp_path / ".gsdgraph.toml").write_text("")

        assert find_config_file(tmp_path) == (tmp_path / ".gsdgraph.toml").resolve()

    def test_find_config_in_parent(self, tmp_path):
        from gsdgraph.config import find_config_file

        (tmp_path / ".gsdgraph.toml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        config_path = find_config_file(nested)

        assert config_path is not None
        assert config_path.parent == tmp_path.resolve()

    def test_get_config_explicit_path(self, tmp_path):
        from gsdgraph.config import get_config

        config_file = tmp_path / "custom.toml"
        config_file.write_text("[pipeline]\nartifact_done_bytes = 10\n")

        config = get_config(config_file)

        assert config["pipeline"]["artifact_done_bytes"] == 10

    def test_get_config_does_not_mutate_defaults(self, tmp_path):
        from gsdgraph.config import DEFAULT_CONFIG, get_config

        config_file = tmp_path / ".gsdgraph.toml"
        config_file.write_text('[project]\nplanning_dir = "elsewhere"\n')

        get_config(config_file)

        assert DEFAULT_CONFIG["project"]["planning_dir"] == ".planning"


class TestParseToml:
    def test_returns_plain_python_types(self):
        from gsdgraph.config import parse_toml

        data = parse_toml('[a]\nb = 1\nc = ["x", "y"]\n')

        assert data == {"a": {"b": 1, "c": ["x", "y"]}}
        assert type(data["a"]) is dict
        assert type(data["a"]["c"]) is list


class TestMergeConfigs:
    def test_nested_tables_merge(self):
        from gsdgraph.config import merge_configs

        result = merge_configs({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}})

        assert result == {"a": {"x": 1, "y": 3}}

    def test_lists_are_replaced(self):
        from gsdgraph.config import merge_configs

        result = merge_configs({"a": [1, 2]}, {"a": [3]})

        assert result == {"a": [3]}

    def test_base_is_untouched(self):
        from gsdgraph.config import merge_configs

        base = {"a": {"x": 1}}
        merge_configs(base, {"a": {"x": 2}})

        assert base == {"a": {"x": 1}}


class TestProjectSettings:
    def test_planning_dir_default(self):
        from gsdgraph.config import DEFAULT_CONFIG, get_planning_dir

        assert get_planning_dir(DEFAULT_CONFIG, Path("/proj")) == Path("/proj/.planning")

    def test_planning_dir_configured(self):
        from gsdgraph.config import get_planning_dir

        config = {"project": {"planning_dir": "plans"}}

        assert get_planning_dir(config, Path("/proj")) == Path("/proj/plans")

    def test_default_source_configs(self):
        from gsdgraph.config import DEFAULT_CONFIG, DEFAULT_SRC_IGNORE_PATTERNS, get_source_configs

        sources = get_source_configs(DEFAULT_CONFIG, Path("/proj"))

        assert [(s.path, s.source_type) for s in sources] == [
            (str(Path("/proj/.planning")), "planning"),
            (str(Path("/proj/src")), "src"),
        ]
        assert sources[0].ignore_patterns == ()
        assert sources[1].ignore_patterns == tuple(DEFAULT_SRC_IGNORE_PATTERNS)

    def test_no_sources_configured(self):
        from gsdgraph.config import get_source_configs

        assert get_source_configs({}, Path("/proj")) == []

    def test_source_without_type_raises(self):
        from gsdgraph.config import get_source_configs
        from gsdgraph.exceptions import ConfigError

        config = {"directories": {"sources": [{"path": "src"}]}}

        with pytest.raises(ConfigError, match=r"directories\.sources\[0\]"):
            get_source_configs(config, Path("/proj"))
