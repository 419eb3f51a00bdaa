"""Tests for configuration loading."""

import pytest

from gql_typegraph.core.config import Config, ConfigError, load_config
from gql_typegraph.core.expander import TypeConfig


CONFIG_YAML = """
log_level: debug
endpoint: https://api.example.com/graphql
auth:
  header: X-Api-Key
cache:
  schema_file: cached.json
packages:
  - name: accounts
    path: generated/accounts
    expand_transitive: true
    types:
      - name: Account
        skip_fields: [legacyId]
      - name: User
    queries:
      - path: [actor, account]
        max_query_field_depth: 3
    mutations:
      - name: accountCreate
        exclude_fields: [owner]
  - name: users
    path: generated/users
    types:
      - name: Account
        skip_fields: [secret, legacyId]
generators:
  - name: documents
    file_name: accounts.graphql
    header: Generated
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text(CONFIG_YAML)
    return path


class TestLoadConfig:
    def test_values(self, config_file):
        cfg = load_config(config_file)

        assert cfg.log_level == "debug"
        assert cfg.endpoint == "https://api.example.com/graphql"
        assert cfg.auth.header == "X-Api-Key"
        assert cfg.auth.api_key_env_var == "GQL_TYPEGRAPH_API_KEY"
        assert cfg.cache.schema_file == "cached.json"

        package = cfg.packages[0]
        assert package.expand_transitive is True
        assert package.generators == ["documents"]
        assert package.queries[0].path == ["actor", "account"]
        assert package.queries[0].max_query_field_depth == 3
        assert package.mutations[0].max_query_field_depth == 2
        assert package.mutations[0].exclude_fields == ["owner"]

    def test_type_configs(self, config_file):
        package = load_config(config_file).packages[0]

        assert package.type_configs == [
            TypeConfig(name="Account", skip_fields=("legacyId",)),
            TypeConfig(name="User"),
        ]

    def test_skip_fields_merged_across_packages(self, config_file):
        cfg = load_config(config_file)

        assert cfg.skip_fields == {"Account": ["legacyId", "secret"]}

    def test_generator_lookup(self, config_file):
        cfg = load_config(config_file)

        assert cfg.get_generator_config("documents").file_name == "accounts.graphql"
        assert cfg.get_generator_config("terraform") is None

    def test_defaults(self):
        cfg = Config()

        assert cfg.cache.schema_file == "schema.json"
        assert cfg.auth.disable is False
        assert cfg.auth.type == "api_key"
        assert cfg.get_generator_config("documents") is not None

    def test_auth_type(self):
        cfg = Config.from_dict({"auth": {"type": "headers", "headers": {"X-Tenant": "t1"}}})

        assert cfg.auth.type == "headers"
        assert cfg.auth.headers == {"X-Tenant": "t1"}
        assert cfg.auth.username_env_var == "GQL_TYPEGRAPH_USERNAME"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")

        assert load_config(path).packages == []


class TestConfigErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("packages: [unclosed\n")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_duplicate_type_names(self):
        data = {"packages": [{"name": "p", "path": "p", "types": [{"name": "A"}, {"name": "A"}]}]}

        with pytest.raises(ConfigError, match="duplicate"):
            Config.from_dict(data)

    def test_empty_query_path(self):
        data = {"packages": [{"name": "p", "path": "p", "queries": [{"path": []}]}]}

        with pytest.raises(ConfigError):
            Config.from_dict(data)

    def test_unknown_auth_type(self):
        with pytest.raises(ConfigError):
            Config.from_dict({"auth": {"type": "oauth"}})
