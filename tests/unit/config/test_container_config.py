"""Tests for container configuration loading."""
import json
from unittest.mock import patch

import pytest
import yaml

from tests.fixtures import ActorInterface, Actress, Director, Movie
from wirebox.config.loader import load_container_config, parse_container_config
from wirebox.config.schemas import ContainerConfig, ServiceConfig
from wirebox.domain.reference import Reference
from wirebox.infrastructure.di.container import Container
from wirebox.infrastructure.di.exceptions import ConfigException

YAML_CONFIG = """
defaults:
  share: true
parameters:
  director:
    name: James
    age: 26
services:
  director:
    class: tests.fixtures.Director
    arguments: ["%director.name%", "%director.age%"]
  lead:
    class: tests.fixtures.Actress
    tags:
      - name: cast
        role: lead
  movie:
    class: tests.fixtures.Movie
    arguments:
      director: "@director"
      actor: "@lead"
  made:
    factory: tests.fixtures.Director.factory
    shared: false
  handle:
    class: tests.fixtures.Director
    arguments:
      name: "@@james"
aliases:
  film: movie
bindings:
  tests.fixtures.ActorInterface: lead
"""


class TestContainerConfigSchema:
    """Test configuration validation."""

    def test_empty_configuration(self):
        """Test an empty mapping yields defaults."""
        config = parse_container_config({})

        assert config.defaults.share
        assert config.defaults.autowire
        assert config.services == {}
        assert config.logging is None

    def test_service_class_alias(self):
        """Test the class key maps to class_."""
        service = ServiceConfig.model_validate({"class": "tests.fixtures.Director", "arguments": ["James"]})

        assert service.class_ == "tests.fixtures.Director"
        assert service.arguments == ["James"]
        assert service.shared is None

    def test_class_and_factory_exclusive(self):
        """Test a service cannot have both a class and a factory."""
        with pytest.raises(ConfigException):
            parse_container_config(
                {"services": {"x": {"class": "tests.fixtures.Director", "factory": "tests.fixtures.Director.factory"}}}
            )

    def test_unknown_keys_rejected(self):
        """Test unknown top-level and default keys are rejected."""
        with pytest.raises(ConfigException):
            parse_container_config({"servises": {}})
        with pytest.raises(ConfigException):
            parse_container_config({"defaults": {"lazy": True}})

    def test_non_mapping_rejected(self):
        """Test configuration data must be a mapping."""
        with pytest.raises(ConfigException):
            parse_container_config(["director"])

    def test_invalid_log_level(self):
        """Test the logging section is validated."""
        with pytest.raises(ConfigException):
            parse_container_config({"logging": {"level": "LOUD"}})

        config = parse_container_config({"logging": {"level": "debug"}})
        assert config.logging.level == "DEBUG"


class TestConfigFiles:
    """Test reading configuration files."""

    def test_load_yaml(self, tmp_path):
        """Test loading a YAML file."""
        path = tmp_path / "services.yaml"
        path.write_text(YAML_CONFIG)

        config = load_container_config(str(path))

        assert isinstance(config, ContainerConfig)
        assert set(config.services) == {"director", "lead", "movie", "made", "handle"}
        assert config.aliases == {"film": "movie"}

    def test_load_json(self, tmp_path):
        """Test loading a JSON file."""
        path = tmp_path / "services.json"
        path.write_text(json.dumps({"parameters": {"name": "James"}, "services": {"d": {"class": "tests.fixtures.Director"}}}))

        config = load_container_config(str(path))

        assert config.parameters == {"name": "James"}
        assert config.services["d"].class_ == "tests.fixtures.Director"

    def test_empty_yaml(self, tmp_path):
        """Test an empty YAML file is an empty configuration."""
        path = tmp_path / "empty.yml"
        path.write_text("")

        assert load_container_config(str(path)).services == {}

    def test_missing_file(self, tmp_path):
        """Test a missing file raises ConfigException."""
        with pytest.raises(ConfigException) as exc_info:
            load_container_config(str(tmp_path / "missing.yaml"))

        assert "not found" in str(exc_info.value)

    def test_malformed_yaml(self, tmp_path):
        """Test unparsable YAML raises ConfigException."""
        path = tmp_path / "bad.yaml"
        path.write_text("services: [unclosed")

        with pytest.raises(ConfigException):
            load_container_config(str(path))

    def test_malformed_json(self, tmp_path):
        """Test unparsable JSON raises ConfigException."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(ConfigException):
            load_container_config(str(path))


class TestContainerFromConfig:
    """Test building a container from configuration."""

    def setup_method(self):
        self.config = parse_container_config(yaml.safe_load(YAML_CONFIG))
        self.container = Container.from_config(self.config)

    def test_services_built(self):
        """Test configured services resolve with parameters and references."""
        movie = self.container.get("movie")

        assert isinstance(movie, Movie)
        assert isinstance(movie.actor, Actress)
        assert movie.director is self.container.get("director")
        assert movie.director.name == "James"
        assert movie.director.age == 26

    def test_references_created(self):
        """Test @ strings become References and @@ escapes a literal @."""
        arguments = self.container.get_definition("movie").get_arguments()

        assert arguments == {"director": Reference("director"), "actor": Reference("lead")}
        assert self.container.get("handle").name == "@james"

    def test_factory_and_sharing(self):
        """Test factory services and per-service shared flags."""
        made = self.container.get("made")

        assert isinstance(made, Director)
        assert made.name == "James"
        assert made is not self.container.get("made")

    def test_aliases_bindings_and_tags(self):
        """Test aliases, bindings and tags from configuration."""
        assert self.container.get("film") is self.container.get("movie")
        assert self.container.get(ActorInterface) is self.container.get("lead")
        assert self.container.find_tagged_service_ids("cast") == {"lead": [{"role": "lead"}]}

    def test_from_mapping_and_path(self, tmp_path):
        """Test from_config accepts mappings and file paths."""
        from_mapping = Container.from_config({"parameters": {"name": "James"}})
        assert from_mapping.get_parameter("name") == "James"

        path = tmp_path / "services.yml"
        path.write_text(YAML_CONFIG)
        from_path = Container.from_config(path)
        assert from_path.get("director").age == 26

    def test_defaults_applied(self):
        """Test configured defaults apply to configured services."""
        container = Container.from_config(
            {"defaults": {"share": False}, "services": {"director": {"class": "tests.fixtures.Director"}}}
        )

        assert container.get("director") is not container.get("director")

    def test_unimportable_factory(self):
        """Test a factory path that cannot be imported is a configuration error."""
        with pytest.raises(ConfigException):
            Container.from_config({"services": {"x": {"factory": "tests.fixtures.nothing_here"}}})

    def test_logging_section_applied(self):
        """Test a logging section sets up logging."""
        with patch("wirebox.infrastructure.logging.logger.setup_logging") as mock_setup:
            Container.from_config({"logging": {"level": "INFO"}})

        mock_setup.assert_called_once()
        assert mock_setup.call_args[0][0].level == "INFO"
