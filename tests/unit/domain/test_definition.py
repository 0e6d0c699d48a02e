"""Tests for the Definition model."""
import functools

from tests.fixtures import Director
from wirebox.domain.definition import Definition, SourceKind, classify_source
from wirebox.domain.reference import Reference


def build_director():
    return Director()


class TestClassifySource:
    """Test source kind detection."""

    def test_classes_and_paths(self):
        """Test classes and dotted paths are constructed."""
        assert classify_source(Director) is SourceKind.CLASS
        assert classify_source("tests.fixtures.Director") is SourceKind.CLASS

    def test_factories(self):
        """Test callables and method tuples are factories."""
        assert classify_source(build_director) is SourceKind.FACTORY
        assert classify_source(lambda: None) is SourceKind.FACTORY
        assert classify_source(Director.factory) is SourceKind.FACTORY
        assert classify_source(functools.partial(Director, "James")) is SourceKind.FACTORY
        assert classify_source((Director, "factory")) is SourceKind.FACTORY

    def test_instances(self):
        """Test everything else is a pre-built instance."""
        assert classify_source(Director()) is SourceKind.INSTANCE
        assert classify_source(42) is SourceKind.INSTANCE
        assert classify_source((1, 2)) is SourceKind.INSTANCE

    def test_tuples(self):
        """Test only tuples naming a usable method target are factories."""
        assert classify_source(("tests.fixtures.Director", "factory")) is SourceKind.FACTORY
        assert classify_source((Director(), "factory")) is SourceKind.FACTORY
        assert classify_source(("a", "b")) is SourceKind.INSTANCE
        assert classify_source((Director(), "missing")) is SourceKind.INSTANCE


class TestDefinition:
    """Test Definition configuration."""

    def test_defaults(self):
        """Test a new definition's flags."""
        definition = Definition("director", Director)

        assert definition.kind is SourceKind.CLASS
        assert definition.is_shared()
        assert definition.is_autowired()
        assert definition.get_arguments() == {}

    def test_list_arguments_become_indexes(self):
        """Test a list of arguments is keyed by position."""
        definition = Definition("director", Director).set_arguments(["James", 26])

        assert definition.get_arguments() == {0: "James", 1: 26}
        assert definition.has_argument(1)
        assert definition.get_argument(0) == "James"

    def test_set_argument(self):
        """Test setting single arguments."""
        definition = Definition("director", Director).set_arguments({"name": "James"}).set_argument("age", 26)

        assert definition.get_arguments() == {"name": "James", "age": 26}

    def test_fluent_flags(self):
        """Test flags can be chained."""
        definition = Definition("director", Director).set_shared(False).set_autowired(False)

        assert not definition.is_shared()
        assert not definition.is_autowired()

    def test_instance_always_shared(self):
        """Test instance definitions stay shared."""
        definition = Definition("director", Director(), shared=False)

        assert definition.is_shared()

    def test_forced_kind(self):
        """Test the kind can be forced for string values."""
        definition = Definition("greeting", "hello", kind=SourceKind.INSTANCE)

        assert definition.kind is SourceKind.INSTANCE

    def test_tags(self):
        """Test tags with attributes."""
        definition = Definition("director", Director).add_tag("crew", department="film").add_tag("crew")

        assert definition.has_tag("crew")
        assert not definition.has_tag("cast")
        assert definition.get_tag("crew") == [{"department": "film"}, {}]
        assert definition.get_tag("cast") == []
        assert definition.get_tags() == {"crew": [{"department": "film"}, {}]}

    def test_repr(self):
        """Test the representation mentions the id and kind."""
        assert "director" in repr(Definition("director", Director))
        assert "class" in repr(Definition("director", Director))


class TestReference:
    """Test the Reference marker."""

    def test_equality(self):
        """Test references compare by id."""
        assert Reference("director") == Reference("director")
        assert Reference("director") != Reference(Director)
