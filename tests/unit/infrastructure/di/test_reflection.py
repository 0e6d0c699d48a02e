"""Tests for signature introspection helpers."""
import inspect
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Protocol

import pytest

from tests.fixtures import Actor, ActorInterface, Director, Movie
from wirebox.infrastructure.di import reflection


class Greeter(Protocol):
    def greet(self) -> str:
        ...


class Cinema:
    def __init__(self, movie: "Movie", screens: int, owner: Optional[Director], *names, tags: List[str] = None, **extra):
        pass


def unresolvable(thing: "DoesNotExist"):  # noqa: F821
    return thing


def pep604(director: Director | None):
    return director


class TestParameterIntrospection:
    """Test get_parameters."""

    def test_class_constructor(self):
        """Test constructor parameters are described in order without self."""
        params = reflection.get_parameters(Cinema)

        assert [p.name for p in params] == ["movie", "screens", "owner", "names", "tags", "extra"]

        movie, screens, owner, names, tags, extra = params
        assert movie.declared_type is Movie
        assert not movie.is_optional
        assert screens.declared_type is None
        assert screens.annotation is int
        assert owner.declared_type is Director
        assert owner.is_optional
        assert not owner.has_default
        assert names.is_variadic
        assert names.kind is inspect.Parameter.VAR_POSITIONAL
        assert tags.kind is inspect.Parameter.KEYWORD_ONLY
        assert tags.has_default and tags.default is None
        assert tags.declared_type is None
        assert extra.is_variadic

    def test_unresolvable_annotation(self):
        """Test annotations that cannot be evaluated are treated as untyped."""
        param, = reflection.get_parameters(unresolvable)

        assert param.declared_type is None
        assert param.annotation == "DoesNotExist"

    def test_pep604_optional(self):
        """Test X | None is treated like Optional[X]."""
        param, = reflection.get_parameters(pep604)

        assert param.declared_type is Director
        assert param.is_optional

    def test_bound_method(self):
        """Test class methods are described without cls."""
        assert reflection.get_parameters(Director.factory) == []


class TestTypeHelpers:
    """Test type classification helpers."""

    def test_is_primitive_type(self):
        """Test builtins and generics of builtins are primitive."""
        assert reflection.is_primitive_type(str)
        assert reflection.is_primitive_type(Any)
        assert reflection.is_primitive_type(List[str])
        assert reflection.is_primitive_type(Dict[str, int])
        assert not reflection.is_primitive_type(Director)

    def test_is_optional_type(self):
        """Test Optional detection."""
        assert reflection.is_optional_type(Optional[Director])
        assert not reflection.is_optional_type(Director)
        assert reflection.extract_optional_inner_type(Optional[Director]) is Director

    def test_is_instantiable(self):
        """Test only concrete classes are instantiable."""
        assert reflection.is_instantiable(Actor)
        assert not reflection.is_instantiable(ActorInterface)
        assert not reflection.is_instantiable(Greeter)
        assert not reflection.is_instantiable(int)
        assert not reflection.is_instantiable(None)
        assert not reflection.is_instantiable("tests.fixtures.Actor")

    def test_class_id(self):
        """Test class ids are module plus qualified name."""
        assert reflection.class_id(Director) == "tests.fixtures.Director"
        assert reflection.class_id(OrderedDict) == "collections.OrderedDict"


class TestImportHelpers:
    """Test dotted-path imports."""

    def test_import_class(self):
        """Test importing a class by dotted path."""
        assert reflection.import_string("tests.fixtures.Director") is Director

    def test_import_nested_attribute(self):
        """Test importing an attribute of a class."""
        assert reflection.import_string("tests.fixtures.Director.factory") == Director.factory

    def test_import_missing_attribute(self):
        """Test a missing attribute raises ImportError."""
        with pytest.raises(ImportError):
            reflection.import_string("tests.fixtures.Nobody")

    def test_import_missing_module(self):
        """Test an unknown module raises ImportError."""
        with pytest.raises(ImportError):
            reflection.import_string("no_such_module_anywhere.Thing")

    def test_get_call_target(self):
        """Test call targets for each kind of source."""
        factory = lambda: None  # noqa: E731

        assert reflection.get_call_target(Director) is Director
        assert reflection.get_call_target("tests.fixtures.Director") is Director
        assert reflection.get_call_target((Director, "factory")) == Director.factory
        assert reflection.get_call_target(("tests.fixtures.Director", "factory")) == Director.factory
        assert reflection.get_call_target(factory) is factory
