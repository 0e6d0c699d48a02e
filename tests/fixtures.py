"""Domain classes used as services throughout the test suite."""
from abc import ABC, abstractmethod
from typing import Optional


class Director:
    def __init__(self, name: Optional[str] = None, age: Optional[int] = None):
        self.name = name
        self.age = age

    @classmethod
    def factory(cls) -> "Director":
        return cls("James", 26)


class ActorInterface(ABC):
    @abstractmethod
    def get_name(self) -> str:
        pass


class Actor(ActorInterface):
    def get_name(self) -> str:
        return "Actor"


class Actress(ActorInterface):
    def get_name(self) -> str:
        return "Actress"


class Movie:
    def __init__(self, director: Director, actor: ActorInterface):
        self.director = director
        self.actor = actor
