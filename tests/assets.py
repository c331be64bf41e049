"""Classes proxied throughout the test suite.

Kept in an importable module so proxies over them survive pickling.
"""

from __future__ import annotations

import functools
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, TypeVar, final

from proxyplane import Ref

T = TypeVar("T")


class BaseClass:
    public_property = "publicPropertyDefault"
    _protected_property = "protectedPropertyDefault"
    __private_property = "privatePropertyDefault"

    def public_method(self) -> str:
        return "publicMethodDefault"

    def _protected_method(self) -> str:
        return "protectedMethodDefault"

    def __private_method(self) -> str:
        return "privateMethodDefault"

    def read_private_property(self) -> str:
        return self.__private_property


class ChildClass(BaseClass):
    public_property = "childPublicPropertyDefault"
    __private_property = "childPrivatePropertyDefault"

    def public_method(self) -> str:
        return "childPublicMethodDefault"


class ClassWithMixedProperties:
    public_property0: str = "public0"
    public_property1: str = "public1"
    _protected_property0: str = "protected0"
    _protected_property1: str = "protected1"
    __private_property0: str = "private0"
    __private_property1: str = "private1"


class ClassWithPrivateProperties:
    __value: int = 1


class ClassWithCollidingPrivateInheritedProperties(ClassWithPrivateProperties):
    __value: int = 2


class ClassWithMixedTypedProperties:
    untyped = None
    optional_str: str | None = None
    required_int: int
    defaulted_int: int = 0
    literal_or_none: Any = None
    counter: ClassVar[int] = 0

    @property
    def computed(self) -> int:
        return self.defaulted_int * 2


class ClassWithSlots:
    __slots__ = ("x", "_y")

    def __init__(self, x: int = 1, y: int = 2) -> None:
        self.x = x
        self._y = y

    def total(self) -> int:
        return self.x + self._y


class ValueHolder:
    value = "d"

    def get(self) -> str:
        return self.value

    def set(self, value: str) -> None:
        self.value = value


class Greeter:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def greet(self, name: str, greeting: str = "hello") -> str:
        self.calls.append((name, greeting))
        return f"{greeting} {name}"

    def fail(self, message: str) -> str:
        raise ValueError(message)

    def shout(self, name: str) -> str:
        return self.greet(name).upper()


class VoidCounter:
    def __init__(self) -> None:
        self.count = 0

    def increment(self) -> None:
        self.count += 1


class ClassWithCounterConstructor:
    amount: int = 0

    def __init__(self, amount: int = 1) -> None:
        self.amount += amount

    def get_amount(self) -> int:
        return self.amount


class ClassWithByRefParameters:
    def increment_all(self, *counters: Ref[int]) -> None:
        for counter in counters:
            counter.value += 1

    def swap(self, left: Ref[Any], right: Ref[Any]) -> None:
        left.value, right.value = right.value, left.value

    def collect(self, *args: Any, **kwargs: Any) -> tuple[tuple[Any, ...], dict[str, Any]]:
        return args, kwargs


class ClassInspectingItsCaller:
    def caller_name(self) -> str:
        return sys._getframe(1).f_code.co_name


class ClassWithProperty:
    def __init__(self) -> None:
        self._celsius = 0.0

    @property
    def fahrenheit(self) -> float:
        return self._celsius * 9 / 5 + 32

    @fahrenheit.setter
    def fahrenheit(self, value: float) -> None:
        self._celsius = (value - 32) * 5 / 9

    @property
    def kelvin(self) -> float:
        return self._celsius + 273.15

    @kelvin.deleter
    def kelvin(self) -> None:
        pass


class Bag:
    def __init__(self, *items: Any) -> None:
        self.items = list(items)

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, item: object) -> bool:
        return item in self.items

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Bag) and self.items == other.items

    def __hash__(self) -> int:
        return hash(tuple(self.items))

    def add(self, item: Any) -> None:
        self.items.append(item)


class Point:
    x: int = 0
    y: int = 0

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Point) and (self.x, self.y) == (other.x, other.y)


@dataclass
class Record:
    name: str
    tags: list[str] = field(default_factory=list)
    score: float | None = None

    def describe(self) -> str:
        return f"{self.name}:{','.join(self.tags)}"


class Box(Generic[T]):
    content: T | None = None

    def put(self, item: T) -> None:
        self.content = item


class AbstractShape(ABC):
    @abstractmethod
    def area(self) -> float: ...


class Square(AbstractShape):
    side: float = 1.0

    def area(self) -> float:
        return self.side**2


@final
class FinalClass:
    def method(self) -> None:
        pass


class ListSubclass(list):  # type: ignore[type-arg]
    pass


class counted:
    """Method decorator written as a callable non-data descriptor."""

    def __init__(self, func: Any) -> None:
        self.func = func
        self.calls = 0
        functools.update_wrapper(self, func)

    def __call__(self, obj: Any, *args: Any, **kwargs: Any) -> Any:
        self.calls += 1
        return self.func(obj, *args, **kwargs)

    def __get__(self, obj: Any, objtype: Any = None) -> Any:
        return self if obj is None else functools.partial(self, obj)


class DecoratedMethods:
    def plain(self, a: int, b: int = 0) -> int:
        return a + b

    @functools.lru_cache(maxsize=None)  # noqa: B019
    def compute(self) -> int:
        return 41

    helper = functools.partialmethod(plain, 1)

    @functools.singledispatchmethod
    def handle(self, arg: object) -> str:
        return "obj"

    handle.register(int, lambda self, arg: "int")

    @counted
    def tracked(self, x: int) -> int:
        return x * 2

    @functools.cached_property
    def expensive(self) -> int:
        return 7
