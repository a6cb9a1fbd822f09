import unittest
from abc import ABC, abstractmethod

import pytest

from autofactory import AbstractInstantiationError, Factory


class TestSeedPrecedence(unittest.TestCase):
    def test_secure_returns_seeded_instance_without_constructing(self):
        built = []

        class Config:
            def __init__(self):
                built.append(self)

        seed = Config.__new__(Config)
        factory = Factory(seed)

        assert factory.secure(Config) is seed
        assert factory.obtain(Config) is seed
        assert built == []

    def test_seeded_instance_is_injected_into_dependents(self):
        class DB: ...

        class Repo:
            def __init__(self, db: DB):
                self.db = db

        db = DB()
        factory = Factory(db)
        assert factory.secure(Repo).db is db

    def test_seeded_instance_answers_for_its_base_classes(self):
        class Base: ...

        class Derived(Base): ...

        seed = Derived()
        factory = Factory(seed)
        assert factory.secure(Base) is seed
        assert factory.obtain(Base) is seed

    def test_seeded_implementation_satisfies_abstract_dependency(self):
        class Transport(ABC):
            @abstractmethod
            def send(self, msg: str) -> None: ...

        class MemoryTransport(Transport):
            def __init__(self):
                self.sent = []

            def send(self, msg: str) -> None:
                self.sent.append(msg)

        class Mailer:
            def __init__(self, transport: Transport):
                self.transport = transport

        transport = MemoryTransport()
        factory = Factory(transport)

        assert factory.secure(Mailer).transport is transport
        with pytest.raises(AbstractInstantiationError):
            factory.make(Transport)

    def test_inject_objects_after_construction_overrides_previous_entries(self):
        class Base: ...

        class Left(Base): ...

        class Right(Base): ...

        left, right = Left(), Right()
        factory = Factory(left)
        assert factory.secure(Base) is left

        factory.inject_objects(right)
        assert factory.secure(Base) is right
        assert factory.secure(Left) is left

    def test_last_seed_wins_for_a_shared_base(self):
        class Base: ...

        class Derived(Base): ...

        first, second = Derived(), Derived()
        factory = Factory(first, second)
        assert factory.secure(Derived) is second
        assert factory.secure(Base) is second


class TestAncestorPropagation(unittest.TestCase):
    factory: Factory

    def setUp(self):
        self.factory = Factory()

    def test_secure_derived_then_base_returns_same_instance(self):
        class Base: ...

        class Derived(Base): ...

        derived = self.factory.secure(Derived)
        assert self.factory.secure(Base) is derived

    def test_secure_indexes_every_base_of_multiple_inheritance(self):
        class Loggable: ...

        class Base: ...

        class Sender(Loggable, Base): ...

        sender = self.factory.secure(Sender)
        assert self.factory.secure(Loggable) is sender
        assert self.factory.secure(Base) is sender

    def test_secure_base_first_does_not_answer_for_derived(self):
        class Base: ...

        class Derived(Base): ...

        base = self.factory.secure(Base)
        derived = self.factory.secure(Derived)
        assert derived is not base
        assert type(derived) is Derived
        assert self.factory.secure(Base) is derived

    def test_obtain_and_make_do_not_index_ancestors(self):
        class Base: ...

        class Derived(Base): ...

        self.factory.obtain(Derived)
        self.factory.make(Derived)
        assert Base not in self.factory._cache
        assert type(self.factory.secure(Base)) is Base
