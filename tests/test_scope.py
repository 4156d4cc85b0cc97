import unittest

import pytest

from beanbox import BeanContainer, Scope, lifecycle


class TestScopeControl(unittest.TestCase):
    beans: BeanContainer

    def setUp(self):
        self.beans = BeanContainer()

    def test_get_context_bean_returns_same_instance(self):
        @lifecycle(Scope.CONTEXT)
        class A: ...

        a1 = self.beans.get(A)
        a2 = self.beans.get(A)
        assert a2 is a1, "CONTEXT should return the cached instance"

    def test_get_undeclared_scope_returns_new_instances(self):
        class A: ...

        a1 = self.beans.get(A)
        a2 = self.beans.get(A)
        assert a2 is not a1, "no scope should behave like REQUEST"

    def test_get_explicit_request_scope_returns_new_instances(self):
        @lifecycle(Scope.REQUEST)
        class A: ...

        assert self.beans.get(A) is not self.beans.get(A)
        assert A not in self.beans

    def test_get_session_bean_returns_same_instance(self):
        @lifecycle(Scope.SESSION)
        class A: ...

        assert self.beans.get(A) is self.beans.get(A)
        assert A in self.beans

    def test_request_bean_is_never_stored(self):
        class A: ...

        self.beans.get(A)
        assert A not in self.beans
        assert self.beans.context_beans() == ()

    def test_scope_is_inherited_by_subclasses(self):
        @lifecycle(Scope.CONTEXT)
        class Base: ...

        class Derived(Base): ...

        assert self.beans.get(Derived) is self.beans.get(Derived)

    def test_subclass_can_override_scope(self):
        @lifecycle(Scope.CONTEXT)
        class Base: ...

        @lifecycle(Scope.REQUEST)
        class Derived(Base): ...

        assert self.beans.get(Derived) is not self.beans.get(Derived)
        assert self.beans.get(Base) is self.beans.get(Base)

    def test_independent_containers_do_not_share_context_beans(self):
        @lifecycle(Scope.CONTEXT)
        class A: ...

        other = BeanContainer()
        assert self.beans.get(A) is not other.get(A)


def test_lifecycle_accepts_scope_value_string():
    @lifecycle("context")
    class A: ...

    beans = BeanContainer()
    assert beans.get(A) is beans.get(A)


def test_lifecycle_rejects_unknown_scope():
    with pytest.raises(ValueError, match="Unknown bean scope"):
        lifecycle("application")


def test_lifecycle_rejects_non_class():
    with pytest.raises(TypeError):
        lifecycle(Scope.CONTEXT)(lambda: None)
