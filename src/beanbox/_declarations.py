from __future__ import annotations

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal, TypeVar, overload


if TYPE_CHECKING:
    from collections.abc import Callable

    T = TypeVar("T")
    F = TypeVar("F", bound=Callable[..., Any])

    # A class, a zero-arg callable returning one (forward reference), or None (no dependency)
    Target = type | Callable[[], type | None] | None


_SCOPE_ATTR = "__bean_scope__"
_RESOURCE_ATTR = "__bean_resource__"
_HOOK_ATTR = "__bean_hook__"

POST_CONSTRUCT = "post_construct"
PRE_DESTROY = "pre_destroy"


class Scope(Enum):
    CONTEXT = "context"
    SESSION = "session"
    REQUEST = "request"


def lifecycle(scope: Scope | str) -> Callable[[type[T]], type[T]]:
    """Class decorator declaring the scope of a bean.

    Example:
      @lifecycle(Scope.CONTEXT)
      class Mailer: ...

    Classes without a declaration are request-scoped. Subclasses inherit the
    scope of their base unless they declare their own.
    """
    try:
        value = Scope(scope)
    except ValueError:
        msg = f"Unknown bean scope: {scope!r}"
        raise ValueError(msg) from None

    def decorate(cls: type[T]) -> type[T]:
        if not inspect.isclass(cls):
            msg = f"@lifecycle can only decorate classes, got {cls!r}"
            raise TypeError(msg)
        setattr(cls, _SCOPE_ATTR, value)
        return cls

    return decorate


def _check_target(target: Any) -> None:
    if target is not None and not callable(target):
        msg = f"Dependency target must be a class or a zero-argument callable, got {target!r}"
        raise TypeError(msg)


def resolve_target(target: Target) -> type | None:
    """Turn a declared target into the class to request (or None)."""
    if target is None or inspect.isclass(target):
        return target
    return target()


class Resource:
    """Field dependency declaration.

    The container assigns the resolved bean to the instance attribute of the
    same name. Reading the attribute on a bean that was never injected gives
    None.
    """

    def __init__(self, target: Target) -> None:
        _check_target(target)
        self.target = target
        self.name: str | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    @overload
    def __get__(self, instance: None, owner: type | None = None) -> Resource: ...

    @overload
    def __get__(self, instance: object, owner: type | None = None) -> None: ...

    def __get__(self, instance: object | None, owner: type | None = None) -> Resource | None:
        if instance is None:
            return self
        return None

    def __repr__(self) -> str:
        return f"Resource({self.target!r})"


def resource(target: Target) -> Callable[[F], F]:
    """Mark a one-argument method as a setter dependency for `target`."""
    _check_target(target)

    def decorate(func: F) -> F:
        if not callable(func):
            msg = f"@resource can only decorate methods, got {func!r}"
            raise TypeError(msg)
        setattr(func, _RESOURCE_ATTR, target)
        return func

    return decorate


def _hook(kind: str) -> Callable[[F], F]:
    def decorate(func: F) -> F:
        if not callable(func):
            msg = f"@{kind} can only decorate methods, got {func!r}"
            raise TypeError(msg)
        setattr(func, _HOOK_ATTR, kind)
        return func

    return decorate


post_construct = _hook(POST_CONSTRUCT)
post_construct.__doc__ = "Mark a no-argument method to run once the bean is wired."

pre_destroy = _hook(PRE_DESTROY)
pre_destroy.__doc__ = "Mark a no-argument method to run at container shutdown (context scope only)."


@dataclass(frozen=True)
class Dependency:
    name: str
    target: Target
    kind: Literal["field", "setter"]

    def inject(self, bean: object, value: object) -> None:
        if self.kind == "field":
            setattr(bean, self.name, value)
        else:
            getattr(bean, self.name)(value)


@dataclass(frozen=True)
class BeanDescriptor:
    bean_type: type
    scope: Scope
    dependencies: tuple[Dependency, ...] = ()
    post_construct: tuple[str, ...] = ()
    pre_destroy: tuple[str, ...] = ()

    @classmethod
    def of(cls, bean_type: type) -> BeanDescriptor:
        """Collect the declarations of `bean_type`, base classes first.

        A subclass member replaces the base member of the same name but keeps
        its position, so declaration order is stable across runs.
        """
        members: dict[str, Any] = {}
        for klass in reversed(bean_type.__mro__):
            if klass is object:
                continue
            members.update(vars(klass))

        dependencies: list[Dependency] = []
        hooks: dict[str, list[str]] = {POST_CONSTRUCT: [], PRE_DESTROY: []}

        for name, value in members.items():
            if isinstance(value, Resource):
                dependencies.append(Dependency(name=name, target=value.target, kind="field"))
                continue

            if not callable(value):
                continue

            if hasattr(value, _RESOURCE_ATTR):
                dependencies.append(Dependency(name=name, target=getattr(value, _RESOURCE_ATTR), kind="setter"))

            kind = getattr(value, _HOOK_ATTR, None)
            if kind in hooks:
                hooks[kind].append(name)

        return cls(
            bean_type=bean_type,
            scope=getattr(bean_type, _SCOPE_ATTR, Scope.REQUEST),
            dependencies=tuple(dependencies),
            post_construct=tuple(hooks[POST_CONSTRUCT]),
            pre_destroy=tuple(hooks[PRE_DESTROY]),
        )
