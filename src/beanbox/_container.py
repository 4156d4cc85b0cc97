from __future__ import annotations

import inspect
import logging
import threading
from typing import TYPE_CHECKING, TypeVar, overload

from ._declarations import BeanDescriptor, Scope, resolve_target
from ._errors import BeanConstructionError, BeanError
from ._i18n import I18n
from ._session import Session


if TYPE_CHECKING:
    from types import TracebackType

    from ._i18n import Translator
    from ._session import SessionStore

    T = TypeVar("T")


logger = logging.getLogger(__name__)

CONSTRUCTION_FAILED = "{0} cannot be created: {1}"


class BeanContainer:
    """Creates, scopes, wires and tears down beans on demand.

    - `Scope.CONTEXT`: one instance per type until `shutdown()`
    - `Scope.SESSION`: one instance per type, evicted by the session store when idle
    - `Scope.REQUEST` (default): a fresh instance on every `get`

    A bean is registered in its scope store before its dependencies are
    injected, so cyclic dependencies resolve to the same instance. A peer
    reached through a cycle may not be fully wired yet when it is injected.
    """

    def __init__(
        self,
        *,
        session: SessionStore | None = None,
        i18n: Translator | None = None,
    ) -> None:
        self._context: dict[type, object] = {}
        self._order: list[object] = []  # creation order, popped at shutdown
        self._session: SessionStore = session if session is not None else Session()
        self._i18n: Translator = i18n if i18n is not None else I18n()

        self._lock = threading.RLock()
        self._ready = threading.Condition(self._lock)
        # context/session beans still being constructed or wired: type -> id of the building thread
        self._assembling: dict[type, int] = {}
        # threads blocked in `get`: thread id -> type waited for
        self._waiting: dict[int, type] = {}

    def init(self) -> BeanContainer:
        """Nothing is built eagerly; beans are created on first request."""
        logger.info("bean container ready")
        return self

    @overload
    def get(self, bean_type: None) -> None: ...

    @overload
    def get(self, bean_type: type[T]) -> T: ...

    def get(self, bean_type: type[T] | None) -> T | None:
        """Return a scoped, wired and initialized instance of `bean_type`.

        Returns None when no type is given.
        """
        if bean_type is None:
            return None

        if not inspect.isclass(bean_type):
            msg = f"Bean type must be a class, got {bean_type!r}"
            raise TypeError(msg)

        name = bean_type.__name__
        logger.debug("searching for bean %s", name)

        with self._lock:
            bean = self._lookup(bean_type)
            if bean is not None:
                return bean

            descriptor = BeanDescriptor.of(bean_type)
            stored = descriptor.scope is not Scope.REQUEST
            if stored:
                # claimed before construction so a concurrent miss cannot build a second instance
                self._assembling[bean_type] = threading.get_ident()

            logger.debug("  creating new %s", name)
            try:
                bean = bean_type()
            except Exception as e:
                if stored:
                    self._mark_ready(bean_type)
                raise self._construction_error(bean_type, e) from e

            self._register(descriptor, bean)

        try:
            self._wire(descriptor, bean)
        except Exception as e:
            # The bean stays in its scope store; context beans still get their pre-destroy call.
            raise self._construction_error(bean_type, e) from e
        finally:
            if stored:
                self._mark_ready(bean_type)

        return bean

    def shutdown(self) -> None:
        """Run pre-destroy hooks of context beans, newest first, then clear every store.

        Waits for beans other threads are still building. Hook failures are
        logged and never stop the remaining teardown.
        """
        with self._lock:
            try:
                self._ready.wait_for(self._settled)
                logger.debug("invoking pre-destroy for %d context beans", len(self._order))
                while self._order:
                    self._destroy(self._order.pop())
            finally:
                self._order.clear()
                self._context.clear()
                self._session.clear()
                self._assembling.clear()
                self._ready.notify_all()

    def context_beans(self) -> tuple[object, ...]:
        """Context-scoped beans in creation order."""
        with self._lock:
            return tuple(self._order)

    def __contains__(self, bean_type: object) -> bool:
        """Membership check; does not refresh the idle clock of session beans."""
        with self._lock:
            if bean_type in self._context:
                return True
            peek = getattr(self._session, "peek", self._session.get)
            return peek(bean_type) is not None

    def __enter__(self) -> BeanContainer:
        return self.init()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()

    def _lookup(self, bean_type: type[T]) -> T | None:
        """Find a stored bean, waiting while another thread is still building it.

        Must be called with the lock held.
        """
        while True:
            scope = Scope.CONTEXT
            bean = self._context.get(bean_type)
            if bean is None:
                scope = Scope.SESSION
                bean = self._session.get(bean_type)

            owner = self._assembling.get(bean_type)
            if owner is None or self._leads_to_caller(owner):
                if bean is None and owner is not None:
                    # no instance exists yet: a constructor depends on its own bean
                    msg = f"{bean_type.__name__} is requested while its constructor is running"
                    raise BeanError(msg)
                if bean is not None:
                    logger.debug("  found in %s scope", scope.value)
                return bean  # type: ignore[return-value]

            me = threading.get_ident()
            self._waiting[me] = bean_type
            try:
                self._ready.wait()
            finally:
                del self._waiting[me]

    def _leads_to_caller(self, owner: int) -> bool:
        """Whether `owner` is the calling thread or is blocked, directly or not, on the caller.

        Waiting on such a thread would deadlock; a stored bean is then handed
        out half-wired, as for a cycle within one thread.
        """
        me = threading.get_ident()
        seen: set[int] = set()
        current: int | None = owner
        while current is not None and current not in seen:
            if current == me:
                return True
            seen.add(current)
            waited_for = self._waiting.get(current)
            current = self._assembling.get(waited_for) if waited_for is not None else None
        return False

    def _settled(self) -> bool:
        return all(self._leads_to_caller(owner) for owner in self._assembling.values())

    def _register(self, descriptor: BeanDescriptor, bean: object) -> None:
        bean_type = descriptor.bean_type
        if descriptor.scope is Scope.CONTEXT:
            logger.debug("  context scope")
            self._context[bean_type] = bean
            self._order.append(bean)
        elif descriptor.scope is Scope.SESSION:
            logger.debug("  session scope")
            self._session.put(bean_type, bean)
        else:
            logger.debug("  request scope")

    def _wire(self, descriptor: BeanDescriptor, bean: object) -> None:
        name = descriptor.bean_type.__name__

        for dependency in descriptor.dependencies:
            target = resolve_target(dependency.target)
            if target is None:
                continue

            logger.debug("  inject %s into %s.%s", target.__name__, name, dependency.name)
            dependency.inject(bean, self.get(target))

        for hook in descriptor.post_construct:
            logger.debug("  %s.%s", name, hook)
            getattr(bean, hook)()

    def _mark_ready(self, bean_type: type) -> None:
        with self._lock:
            # the entry may belong to a newer build started after a shutdown
            if self._assembling.get(bean_type) == threading.get_ident():
                del self._assembling[bean_type]
                self._ready.notify_all()

    def _destroy(self, bean: object) -> None:
        name = type(bean).__name__
        try:
            for hook in BeanDescriptor.of(type(bean)).pre_destroy:
                logger.debug("  %s.%s", name, hook)
                getattr(bean, hook)()
        except Exception:
            logger.exception("unable to pre-destroy %s", name)

    def _construction_error(self, bean_type: type, cause: Exception) -> BeanConstructionError:
        logger.error("unable to create instance of %s", bean_type.__qualname__, exc_info=cause)
        message = self._i18n.tr(CONSTRUCTION_FAILED, bean_type.__name__, cause)
        return BeanConstructionError(message, bean_type=bean_type, cause=cause)
