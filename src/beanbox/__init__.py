"""Bean lifecycle container.

This package creates, scopes, wires and tears down application service objects
("beans") on demand. Beans declare their scope, dependencies and lifecycle hooks
declaratively; the container builds them with no-argument constructors.

Exports:
- `BeanContainer`: Resolves bean types to scoped, wired, initialized instances
  and runs pre-destroy hooks in reverse creation order on shutdown.
- `Scope`: Enum of bean scopes (context, session, request).
- `lifecycle`, `Resource`, `resource`, `post_construct`, `pre_destroy`:
  Declarations for scope, field/setter dependencies and lifecycle hooks.
- `Session`: Default session store with idle expiry.
- `I18n`: Default message catalog for user-facing error text.
- `BeanError`, `BeanConstructionError`: Errors raised by the container.
"""

from ._container import BeanContainer
from ._declarations import BeanDescriptor, Resource, Scope, lifecycle, post_construct, pre_destroy, resource
from ._errors import BeanConstructionError, BeanError
from ._i18n import I18n, Translator
from ._session import Session, SessionStore


__all__ = [
    "BeanConstructionError",
    "BeanContainer",
    "BeanDescriptor",
    "BeanError",
    "I18n",
    "Resource",
    "Scope",
    "Session",
    "SessionStore",
    "Translator",
    "lifecycle",
    "post_construct",
    "pre_destroy",
    "resource",
]
