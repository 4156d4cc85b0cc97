from __future__ import annotations


class BeanError(RuntimeError):
    pass


class BeanConstructionError(BeanError):
    """Raised when a bean cannot be constructed, wired or initialized.

    The message is the rendered, user-facing text; the failing type and the
    underlying exception are kept on the instance.
    """

    def __init__(self, message: str, *, bean_type: type, cause: BaseException) -> None:
        super().__init__(message)
        self.bean_type = bean_type
        self.cause = cause
