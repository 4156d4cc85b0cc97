from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from collections.abc import Mapping


logger = logging.getLogger(__name__)


@runtime_checkable
class Translator(Protocol):
    def tr(self, text: str, *args: object) -> str: ...


class I18n:
    """Message catalog rendering `{0}`-style templates.

    Example:
      i18n = I18n({"{0} cannot be created: {1}": "{0} kann nicht erstellt werden: {1}"})
      i18n.tr("{0} cannot be created: {1}", "Mailer", "boom")

    Templates missing from the catalog are rendered as given.
    """

    def __init__(self, catalog: Mapping[str, str] | None = None) -> None:
        self._catalog = dict(catalog or {})

    def tr(self, text: str, *args: object) -> str:
        template = self._catalog.get(text, text)
        try:
            return template.format(*args)
        except (IndexError, KeyError, ValueError):
            logger.warning("unable to format message template %r", template)
            return template
