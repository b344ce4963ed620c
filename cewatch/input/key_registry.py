"""Named key bindings and their dispatch table."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

Handler = Callable[[], bool]


@dataclass(frozen=True)
class KeyComboBinding:
    """An action name, the key tokens that trigger it and its handler.

    Handlers return ``True`` when they changed something worth repainting.
    """

    action: str
    combos: tuple[str, ...]
    handler: Handler


class KeyComboRegistry:
    def __init__(self) -> None:
        self._by_key: dict[str, KeyComboBinding] = {}

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        # A token bound twice keeps the last registration.
        for binding in bindings:
            self._by_key.update(dict.fromkeys(binding.combos, binding))
        return self

    def dispatch(self, key: str) -> bool | None:
        """Run the handler for ``key``; ``None`` means nothing is bound to it."""
        binding = self._by_key.get(key)
        if binding is None:
            return None
        logger.debug("key %r -> %s", key, binding.action)
        return binding.handler()
