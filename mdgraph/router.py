"""Action routing for the metadata graph API."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Protocol

LOGGER = logging.getLogger(__name__)


class UnknownActionError(KeyError):
    """Raised for an action name nobody registered."""

    def __init__(self, action: str, known: List[str]) -> None:
        super().__init__(f"Unknown action: {action} (known: {', '.join(known) or 'none'})")
        self.action = action
        self.known = known


class ActionHandler(Protocol):
    """A handler takes the request ``params`` and returns ``{"result": ...}``."""

    def __call__(self, params: dict) -> dict:  # pragma: no cover - interface
        ...


@dataclass
class ActionRouter:
    """Map API action names onto the app's handlers."""

    handlers: Dict[str, ActionHandler] = field(default_factory=dict)
    logger: logging.Logger = field(default_factory=lambda: LOGGER)

    def register(self, action: str, handler: ActionHandler) -> None:
        name = action.strip()
        if not name:
            raise ValueError("action name must not be blank")
        if name in self.handlers:
            self.logger.debug("Replacing handler for action '%s'", name)
        self.handlers[name] = handler

    def actions(self) -> List[str]:
        return sorted(self.handlers)

    def dispatch(self, action: str, params: Optional[Mapping] = None) -> dict:
        """Run the handler for ``action`` with a copy of ``params``."""

        handler = self.handlers.get(action)
        if handler is None:
            raise UnknownActionError(action, self.actions())
        return handler(dict(params or {}))


__all__ = ["ActionHandler", "ActionRouter", "UnknownActionError"]
