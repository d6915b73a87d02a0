"""
core/hooks.py   Plugin Hook Registry
======================================
Minimal host-side extension point. Plugins register listeners at
start-up; the error stage fires `filter:error.handle` once per dispatch.

Filter semantics:
  - listeners run in ascending priority, each receiving the previous result
  - each listener gets its own shallow copy of the payload, so a listener
    that raises leaves nothing half-applied behind
  - a listener that raises or returns a non-dict is logged and skipped
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Callable

from flask import current_app

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Listener:
    hook: str
    method: Callable[[dict], Any]
    priority: int = 10
    plugin_id: str | None = None


class HookRegistry:
    def __init__(self, app=None):
        self._listeners: dict[str, list[Listener]] = {}
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        app.extensions['hooks'] = self

    def register(self, hook: str, method: Callable[[dict], Any],
                 priority: int = 10, plugin_id: str | None = None) -> Listener:
        listener = Listener(hook, method, priority, plugin_id)
        listeners = self._listeners.setdefault(hook, [])
        listeners.append(listener)
        # sort is stable, so equal priorities keep registration order
        listeners.sort(key=lambda item: item.priority)
        return listener

    def unregister(self, hook: str, method: Callable[[dict], Any]) -> None:
        self._listeners[hook] = [
            item for item in self._listeners.get(hook, []) if item.method is not method
        ]

    def has_listeners(self, hook: str) -> bool:
        return bool(self._listeners.get(hook))

    def count(self) -> int:
        return sum(len(items) for items in self._listeners.values())

    def fire(self, hook: str, params: dict) -> dict:
        """Run every filter listener for `hook` and return the final payload."""
        result = params
        for listener in list(self._listeners.get(hook, [])):
            name = listener.plugin_id or getattr(listener.method, '__name__', repr(listener.method))
            try:
                returned = listener.method(_copy_payload(result))
            except Exception as e:
                logger.warning(f"[plugins] {hook} listener {name} failed: {e}")
                continue
            if not isinstance(returned, dict):
                logger.warning(f"[plugins] {hook} listener {name} returned "
                               f"{type(returned).__name__}, expected dict")
                continue
            result = returned
        return result


def _copy_payload(payload: dict) -> dict:
    # one level deeper than the payload itself: {'cases': {...}} gets a fresh cases dict
    return {
        key: copy.copy(value) if isinstance(value, (dict, list)) else value
        for key, value in payload.items()
    }


def get_hooks() -> HookRegistry:
    return current_app.extensions['hooks']
