"""
handlers/registry.py   Code-Keyed Handler Table
==================================================
BASE_CASES maps the known error codes to their fixed responses. Plugins
add or override entries through the `filter:error.handle` hook; the
merged table is rebuilt on every dispatch and never cached.
"""

import logging

from marshmallow import ValidationError

from core.hooks import get_hooks
from core.logging_config import request_line
from core.validators import HookResultSchema
from handlers.context import ErrorCode, HandlerOutcome

logger = logging.getLogger(__name__)

ERROR_HANDLE_HOOK = 'filter:error.handle'

_hook_result = HookResultSchema()


def handle_bad_csrf_token(error, request, response, continuation=None):
    logger.error(f"{request_line(request)}\n{error.message}")
    if not response.headers_sent:
        response.send_status(403)
    return HandlerOutcome.TERMINAL


def handle_blacklisted_ip(error, request, response, continuation=None):
    if response.headers_sent:
        return HandlerOutcome.TERMINAL
    # message comes from the blacklist guard and is sent as-is
    response.status(403).content_type('text/plain').send(error.message)
    return HandlerOutcome.TERMINAL


BASE_CASES = {
    ErrorCode.BAD_CSRF_TOKEN.value: handle_bad_csrf_token,
    ErrorCode.BLACKLISTED_IP.value: handle_blacklisted_ip,
}


class HandlerRegistry:
    def __init__(self, hooks=None):
        self._hooks = hooks

    def resolve(self, base_table: dict) -> dict:
        """Base table merged with plugin contributions; the base table on any failure."""
        try:
            hooks = self._hooks or get_hooks()
            data = hooks.fire(ERROR_HANDLE_HOOK, {'cases': dict(base_table)})
            # plugins may override base entries but not drop them
            return {**base_table, **_hook_result.load(data)['cases']}
        except ValidationError as e:
            logger.warning(f"[errors/handle] Plugin handlers for errors are invalid: {e.messages}")
        except Exception as e:
            # Assume defaults
            logger.warning(f"[errors/handle] Unable to retrieve plugin handlers for errors: {e}")
        return dict(base_table)

    @staticmethod
    def lookup(table: dict, code):
        if not isinstance(code, str):
            return None
        return table.get(code)
