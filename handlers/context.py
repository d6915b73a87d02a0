"""
handlers/context.py   Error Stage Types
==========================================
Values passed between the error-stage components:

  - ErrorStageSettings : mount prefix & API prefixes, frozen at start-up
  - ErrorContext       : what the stage reads from the raised exception
  - RequestContext     : what the stage reads from the Flask request
  - ErrorCode          : the codes the base handler table knows about
  - HandlerOutcome     : what a table handler hands back to the dispatcher
"""

import enum
import traceback
from dataclasses import dataclass, field
from typing import Any, Callable

from werkzeug.exceptions import HTTPException


@dataclass(frozen=True)
class ErrorStageSettings:
    relative_path: str = ''
    api_prefix: str = '/api'
    api_v3_prefix: str = '/api/v3'

    @classmethod
    def from_config(cls, config) -> 'ErrorStageSettings':
        return cls(
            relative_path=(config.get('RELATIVE_PATH') or '').rstrip('/'),
            api_prefix=config.get('API_PREFIX', '/api'),
            api_v3_prefix=config.get('API_V3_PREFIX', '/api/v3'),
        )


class ErrorCode(str, enum.Enum):
    BAD_CSRF_TOKEN = 'EBADCSRFTOKEN'
    BLACKLISTED_IP = 'blacklisted-ip'
    UNCLASSIFIED   = ''


class HandlerOutcome(enum.Enum):
    TERMINAL = 'terminal'   # the handler wrote the response
    CONTINUE = 'continue'   # run the default presenter


def format_stack(exc: BaseException) -> str:
    return ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))


@dataclass(frozen=True)
class ErrorContext:
    message: str
    status: str | int | None = None
    path: str | None = None
    code: str | None = None
    stack: str = ''
    exception: BaseException | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_exception(cls, exc: BaseException) -> 'ErrorContext':
        if isinstance(exc, HTTPException):
            # werkzeug's `code` is the HTTP status, not an error code
            return cls(
                message=exc.description or exc.name,
                status=exc.code,
                stack=format_stack(exc),
                exception=exc,
            )
        code = getattr(exc, 'code', None)
        return cls(
            message=str(getattr(exc, 'message', None) or exc),
            status=getattr(exc, 'status', None),
            path=getattr(exc, 'path', None),
            code=code if isinstance(code, str) else None,
            stack=format_stack(exc),
            exception=exc,
        )

    def parsed_status(self) -> int | None:
        """`status` as an int, or None when it is missing or not numeric."""
        try:
            return int(str(self.status).strip())
        except (TypeError, ValueError):
            return None


@dataclass(frozen=True)
class RequestContext:
    method: str
    original_url: str
    path: str

    @classmethod
    def from_flask(cls, request) -> 'RequestContext':
        query = request.query_string.decode('latin-1')
        return cls(
            method=request.method,
            original_url=request.path + (f'?{query}' if query else ''),
            path=request.path or '',
        )


# (error, request, response, continuation) -> HandlerOutcome | None
HandlerEntry = Callable[[ErrorContext, RequestContext, Any, Callable[[], Any]], Any]
