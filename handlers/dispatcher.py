"""
handlers/dispatcher.py   Error Stage Entry Point
==================================================
register_error_handlers(app) installs two independent Flask error
handlers:

  1. MalformedURIError -> URIRecoveryHandler
  2. Exception         -> Dispatcher (every other error, HTTPExceptions included)

Dispatcher order of work:
  - native CSRF / IP-denial errors go straight to their base handler
  - otherwise the handler table is resolved and looked up by `code`
  - unknown codes, CONTINUE outcomes and handlers that wrote nothing
    end in the DefaultPresenter
  - anything that escapes is answered by the safety net: a plain-text 500
    carrying the inner failure's message, only if nothing was written yet
"""

import logging

from flask import Response, g, request
from flask_wtf.csrf import CSRFError

from core.exceptions import BlacklistedIPError, MalformedURIError
from core.logging_config import request_line
from core.middleware import is_api_path
from core.response import ErrorState, ResponseWriter
from handlers.context import (
    ErrorCode, ErrorContext, ErrorStageSettings, HandlerOutcome, RequestContext, format_stack,
)
from handlers.presenter import DefaultPresenter
from handlers.registry import BASE_CASES, HandlerRegistry
from handlers.uri import URIRecoveryHandler

logger = logging.getLogger(__name__)


def native_code(exc) -> ErrorCode:
    """Codes for error types recognized by class rather than by `code`."""
    if isinstance(exc, CSRFError):
        return ErrorCode.BAD_CSRF_TOKEN
    if isinstance(exc, BlacklistedIPError):
        return ErrorCode.BLACKLISTED_IP
    return ErrorCode.UNCLASSIFIED


def build_contexts(settings: ErrorStageSettings):
    request_ctx = RequestContext.from_flask(request)
    is_api = g.get('is_api')
    if is_api is None:
        is_api = is_api_path(request_ctx.path, settings.relative_path, settings.api_prefix)
    return request_ctx, ResponseWriter(locals={'is_api': is_api})


class Dispatcher:
    def __init__(self, settings: ErrorStageSettings, registry=None, presenter=None):
        self.settings = settings
        self.registry = registry or HandlerRegistry()
        self.presenter = presenter or DefaultPresenter(settings)

    def handle(self, exc):
        """Flask error handler: returns the response written for `exc`."""
        request_ctx, writer = build_contexts(self.settings)
        self.dispatch(ErrorContext.from_exception(exc), request_ctx, writer)
        if writer.response is None:
            # safety net could not write either
            return Response('Internal Server Error', status=500, mimetype='text/plain')
        return writer.response

    def dispatch(self, error, request_ctx, response):
        try:
            self._run(error, request_ctx, response)
        except Exception as inner:
            self._safety_net(inner, request_ctx, response)
        logger.debug(f"{request_line(request_ctx)} -> {response.state.value}")

    def _run(self, error, request_ctx, response):
        def continuation():
            return self.presenter.present(error, request_ctx, response)

        native = native_code(error.exception)
        if native is not ErrorCode.UNCLASSIFIED:
            handler = BASE_CASES[native.value]
        else:
            table = self.registry.resolve(BASE_CASES)
            handler = self.registry.lookup(table, error.code)
            if handler is None:
                continuation()
                return

        outcome = handler(error, request_ctx, response, continuation)
        if outcome is HandlerOutcome.CONTINUE or not response.headers_sent:
            continuation()

    def _safety_net(self, inner, request_ctx, response):
        logger.error(f"{request_line(request_ctx)}\n{format_stack(inner)}")
        if response.headers_sent:
            return
        try:
            response.status(500).content_type('text/plain').send(str(inner), state=ErrorState.SAFETY_NET)
        except Exception as e:
            logger.error(f"{request_line(request_ctx)}\nSafety net could not respond: {e}")


def register_error_handlers(app):
    settings = ErrorStageSettings.from_config(app.config)
    dispatcher = Dispatcher(settings)
    uri_handler = URIRecoveryHandler(settings)

    def handle_uri_errors(exc):
        if not isinstance(exc, MalformedURIError):
            return dispatcher.handle(exc)
        request_ctx, writer = build_contexts(settings)
        uri_handler.handle(ErrorContext.from_exception(exc), request_ctx, writer)
        return writer.response

    app.register_error_handler(MalformedURIError, handle_uri_errors)
    app.register_error_handler(Exception, dispatcher.handle)
    app.extensions['error_stage'] = dispatcher
    return dispatcher
