"""
core/response.py   Write-Once Response
========================================
The error stage writes through a ResponseWriter instead of returning
Flask responses from every branch. The writer:

  - collects status / headers until the first body write
  - builds exactly one flask.Response; `headers_sent` is True from then on
  - raises HeadersSentError on any later status, header or body write
  - records which terminal state the write represents
"""

import enum

from flask import Response, jsonify, redirect as flask_redirect, render_template
from werkzeug.datastructures import Headers

from core.exceptions import HeadersSentError


class ErrorState(str, enum.Enum):
    UNHANDLED     = 'unhandled'
    REDIRECTED    = 'redirected'
    API_RESPONDED = 'api_responded'
    PAGE_RENDERED = 'page_rendered'
    SAFETY_NET    = 'safety_net'


class ResponseWriter:
    def __init__(self, locals=None):
        self.locals = dict(locals or {})
        self.status_code = 200
        self.headers = Headers()
        self.mimetype = None
        self.response: Response | None = None
        self.state = ErrorState.UNHANDLED

    @property
    def headers_sent(self) -> bool:
        return self.response is not None

    @property
    def is_api(self) -> bool:
        return bool(self.locals.get('is_api'))

    def _ensure_writable(self):
        if self.headers_sent:
            raise HeadersSentError('Cannot write to a response that has already been sent')

    def _finish(self, response: Response, state: ErrorState) -> Response:
        self._ensure_writable()
        for key, value in self.headers.items():
            response.headers[key] = value
        self.response = response
        self.state = state
        return response

    # -- Header stage -----------------------------------------

    def status(self, code: int) -> 'ResponseWriter':
        self._ensure_writable()
        self.status_code = int(code)
        return self

    def set_header(self, key: str, value: str) -> 'ResponseWriter':
        self._ensure_writable()
        self.headers[key] = value
        return self

    def content_type(self, mimetype: str) -> 'ResponseWriter':
        self._ensure_writable()
        self.mimetype = mimetype
        return self

    # -- Terminal writes --------------------------------------

    def json(self, payload) -> Response:
        self._ensure_writable()
        response = jsonify(payload)
        response.status_code = self.status_code
        return self._finish(response, ErrorState.API_RESPONDED)

    def send(self, body='', state: ErrorState = ErrorState.API_RESPONDED) -> Response:
        self._ensure_writable()
        response = Response(body, status=self.status_code, mimetype=self.mimetype or 'text/html')
        return self._finish(response, state)

    def send_status(self, code: int) -> Response:
        """Status only, no body."""
        self.status(code)
        return self._finish(Response(status=self.status_code), ErrorState.API_RESPONDED)

    def redirect(self, location: str, code: int = 302) -> Response:
        self._ensure_writable()
        return self._finish(flask_redirect(location, code=code), ErrorState.REDIRECTED)

    def render(self, template: str, data: dict | None = None) -> Response:
        self._ensure_writable()
        context = {**self.locals, **(data or {})}
        html = render_template(template, **context)
        response = Response(html, status=self.status_code, mimetype='text/html')
        return self._finish(response, ErrorState.PAGE_RENDERED)
