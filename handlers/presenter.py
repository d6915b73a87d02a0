"""
handlers/presenter.py   Default Error Presenter
==================================================
Fallback for every error the handler table does not claim, and the
continuation handed to table handlers that want default behavior.

  302/308 + path   -> X-Redirect (API) or a real redirect (pages)
  <prefix>/api/v3  -> v3 envelope; translation-key messages become 400s
  anything else    -> {path, error, bodyClass} as JSON or a rendered page
"""

import dataclasses
import logging

from core.api_response import format_api_response
from core.logging_config import request_line
from core.page_helpers import build_body_class, build_page_header
from core.sanitize import escape
from core.translator import is_translation_key, translate

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = (302, 308)


def error_template(status: int) -> str:
    return '400.html' if 400 <= status < 500 else '500.html'


class DefaultPresenter:
    def __init__(self, settings):
        self.settings = settings

    def present(self, error, request, response):
        if response.headers_sent:
            return None

        status = error.parsed_status()
        if status in REDIRECT_STATUSES and error.path:
            if response.is_api:
                return response.set_header('X-Redirect', error.path).status(200).json(error.path)
            return response.redirect(f'{self.settings.relative_path}{error.path}', code=status)

        path = str(request.path or '')

        if path.startswith(f'{self.settings.relative_path}{self.settings.api_v3_prefix}'):
            api_status = 500
            if is_translation_key(error.message):
                api_status = 400
                error = dataclasses.replace(error, message=translate(error.message))
            return format_api_response(api_status, response, error)

        logger.error(f"{request_line(request)}\n{error.stack or error.message}")
        response.status(status or 500)
        data = {
            'path': escape(path),
            'error': escape(error.message),
            'bodyClass': build_body_class(request, response, self.settings),
        }
        if response.is_api:
            return response.json(data)

        build_page_header(request, response, self.settings)
        return response.render(error_template(response.status_code), data)
