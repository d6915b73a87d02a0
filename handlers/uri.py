"""
handlers/uri.py   Malformed-URI Recovery
==========================================
First error stage. Truncated or garbled topic/category links are
redirected to the part that still parses; anything else becomes a 400.
"""

import logging
import re

from core.page_helpers import build_page_header, strip_prefix
from core.sanitize import escape

logger = logging.getLogger(__name__)

RECOVERABLE_PATH = re.compile(r'^/(topic|category)/(\d+)/')

API_BAD_REQUEST = {'error': '[[global:400.title]]'}


class URIRecoveryHandler:
    def __init__(self, settings):
        self.settings = settings

    def handle(self, error, request, response):
        prefix = self.settings.relative_path
        match = RECOVERABLE_PATH.match(strip_prefix(request.path, prefix))
        if match:
            kind, item_id = match.groups()
            return response.redirect(f'{prefix}/{kind}/{item_id}')

        logger.warning(f"[controller] Bad request: {request.path}")
        if request.path.startswith(f'{prefix}{self.settings.api_prefix}'):
            return response.status(400).json(API_BAD_REQUEST)

        build_page_header(request, response, self.settings)
        return response.status(400).render('400.html', {'error': escape(error.message)})
