"""
core/page_helpers.py   Page Context Builders
==============================================
  - build_page_header() : fills writer.locals['header'] for templates
  - build_body_class()  : CSS classes describing the current page
"""

import re
from urllib.parse import unquote

from flask import current_app
from flask_babel import get_locale

_INVALID_SLUG_CHARS = re.compile(r'[^\w\-]+', re.UNICODE)
_DASHES = re.compile(r'-{2,}')


def slugify(value: str) -> str:
    value = _INVALID_SLUG_CHARS.sub('-', value.strip().lower())
    return _DASHES.sub('-', value).strip('-')


def strip_prefix(path: str, prefix: str) -> str:
    if prefix and (path == prefix or path.startswith(prefix + '/')):
        return path[len(prefix):]
    return path


def build_page_header(request, writer, settings) -> None:
    writer.locals['header'] = {
        'title':         current_app.config.get('SITE_TITLE', ''),
        'relative_path': settings.relative_path,
        'language':      str(get_locale() or current_app.config['BABEL_DEFAULT_LOCALE']).replace('_', '-'),
        'method':        request.method,
    }


def build_body_class(request, writer, settings) -> str:
    clean = strip_prefix(request.path or '', settings.relative_path)
    clean = re.sub(r'^/api(?=/|$)', '', clean).strip('/')
    parts = clean.split('/')[:3]

    classes = []
    for index, part in enumerate(parts):
        try:
            part = slugify(unquote(part, errors='strict'))
        except UnicodeDecodeError:
            part = slugify(part)
        if index == 0:
            classes.append(f'page-{part or "home"}')
        elif part:
            classes.append(f'{classes[0]}-{part}')

    classes.append(f'page-status-{writer.status_code}')
    classes.append('user-loggedin' if writer.locals.get('user') else 'user-guest')
    return ' '.join(classes)
