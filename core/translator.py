"""
core/translator.py   Translation Key Lookup
==========================================
Resolves `[[namespace:key]]` and `[[namespace:key, arg1, arg2]]` tokens.
Each `namespace:key` is a msgid in the Flask-Babel catalogs:

    msgid "error:required-parameters-missing"
    msgstr "Required parameters were missing from this API call: %1"

The locale comes from Flask-Babel's `get_locale()` (see core/i18n.py)
unless one is forced. A key missing from the request's catalog falls back
to BABEL_DEFAULT_LOCALE; tokens that still cannot be resolved are left in
place, so an unknown key is recognizable in the output.
"""

import re

from flask import current_app
from flask_babel import force_locale, get_locale, gettext

TOKEN_RE = re.compile(r'\[\[([\w\-]+):([^\[\]]+?)\]\]')


def is_translation_key(message) -> bool:
    return isinstance(message, str) and message.startswith('[[')


def lookup(namespace: str, key: str) -> str | None:
    msgid = f'{namespace}:{key}'
    value = gettext(msgid)
    if value != msgid:
        return value

    default = current_app.config['BABEL_DEFAULT_LOCALE']
    if str(get_locale()) == default:
        return None
    with force_locale(default):
        value = gettext(msgid)
    return None if value == msgid else value


def _substitute(text: str, args: list[str]) -> str:
    # %10 before %1
    for index in range(len(args), 0, -1):
        text = text.replace(f'%{index}', args[index - 1])
    return text


def _replace_tokens(text: str) -> str:
    def replace(match):
        key, *args = [part.strip() for part in match.group(2).split(',')]
        value = lookup(match.group(1), key)
        if value is None:
            return match.group(0)
        return _substitute(value, args)

    return TOKEN_RE.sub(replace, text)


def translate(text, language: str | None = None) -> str:
    """Replace every translation token in `text`."""
    text = str(text)
    if '[[' not in text:
        return text
    if language is None:
        return _replace_tokens(text)
    with force_locale(language):
        return _replace_tokens(text)
