"""
core/i18n.py   Flask-Babel Setup
==================================
Babel singleton (init_app() called from create_app()), the per-request
locale selector and the catalog compiler.

Message catalogs live in `locales/<locale>/LC_MESSAGES/messages.po`. They
are compiled to `.mo` at start-up into BABEL_TRANSLATION_DIRECTORIES
(default: `<instance>/translations`); a catalog is only recompiled when
its `.po` is newer than the compiled file.
"""

import logging
import os

from babel.messages.mofile import write_mo
from babel.messages.pofile import read_po
from flask import current_app, has_request_context, request
from flask_babel import Babel

logger = logging.getLogger(__name__)

DOMAIN = 'messages'

# Singleton   init_app() called from create_app()
babel = Babel()


def select_locale() -> str:
    """Best Accept-Language match among the shipped catalogs."""
    default = current_app.config['BABEL_DEFAULT_LOCALE']
    if not has_request_context():
        return default
    return request.accept_languages.best_match(current_app.config['LANGUAGES'], default=default)


def compile_catalogs(source_dir: str, target_dir: str, domain: str = DOMAIN) -> list[str]:
    """Compile every `<locale>/LC_MESSAGES/<domain>.po` under `source_dir`."""
    if not os.path.isdir(source_dir):
        logger.warning(f"[i18n] No message catalogs found in {source_dir}")
        return []

    compiled = []
    for locale in sorted(os.listdir(source_dir)):
        po_path = os.path.join(source_dir, locale, 'LC_MESSAGES', f'{domain}.po')
        if not os.path.isfile(po_path):
            continue
        mo_dir  = os.path.join(target_dir, locale, 'LC_MESSAGES')
        mo_path = os.path.join(mo_dir, f'{domain}.mo')
        compiled.append(locale)

        if os.path.exists(mo_path) and os.path.getmtime(mo_path) >= os.path.getmtime(po_path):
            continue

        with open(po_path, 'rb') as fh:
            catalog = read_po(fh, locale=locale, domain=domain)
        os.makedirs(mo_dir, exist_ok=True)
        # other workers may be reading the old file
        tmp_path = f'{mo_path}.{os.getpid()}.tmp'
        with open(tmp_path, 'wb') as fh:
            write_mo(fh, catalog)
        os.replace(tmp_path, mo_path)
        logger.info(f"[i18n] Compiled {locale} catalog ({len(catalog)} messages)")

    return compiled


def init_i18n(app) -> None:
    target = app.config.get('BABEL_TRANSLATION_DIRECTORIES') or \
        os.path.join(app.instance_path, 'translations')
    app.config['BABEL_TRANSLATION_DIRECTORIES'] = target

    available = compile_catalogs(app.config['LOCALES_DIR'], target)
    if not app.config.get('LANGUAGES'):
        app.config['LANGUAGES'] = available or [app.config['BABEL_DEFAULT_LOCALE']]

    babel.init_app(app, locale_selector=select_locale)
