"""
config.py — Environment-Aware Configuration
============================================
Usage:
    from config import config_map
    app.config.from_object(config_map[env])

All values read from environment variables (populated via .env / Docker env).
RELATIVE_PATH is the mount prefix; it is read once at start-up and never
changed while requests are being served.
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _split_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(',') if item.strip()]


class Config:
    # ── Flask ───────────────────────────────────────────────
    SECRET_KEY  = os.environ.get('SECRET_KEY',  'change-me-in-production')
    DEBUG       = False
    TESTING     = False

    # ── Mount prefix & API prefixes ─────────────────────────
    RELATIVE_PATH = os.environ.get('RELATIVE_PATH', '').rstrip('/')
    API_PREFIX    = '/api'
    API_V3_PREFIX = '/api/v3'

    # ── Site / i18n (Flask-Babel) ───────────────────────────
    SITE_TITLE           = os.environ.get('SITE_TITLE', 'Community Forum')
    BABEL_DEFAULT_LOCALE = os.environ.get('BABEL_DEFAULT_LOCALE', 'en_GB')
    LANGUAGES            = _split_list(os.environ.get('LANGUAGES', ''))   # empty: every shipped catalog
    LOCALES_DIR          = os.environ.get(
        'LOCALES_DIR', os.path.join(os.path.dirname(os.path.abspath(__file__)), 'locales'))
    # compiled .mo files; empty: <instance>/translations
    BABEL_TRANSLATION_DIRECTORIES = os.environ.get('BABEL_TRANSLATION_DIRECTORIES', '')

    # ── Access control ──────────────────────────────────────
    IP_BLACKLIST = _split_list(os.environ.get('IP_BLACKLIST', ''))   # IPs or CIDRs

    # ── Logging ─────────────────────────────────────────────
    LOG_DIR     = os.environ.get('LOG_DIR', 'logs')
    LOG_TO_FILE = True

    # ── Flask-Limiter ───────────────────────────────────────
    RATELIMIT_STORAGE_URI   = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
    RATELIMIT_DEFAULT       = '200 per minute'
    RATELIMIT_HEADERS_ENABLED = True

    # ── Flask-WTF CSRF ──────────────────────────────────────
    WTF_CSRF_ENABLED = True


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False
    # Shared limiter storage across workers
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'redis://localhost:6379/0')


class TestingConfig(Config):
    TESTING           = True
    RELATIVE_PATH     = '/forum'
    LOG_TO_FILE       = False
    IP_BLACKLIST      = []
    RATELIMIT_ENABLED = False
    WTF_CSRF_ENABLED  = False


config_map = {
    'development': DevelopmentConfig,
    'production':  ProductionConfig,
    'testing':     TestingConfig,
    'default':     DevelopmentConfig,
}
