"""
core/middleware.py   Before-Request Guards
============================================
Runs ahead of every route and raises the errors the error stage knows
how to classify:

  - mark_api_request()    : g.is_api for requests under <prefix>/api
  - reject_malformed_uri(): MalformedURIError for undecodable paths
  - enforce_ip_blacklist(): BlacklistedIPError for banned addresses

init_middleware(app) parses IP_BLACKLIST once and installs the guards in
that order.
"""

import ipaddress
import logging
import re
from urllib.parse import unquote

from flask import current_app, g, request

from core.exceptions import BlacklistedIPError, MalformedURIError
from core.translator import translate

logger = logging.getLogger(__name__)

_BAD_ESCAPE = re.compile(r'%(?![0-9A-Fa-f]{2})')


def is_api_path(path: str, relative_path: str, api_prefix: str = '/api') -> bool:
    prefix = f'{relative_path}{api_prefix}'
    return path == prefix or path.startswith(prefix + '/')


def is_malformed_path(raw_path: str) -> bool:
    """True when the raw request path has broken percent-escapes or non UTF-8 bytes."""
    if '\ufffd' in raw_path or _BAD_ESCAPE.search(raw_path):
        return True
    try:
        unquote(raw_path, errors='strict')
    except UnicodeDecodeError:
        return True
    return False


def parse_blacklist(entries) -> tuple:
    networks = []
    for entry in entries:
        try:
            networks.append(ipaddress.ip_network(entry, strict=False))
        except ValueError:
            logger.warning(f"[blacklist] Ignoring invalid rule: {entry}")
    return tuple(networks)


def is_blacklisted(address: str | None, networks) -> bool:
    if not address or not networks:
        return False
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        return False
    return any(ip in network for network in networks)


# -- Guards ---------------------------------------------------

def mark_api_request():
    cfg = current_app.config
    g.is_api = is_api_path(request.path, cfg['RELATIVE_PATH'], cfg['API_PREFIX'])


def reject_malformed_uri():
    raw = request.environ.get('RAW_URI') or request.environ.get('REQUEST_URI') or request.path
    if is_malformed_path(raw.split('?', 1)[0]):
        raise MalformedURIError(f'URI malformed: {raw}')


def enforce_ip_blacklist():
    networks = current_app.extensions.get('ip_blacklist', ())
    if is_blacklisted(request.remote_addr, networks):
        raise BlacklistedIPError(translate('[[error:blacklisted-ip]]'))


def init_middleware(app):
    app.extensions['ip_blacklist'] = parse_blacklist(app.config.get('IP_BLACKLIST', []))
    app.before_request(mark_api_request)
    app.before_request(reject_malformed_uri)
    app.before_request(enforce_ip_blacklist)
