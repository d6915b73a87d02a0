import pytest
from flask import Blueprint

from app import create_app
from core.exceptions import AppError, BlacklistedIPError, MalformedURIError, RedirectSignal

PREFIX = '/forum'


def _raise(exc):
    raise exc


def make_error_routes():
    """Routes that raise the errors the error stage has to classify."""
    bp = Blueprint('boom', __name__)

    bp.add_url_rule('/topic/<path:rest>', 'bad_topic',
                    lambda rest: _raise(MalformedURIError('URI malformed')))
    bp.add_url_rule('/category/<path:rest>', 'bad_category',
                    lambda rest: _raise(MalformedURIError('URI malformed')))
    bp.add_url_rule('/api/whatever', 'bad_api',
                    lambda: _raise(MalformedURIError('URI malformed')))
    bp.add_url_rule('/broken/<path:rest>', 'bad_page',
                    lambda rest: _raise(MalformedURIError('URI malformed: <b>%E0%A4%A</b>')))

    bp.add_url_rule('/csrf', 'code_csrf',
                    lambda: _raise(AppError('invalid csrf token', code='EBADCSRFTOKEN')))
    bp.add_url_rule('/banned', 'code_banned',
                    lambda: _raise(AppError('denied', code='blacklisted-ip')))
    bp.add_url_rule('/native-banned', 'native_banned',
                    lambda: _raise(BlacklistedIPError('denied')))
    bp.add_url_rule('/custom', 'code_custom',
                    lambda: _raise(AppError('custom failure', code='custom-code')))

    bp.add_url_rule('/moved', 'moved', lambda: _raise(RedirectSignal('/foo')))
    bp.add_url_rule('/api/moved', 'api_moved', lambda: _raise(RedirectSignal('/foo')))
    bp.add_url_rule('/moved-permanently', 'moved_permanently',
                    lambda: _raise(RedirectSignal('/foo', status=308)))

    bp.add_url_rule('/api/v3/x', 'v3_boom', lambda: _raise(AppError('boom')))
    bp.add_url_rule('/api/v3/invalid', 'v3_invalid',
                    lambda: _raise(AppError('[[error:invalid-data]]')))

    bp.add_url_rule('/page', 'page_boom', lambda: _raise(RuntimeError('<script>x</script>')))
    bp.add_url_rule('/page-400', 'page_400',
                    lambda: _raise(AppError('bad input', status='400')))
    bp.add_url_rule('/api/read', 'api_read_boom', lambda: _raise(RuntimeError('kaput')))
    return bp


@pytest.fixture()
def app():
    """A fresh app per test so hook registrations never leak between tests."""
    app = create_app('testing')
    app.register_blueprint(make_error_routes(), url_prefix=PREFIX)
    yield app


@pytest.fixture()
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture()
def hooks(app):
    return app.extensions['hooks']
