import pytest
from flask import g

from app import create_app
from conftest import PREFIX
from core.middleware import is_api_path, is_blacklisted, is_malformed_path, parse_blacklist
from core.page_helpers import build_body_class, slugify, strip_prefix
from core.response import ResponseWriter
from handlers.context import ErrorStageSettings, RequestContext


@pytest.mark.parametrize('raw, expected', [
    ('/topic/42/some-title', False),
    ('/topic/1/caf%C3%A9', False),
    ('/topic/42/%E0%A4%A', True),
    ('/topic/42/%', True),
    ('/topic/42/%ZZ', True),
    ('/topic/42/%FF', True),
])
def test_is_malformed_path(raw, expected):
    assert is_malformed_path(raw) is expected


def test_is_api_path():
    assert is_api_path('/forum/api', '/forum')
    assert is_api_path('/forum/api/v3/ping', '/forum')
    assert not is_api_path('/forum/apiary', '/forum')
    assert not is_api_path('/api/x', '/forum')


def test_blacklist_matches_ips_and_networks():
    networks = parse_blacklist(['10.0.0.0/8', '192.168.1.5', 'not-an-ip'])
    assert len(networks) == 2
    assert is_blacklisted('10.20.30.40', networks)
    assert is_blacklisted('192.168.1.5', networks)
    assert not is_blacklisted('192.168.1.6', networks)
    assert not is_blacklisted(None, networks)
    assert not is_blacklisted('garbage', networks)


def test_blacklisted_client_gets_plain_text_403():
    app = create_app('testing', {'IP_BLACKLIST': ['10.0.0.0/8']})
    client = app.test_client()

    response = client.get(f'{PREFIX}/health', environ_base={'REMOTE_ADDR': '10.1.2.3'})
    assert response.status_code == 403
    assert response.mimetype == 'text/plain'
    assert response.data.decode().startswith('Sorry, your IP address has been banned')

    allowed = client.get(f'{PREFIX}/health', environ_base={'REMOTE_ADDR': '127.0.0.1'})
    assert allowed.status_code == 200


def test_api_flag_is_set_for_api_requests(app):
    with app.test_request_context(f'{PREFIX}/api/v3/ping'):
        app.preprocess_request()
        assert g.is_api is True


# -- Page helpers --------------------------------------------------

def test_slugify():
    assert slugify('My Topic Title!') == 'my-topic-title'
    assert slugify('  --a--b--  ') == 'a-b'


def test_strip_prefix():
    assert strip_prefix('/forum/topic/1', '/forum') == '/topic/1'
    assert strip_prefix('/forumx/topic/1', '/forum') == '/forumx/topic/1'
    assert strip_prefix('/topic/1', '') == '/topic/1'


def test_body_class_from_path():
    settings = ErrorStageSettings(relative_path=PREFIX)
    request = RequestContext('GET', f'{PREFIX}/topic/42/My%20Slug', f'{PREFIX}/topic/42/My%20Slug')
    writer = ResponseWriter().status(404)
    assert build_body_class(request, writer, settings) == \
        'page-topic page-topic-42 page-topic-my-slug page-status-404 user-guest'


def test_body_class_for_home():
    settings = ErrorStageSettings(relative_path=PREFIX)
    request = RequestContext('GET', f'{PREFIX}/', f'{PREFIX}/')
    writer = ResponseWriter(locals={'user': 'alice'})
    assert build_body_class(request, writer, settings) == 'page-home page-status-200 user-loggedin'
