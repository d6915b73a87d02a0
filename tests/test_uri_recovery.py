import json
import logging

import pytest

from app import create_app
from conftest import PREFIX


def test_topic_link_redirects_to_parsable_part(client):
    """Garbled topic links redirect to the topic itself."""
    response = client.get(f'{PREFIX}/topic/42/garbled')
    assert response.status_code == 302
    assert response.headers['Location'].endswith(f'{PREFIX}/topic/42')


def test_category_link_redirects_to_parsable_part(client):
    response = client.get(f'{PREFIX}/category/7/x')
    assert response.status_code == 302
    assert response.headers['Location'].endswith(f'{PREFIX}/category/7')


def test_topic_without_trailing_segment_is_a_bad_request(client):
    """/topic/<id> needs a following '/' to be recoverable."""
    response = client.get(f'{PREFIX}/topic/abc')
    assert response.status_code == 400
    assert b'Bad Request' in response.data


def test_api_path_gets_generic_json_error(client, caplog):
    with caplog.at_level(logging.WARNING):
        response = client.get(f'{PREFIX}/api/whatever')
    assert response.status_code == 400
    assert json.loads(response.data) == {'error': '[[global:400.title]]'}
    assert f'[controller] Bad request: {PREFIX}/api/whatever' in caplog.text


def test_page_path_renders_escaped_400(client):
    response = client.get(f'{PREFIX}/broken/x')
    assert response.status_code == 400
    assert response.mimetype == 'text/html'
    assert b'&lt;b&gt;' in response.data
    assert b'<b>%E0' not in response.data


# -- Broken escapes caught by the before-request guard ------------

@pytest.fixture()
def bare_client():
    """No raising routes registered: only the guard can produce the error."""
    return create_app('testing').test_client()


def test_broken_escape_in_topic_link_redirects(bare_client):
    response = bare_client.get(f'{PREFIX}/topic/42/%E0%A4%A')
    assert response.status_code == 302
    assert response.headers['Location'].endswith(f'{PREFIX}/topic/42')


def test_broken_escape_in_api_path_is_a_json_400(bare_client, caplog):
    with caplog.at_level(logging.WARNING):
        response = bare_client.get(f'{PREFIX}/api/foo/%E0%A4%A')
    assert response.status_code == 400
    assert json.loads(response.data) == {'error': '[[global:400.title]]'}
    assert '[controller] Bad request:' in caplog.text


def test_broken_escape_in_page_path_renders_400(bare_client):
    response = bare_client.get(f'{PREFIX}/user/%ZZ')
    assert response.status_code == 400
    assert b'error-400' in response.data
    assert b'Bad Request.' in response.data
