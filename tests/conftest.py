"""Test configuration and fixtures"""

import copy
import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

REVISION = "AAAAELqqrKuzaoeUKYP7gEzCzrx3h0rD"
FIXED_MILLIS = 1665582465479

ROOT_LIST_DOCUMENT = {
    "revision": REVISION,
    "length": 4,
    "attributes": {},
    "contents": {
        "pos": 0,
        "truncated": False,
        "items": [
            {
                "uri": "spotify:start-group:123456789abcdefa:Abablagan",
                "attributes": {"timestamp": "1665495078416", "seenAt": "0", "public": False},
            },
            {
                "uri": "spotify:end-group:123456789abcdefa",
                "attributes": {"timestamp": "1665495078416", "seenAt": "0", "public": False},
            },
            {
                "uri": "spotify:playlist:5aNzxEEkRE9MgNkiuXmpOR",
                "attributes": {"timestamp": "1665486971754", "seenAt": "0", "public": False},
            },
            {
                "uri": "spotify:playlist:3FKTkhbClLGgKdPpbx3aHy",
                "attributes": {"timestamp": "1665486908663", "seenAt": "0", "public": False},
            },
        ],
        "metaItems": [
            {},
            {},
            {
                "revision": "AAAAAX9FIoTlMkv9e4zCryuZtD/yioLv",
                "attributes": {"name": "My Playlist #2"},
                "length": 0,
                "timestamp": "1665486971670",
                "ownerUsername": "31h5mfzvglpwfevvaens2flw7smu",
            },
            {
                "revision": "AAAAAvZixvi5cLYefOMaVOKtGZUJS5pE",
                "attributes": {"name": "My Playlist #1"},
                "length": 1,
                "timestamp": "1665486922515",
                "ownerUsername": "31h5mfzvglpwfevvaens2flw7smu",
            },
        ],
    },
    "timestamp": "1665495078416",
}


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def root_list_document():
    """Root list response as returned by the server (fresh copy per test)"""
    return copy.deepcopy(ROOT_LIST_DOCUMENT)


@pytest.fixture
def nested_root_list_document():
    """Root list with a folder inside a folder and a playlist in each"""
    return {
        "revision": "REV2",
        "contents": {
            "items": [
                {"uri": "spotify:playlist:top"},
                {"uri": "spotify:start-group:aaaaaaaaaaaaaaaa:Outer"},
                {"uri": "spotify:playlist:outer1"},
                {"uri": "spotify:start-group:bbbbbbbbbbbbbbbb:Inner"},
                {"uri": "spotify:playlist:inner1"},
                {"uri": "spotify:end-group:bbbbbbbbbbbbbbbb"},
                {"uri": "spotify:end-group:aaaaaaaaaaaaaaaa"},
                {"uri": "spotify:playlist:bottom"},
            ],
        },
    }


@pytest.fixture
def fixed_clock():
    """Clock frozen at FIXED_MILLIS"""
    return lambda: FIXED_MILLIS


def make_response(status_code=200, json_body=None, url="https://example.invalid"):
    """Build a mock requests.Response"""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.url = url
    if isinstance(json_body, Exception):
        response.json.side_effect = json_body
    else:
        response.json.return_value = json_body
    if status_code >= 400:
        error = requests.HTTPError(f"{status_code} Error", response=response)
        response.raise_for_status.side_effect = error
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def response_factory():
    """Factory for mock HTTP responses"""
    return make_response


@pytest.fixture
def mock_http():
    """Mock requests.Session"""
    return Mock(spec=requests.Session)
