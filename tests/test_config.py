"""Unit tests for the config file and the remote package feed."""

import json
import shutil
import tempfile
from pathlib import Path

import pytest
import requests

from nymc.core import config as config_module
from nymc.core.config import (
    ScanConfiguration,
    config_exists,
    config_path,
    create_config,
    fetch_packages,
    load_packages,
    parse_https_header,
    read_config,
)
from nymc.core.errors import ConfigurationError, RemoteFeedError


@pytest.fixture
def temp_project_dir():
    """Create a temporary project directory with a package.json."""
    temp_dir = Path(tempfile.mkdtemp())
    with open(temp_dir / 'package.json', 'w') as f:
        json.dump({'name': 'test-project', 'version': '1.0.0'}, f)
    yield temp_dir

    shutil.rmtree(temp_dir, ignore_errors=True)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason='OK', invalid_json=False):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError('Expecting value')
        return self._payload


@pytest.fixture
def fake_get(monkeypatch):
    """Replace requests.get; tests set .response and inspect .calls."""

    class FakeGet:
        def __init__(self):
            self.calls = []
            self.response = FakeResponse(payload=[])

        def __call__(self, url, headers=None, timeout=None):
            self.calls.append({'url': url, 'headers': headers, 'timeout': timeout})
            if isinstance(self.response, Exception):
                raise self.response
            return self.response

    fake = FakeGet()
    monkeypatch.setattr(config_module.requests, 'get', fake)
    return fake


def test_config_exists(temp_project_dir):
    assert not config_exists(temp_project_dir)

    create_config(temp_project_dir)

    assert config_exists(temp_project_dir)
    assert config_path(temp_project_dir) == temp_project_dir / '.nymc' / 'config.json'


def test_create_config_defaults(temp_project_dir):
    """Test the bootstrapped config: empty lists and the project's version."""
    path = create_config(temp_project_dir)

    with open(path) as f:
        data = json.load(f)

    assert data == {'version': '1.0.0', 'url': '', 'httpsHeader': '', 'packages': []}


def test_create_config_keeps_existing_without_force(temp_project_dir):
    create_config(temp_project_dir)
    path = config_path(temp_project_dir)
    path.write_text(json.dumps({'version': '1.0.0', 'packages': ['evil@1.0.0']}))

    assert create_config(temp_project_dir) is None
    assert read_config(temp_project_dir).packages == ['evil@1.0.0']


def test_create_config_force_overwrites(temp_project_dir):
    create_config(temp_project_dir)
    config_path(temp_project_dir).write_text(json.dumps({'packages': ['evil@1.0.0']}))

    assert create_config(temp_project_dir, force=True) is not None
    assert read_config(temp_project_dir).packages == []


def test_create_config_without_manifest_version(temp_project_dir):
    (temp_project_dir / 'package.json').write_text('{"name": "no-version"}')

    create_config(temp_project_dir)

    assert read_config(temp_project_dir).version == '0.0.1'


def test_read_config(temp_project_dir):
    config_path(temp_project_dir).parent.mkdir()
    config_path(temp_project_dir).write_text(json.dumps({
        'version': '1.0.0',
        'url': 'https://example.com',
        'httpsHeader': 'Authorization: Bearer token',
        'packages': ['malware@1.0.0'],
    }))

    config = read_config(temp_project_dir)

    assert config == ScanConfiguration(
        version='1.0.0',
        url='https://example.com',
        https_header='Authorization: Bearer token',
        packages=['malware@1.0.0'],
    )


def test_read_config_missing(temp_project_dir):
    with pytest.raises(ConfigurationError, match='Config file not found'):
        read_config(temp_project_dir)


def test_read_config_invalid_json(temp_project_dir):
    config_path(temp_project_dir).parent.mkdir()
    config_path(temp_project_dir).write_text('{oops')

    with pytest.raises(ConfigurationError, match='Invalid JSON'):
        read_config(temp_project_dir)


def test_parse_https_header():
    assert parse_https_header('') == {}
    assert parse_https_header('Authorization: Bearer token123') == {'Authorization': 'Bearer token123'}
    assert parse_https_header('X-Api-Key: abc:def:ghi') == {'X-Api-Key': 'abc:def:ghi'}


@pytest.mark.parametrize('header', ['InvalidHeader', ': value'])
def test_parse_https_header_invalid(header):
    with pytest.raises(RemoteFeedError, match='Invalid httpsHeader'):
        parse_https_header(header)


def test_fetch_packages(fake_get):
    fake_get.response = FakeResponse(payload=['pkg-a@1.0.0', 'pkg-b@2.0.0'])
    config = ScanConfiguration(url='https://example.com/packages')

    assert fetch_packages(config) == ['pkg-a@1.0.0', 'pkg-b@2.0.0']
    assert fake_get.calls[0]['url'] == 'https://example.com/packages'
    assert fake_get.calls[0]['headers'] == {}
    assert fake_get.calls[0]['timeout'] == config_module.FETCH_TIMEOUT


def test_fetch_packages_sends_header(fake_get):
    config = ScanConfiguration(url='https://example.com/packages', https_header='X-Api-Key: abc:def')

    fetch_packages(config)

    assert fake_get.calls[0]['headers'] == {'X-Api-Key': 'abc:def'}


def test_fetch_packages_requires_url(fake_get):
    with pytest.raises(RemoteFeedError, match='No url configured'):
        fetch_packages(ScanConfiguration(url=''))

    assert fake_get.calls == []


def test_fetch_packages_bad_header_is_fatal(fake_get):
    with pytest.raises(RemoteFeedError):
        fetch_packages(ScanConfiguration(url='https://example.com', https_header='InvalidHeader'))

    assert fake_get.calls == []


def test_fetch_packages_non_2xx(fake_get):
    fake_get.response = FakeResponse(status_code=404, reason='Not Found')

    with pytest.raises(RemoteFeedError, match='404 Not Found'):
        fetch_packages(ScanConfiguration(url='https://example.com/packages'))


def test_fetch_packages_transport_error(fake_get):
    fake_get.response = requests.ConnectionError('connection refused')

    with pytest.raises(RemoteFeedError, match='connection refused'):
        fetch_packages(ScanConfiguration(url='https://example.com/packages'))


@pytest.mark.parametrize('response', [
    FakeResponse(invalid_json=True),
    FakeResponse(payload={'packages': []}),
    FakeResponse(payload=['ok@1.0.0', 3]),
])
def test_fetch_packages_bad_payload(fake_get, response):
    fake_get.response = response

    with pytest.raises(RemoteFeedError):
        fetch_packages(ScanConfiguration(url='https://example.com/packages'))


def test_load_packages_remote_replaces_local(fake_get):
    """Test that the remote list replaces, not extends, the local list."""
    fake_get.response = FakeResponse(payload=['remote@1.0.0'])
    config = ScanConfiguration(url='https://example.com', packages=['local@1.0.0'])

    assert load_packages(config, use_network=True) == ['remote@1.0.0']
    assert load_packages(config, use_network=False) == ['local@1.0.0']
