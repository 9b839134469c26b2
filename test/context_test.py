import json

import pytest

import release_candidate.context as examinee
from release_candidate.model import ContextError


def payload(owner='gardener', name='cc-utils'):
    return {
        'action': 'published',
        'repository': {
            'name': name,
            'full_name': f'{owner}/{name}',
            'owner': {
                'login': owner,
            },
        },
    }


def test_from_event_payload(monkeypatch):
    monkeypatch.delenv('GITHUB_SERVER_URL', raising=False)

    ctx = examinee.from_event_payload(payload())

    assert ctx.owner == 'gardener'
    assert ctx.name == 'cc-utils'
    assert ctx.host == 'github.com'
    assert ctx.full_name == 'gardener/cc-utils'
    assert ctx.repo_url == 'https://github.com/gardener/cc-utils'


def test_from_event_payload_honours_server_url(monkeypatch):
    monkeypatch.setenv('GITHUB_SERVER_URL', 'https://github.example.com/')

    ctx = examinee.from_event_payload(payload())

    assert ctx.host == 'github.example.com'
    assert ctx.repo_url == 'https://github.example.com/gardener/cc-utils'

    # explicitly passed host takes precedence
    ctx = examinee.from_event_payload(payload(), host='other.example.com')
    assert ctx.host == 'other.example.com'


@pytest.mark.parametrize('invalid_payload', [
    {},
    {'repository': None},
    {'repository': {'name': 'cc-utils'}},
    {'repository': {'name': 'cc-utils', 'owner': {}}},
    {'repository': {'owner': {'login': 'gardener'}}},
    ['not', 'a', 'mapping'],
])
def test_from_event_payload_without_repository_metadata(invalid_payload):
    with pytest.raises(ContextError):
        examinee.from_event_payload(invalid_payload)


def test_context_is_immutable():
    ctx = examinee.RepositoryContext(owner='o', name='r')

    with pytest.raises(AttributeError):
        ctx.owner = 'other'


def test_from_event_path(tmp_path, monkeypatch):
    event_path = tmp_path / 'event.json'
    event_path.write_text(json.dumps(payload()))
    monkeypatch.setenv('GITHUB_EVENT_PATH', str(event_path))

    ctx = examinee.from_event_path()
    assert ctx.full_name == 'gardener/cc-utils'

    ctx = examinee.from_event_path(path=str(event_path))
    assert ctx.full_name == 'gardener/cc-utils'


def test_from_event_path_errors(tmp_path, monkeypatch):
    monkeypatch.delenv('GITHUB_EVENT_PATH', raising=False)
    with pytest.raises(ContextError):
        examinee.from_event_path()

    with pytest.raises(ContextError):
        examinee.from_event_path(path=str(tmp_path / 'does-not-exist.json'))

    invalid = tmp_path / 'invalid.json'
    invalid.write_text('{no json')
    with pytest.raises(ContextError):
        examinee.from_event_path(path=str(invalid))
