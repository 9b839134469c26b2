# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
resolves the repository a run is targeting from the event-payload of the triggering
GitHub-Actions-event
'''

import collections.abc
import dataclasses
import json
import logging
import os

from release_candidate.model import ContextError

logger = logging.getLogger(__name__)

default_host = 'github.com'


@dataclasses.dataclass(frozen=True)
class RepositoryContext:
    owner: str
    name: str
    host: str = default_host

    @property
    def full_name(self) -> str:
        return f'{self.owner}/{self.name}'

    @property
    def repo_url(self) -> str:
        return f'https://{self.host}/{self.owner}/{self.name}'


def host_from_env() -> str:
    if not (server_url := os.environ.get('GITHUB_SERVER_URL')):
        return default_host

    return server_url.removeprefix('https://').removeprefix('http://').strip('/')


def from_event_payload(
    payload: collections.abc.Mapping,
    host: str | None=None,
) -> RepositoryContext:
    if not isinstance(payload, collections.abc.Mapping):
        raise ContextError(f'event-payload is not a mapping: {type(payload)=}')

    if not (repository := payload.get('repository')):
        raise ContextError('event-payload does not contain repository-metadata')

    owner = (repository.get('owner') or {}).get('login')
    name = repository.get('name')

    if not owner or not name:
        raise ContextError(f'event-payload lacks repository owner or name: {owner=} {name=}')

    return RepositoryContext(
        owner=owner,
        name=name,
        host=host or host_from_env(),
    )


def from_event_path(
    path: str | None=None,
    host: str | None=None,
) -> RepositoryContext:
    '''
    reads the event-payload from given path, falling back to `GITHUB_EVENT_PATH` (as set for
    GitHub-Actions-runs).
    '''
    path = path or os.environ.get('GITHUB_EVENT_PATH')
    if not path:
        raise ContextError('no event-payload: GITHUB_EVENT_PATH is not set')

    try:
        with open(path) as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ContextError(f'failed to read event-payload from {path=}: {e}') from e

    ctx = from_event_payload(payload=payload, host=host)
    logger.info(f'resolved repository {ctx.full_name} on {ctx.host}')

    return ctx
