import datetime
import unittest.mock

import github3.exceptions
import pytest

import release_candidate.config as config
import release_candidate.publish as examinee
from release_candidate.model import (
    CreatedPullRequest,
    LabelingError,
)

date = datetime.date(2026, 10, 17)


@pytest.fixture
def cfg():
    return config.ReleaseCandidateCfg(
        token='token',
        version='v2.0.0',
        commit_message='msg',
        release_label='release',
        pr_title='Release <<VERSION>> (<<DATE>>)',
        workspace='/workspace',
    )


@pytest.fixture
def repository():
    repository = unittest.mock.MagicMock()
    repository.create_pull.return_value = unittest.mock.MagicMock(
        number=42,
        html_url='https://github.com/o/r/pull/42',
    )
    return repository


def test_create_release_pr(repository, cfg):
    pull_request = examinee.create_release_pr(
        repository=repository,
        cfg=cfg,
        body='the body',
        date=date,
    )

    assert pull_request == CreatedPullRequest(number=42, url='https://github.com/o/r/pull/42')
    repository.create_pull.assert_called_once_with(
        title='Release v2.0.0 (2026-10-17)',
        base='master',
        head='v2.0.0-rc',
        body='the body',
    )


def test_create_release_pr_fails_if_nothing_was_created(repository, cfg):
    repository.create_pull.return_value = None

    with pytest.raises(RuntimeError):
        examinee.create_release_pr(repository=repository, cfg=cfg, body='body', date=date)


def test_label_release_pr(repository):
    pull_request = CreatedPullRequest(number=42, url='https://github.com/o/r/pull/42')

    examinee.label_release_pr(
        repository=repository,
        pull_request=pull_request,
        label='release',
    )

    repository.issue.assert_called_once_with(42)
    repository.issue.return_value.add_labels.assert_called_once_with('release')


def test_label_release_pr_failure_references_pull_request(repository):
    response = unittest.mock.MagicMock(status_code=403)
    response.json.return_value = {'message': 'forbidden'}
    repository.issue.return_value.add_labels.side_effect = github3.exceptions.ForbiddenError(
        response,
    )
    pull_request = CreatedPullRequest(number=42, url='https://github.com/o/r/pull/42')

    with pytest.raises(LabelingError) as excinfo:
        examinee.label_release_pr(
            repository=repository,
            pull_request=pull_request,
            label='release',
        )

    assert excinfo.value.pull_request is pull_request
    assert 'https://github.com/o/r/pull/42' in str(excinfo.value)
