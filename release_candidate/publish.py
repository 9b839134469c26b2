# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import datetime
import logging

import github3.exceptions
import github3.repos

import release_candidate.changelog
import release_candidate.config
import release_candidate.workspace
from release_candidate.model import (
    CreatedPullRequest,
    LabelingError,
)

logger = logging.getLogger(__name__)


def create_release_pr(
    repository: github3.repos.Repository,
    cfg: release_candidate.config.ReleaseCandidateCfg,
    body: str,
    date: datetime.date,
) -> CreatedPullRequest:
    head = release_candidate.workspace.rc_branch_name(cfg.version)

    body, fits = release_candidate.changelog.body_or_truncated(body)
    if not fits:
        logger.warning('changelog exceeds max length for pull request body - truncated')

    pull_request = repository.create_pull(
        title=cfg.render_pr_title(date),
        base=cfg.base_branch,
        head=head,
        body=body,
    )
    if not pull_request:
        # github3 returns None (instead of raising) for some unexpected responses
        raise RuntimeError(f'failed to create pull request for {head=} -> {cfg.base_branch=}')

    logger.info(f'created pull request #{pull_request.number}: {head} -> {cfg.base_branch}')

    return CreatedPullRequest(
        number=pull_request.number,
        url=pull_request.html_url,
    )


def add_label_to_pr(
    repository: github3.repos.Repository,
    number: int,
    label: str,
):
    issue = repository.issue(number)
    issue.add_labels(label)
    logger.info(f'added {label=} to #{number}')


def label_release_pr(
    repository: github3.repos.Repository,
    pull_request: CreatedPullRequest,
    label: str,
):
    '''
    labels the (already created) release-pull-request. If labeling fails, the pull request is
    left unlabeled; the resulting `LabelingError` references it.
    '''
    try:
        add_label_to_pr(
            repository=repository,
            number=pull_request.number,
            label=label,
        )
    except github3.exceptions.GitHubException as ghe:
        raise LabelingError(
            pull_request=pull_request,
            label=label,
            cause=ghe,
        ) from ghe
