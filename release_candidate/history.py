# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import logging

import github3.exceptions
import github3.repos

import release_candidate.gitutil
from release_candidate.model import (
    Commit,
    Found,
    LastReleaseLookup,
    NotFound,
    QueryFailed,
    Release,
    ReleaseLookupError,
)

logger = logging.getLogger(__name__)

# limit amount of merge-commits considered if there was no previous release. Each commit results
# in one github-api-request (so we would run into quota-issues for large histories); also, it is
# unlikely for a single release to contain more pull requests
MERGE_COMMIT_LIMIT = 500


def last_release(
    repository: github3.repos.Repository,
) -> LastReleaseLookup:
    '''
    looks up the latest published release. Absence of a release is not considered an error (there
    is no previous release for a repository's first release); any other error is returned as
    `QueryFailed`, leaving it to the caller whether to fall back or abort.
    '''
    try:
        release = repository.latest_release()
    except github3.exceptions.NotFoundError:
        logger.info(f'no release found for {repository.full_name}')
        return NotFound()
    except github3.exceptions.GitHubException as ghe:
        logger.warning(f'failed to retrieve latest release for {repository.full_name}: {ghe}')
        return QueryFailed(cause=ghe)

    logger.info(f'latest release: {release.tag_name}')
    return Found(
        release=Release(
            tag_name=release.tag_name,
            published_at=release.published_at,
        ),
    )


def _remote_branch(base_branch: str) -> str:
    return f'origin/{base_branch}'


def merge_commits_since(
    git_helper: release_candidate.gitutil.GitHelper,
    tag_name: str,
    base_branch: str,
) -> tuple[Commit, ...]:
    '''
    returns merge-commits reachable from base-branch's head, but not from given tag
    '''
    if not git_helper.has_ref(tag_name):
        raise ReleaseLookupError(f'{tag_name=} of latest release is unknown to local clone')

    rev = f'{tag_name}..{_remote_branch(base_branch)}'
    commits = tuple(
        Commit.from_git_commit(commit)
        for commit in git_helper.iter_merge_commits(rev=rev)
    )
    logger.info(f'found {len(commits)} merge-commits in range {rev}')

    return commits


def all_merge_commits_since_beginning(
    git_helper: release_candidate.gitutil.GitHelper,
    base_branch: str,
    limit: int=MERGE_COMMIT_LIMIT,
) -> tuple[Commit, ...]:
    rev = _remote_branch(base_branch)
    commits = tuple(
        Commit.from_git_commit(commit)
        for commit in git_helper.iter_merge_commits(rev=rev, max_count=limit)
    )
    logger.info(f'found {len(commits)} merge-commits on {rev} ({limit=})')

    return commits


def merge_commits_for_release(
    git_helper: release_candidate.gitutil.GitHelper,
    lookup: LastReleaseLookup,
    base_branch: str,
) -> tuple[Commit, ...]:
    match lookup:
        case Found(release=release):
            return merge_commits_since(
                git_helper=git_helper,
                tag_name=release.tag_name,
                base_branch=base_branch,
            )
        case NotFound():
            logger.info('no previous release - considering all merge-commits')
            return all_merge_commits_since_beginning(
                git_helper=git_helper,
                base_branch=base_branch,
            )
        case QueryFailed(cause=cause):
            raise ReleaseLookupError(
                f'failed to determine latest release: {cause}',
            ) from cause
        case _:
            raise ValueError(lookup)
