# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
correlates merge-commits to the pull requests they were created from
'''

import collections.abc
import concurrent.futures
import functools
import logging
import typing

import github3
import github3.pulls as gh3p

import release_candidate.config
import release_candidate.context
from release_candidate.model import (
    Commit,
    PullRequestSummary,
)

logger = logging.getLogger(__name__)

# raw pull-request as returned by github-api
PullRequestDict: typing.TypeAlias = collections.abc.Mapping
PullsLookup = collections.abc.Callable[[str], collections.abc.Iterable[PullRequestDict]]

default_max_workers = 8


# pylint: disable=protected-access
# noinspection PyProtectedMember
def associated_pulls(
    gh: github3.GitHub,
    owner: str,
    repo: str,
    sha: str,
) -> tuple[PullRequestDict, ...]:
    ''' Returns a tuple with (raw) pull requests related to the specified commit.

    :param gh: Instance of the GitHub v3 API
    :param owner: Owner of the repository (on GitHub)
    :param repo: Name of the repository (on GitHub)
    :param sha: SHA of the commit
    '''
    url = gh._build_url('repos', owner, repo, 'commits', sha, 'pulls')
    return tuple(pr.as_dict() for pr in gh._iter(-1, url, gh3p.ShortPullRequest))


def associated_pulls_lookup(
    gh: github3.GitHub,
    ctx: release_candidate.context.RepositoryContext,
) -> PullsLookup:
    return functools.partial(
        associated_pulls,
        gh,
        ctx.owner,
        ctx.name,
    )


def fetch_prs_for_commits(
    commits: collections.abc.Sequence[Commit],
    pulls_lookup: PullsLookup,
    max_workers: int=default_max_workers,
) -> list[PullRequestDict]:
    '''
    looks up associated pull requests for each of the given commits. Lookups are run concurrently;
    all of them must succeed. Upon the first failed lookup, lookups that were not yet started are
    cancelled, and the lookup's error is re-raised.

    The returned list is flattened and may contain duplicates.
    '''
    if not commits:
        return []

    with concurrent.futures.ThreadPoolExecutor(
        max_workers=min(max_workers, len(commits)),
    ) as executor:
        futures = [
            executor.submit(pulls_lookup, commit.hexsha)
            for commit in commits
        ]
        done, pending = concurrent.futures.wait(
            futures,
            return_when=concurrent.futures.FIRST_EXCEPTION,
        )

        if (failed := [f for f in futures if f in done and f.exception() is not None]):
            for future in pending:
                future.cancel()
            logger.error(
                f'{len(failed)} pull-request-lookup(s) failed, cancelled {len(pending)}',
            )
            raise failed[0].exception()

    pulls = [
        pull
        for future in futures
        for pull in future.result()
    ]
    logger.info(f'found {len(pulls)} pull requests for {len(commits)} commits')

    return pulls


def label_names(pull: PullRequestDict) -> set[str]:
    return {label.get('name') for label in (pull.get('labels') or ())}


def is_relevant(
    pull: PullRequestDict,
    repo_full_name: str,
    base_branch: str,
    release_label: str,
) -> bool:
    '''
    a pull request is relevant iff it targets given base-branch of given repository, and is not
    a release-pull-request itself (i.e. does not carry the release-label)
    '''
    base = pull.get('base') or {}
    base_repo = base.get('repo') or {}

    if base_repo.get('full_name') != repo_full_name:
        return False

    if base.get('ref') != base_branch:
        return False

    if release_label in label_names(pull):
        return False

    return True


def summarise(pull: PullRequestDict) -> PullRequestSummary:
    user = pull.get('user') or {}

    return PullRequestSummary(
        number=pull['number'],
        url=pull.get('html_url'),
        author=user.get('login', 'ghost'),
        title=pull.get('title') or '',
    )


def relevant_pull_requests(
    pulls: collections.abc.Iterable[PullRequestDict],
    repo_full_name: str,
    base_branch: str,
    release_label: str,
) -> list[PullRequestSummary]:
    '''
    filters and projects given pull requests. Duplicates (by number) are dropped, keeping order
    of first occurrence.
    '''
    seen_numbers = set()
    summaries = []

    for pull in pulls:
        if not is_relevant(
            pull=pull,
            repo_full_name=repo_full_name,
            base_branch=base_branch,
            release_label=release_label,
        ):
            logger.debug(f'skipping pull request #{pull.get("number")}')
            continue

        summary = summarise(pull)
        if summary.number in seen_numbers:
            continue

        seen_numbers.add(summary.number)
        summaries.append(summary)

    return summaries


def correlate(
    commits: collections.abc.Sequence[Commit],
    pulls_lookup: PullsLookup,
    ctx: release_candidate.context.RepositoryContext,
    cfg: release_candidate.config.ReleaseCandidateCfg,
    max_workers: int=default_max_workers,
) -> list[PullRequestSummary]:
    pulls = fetch_prs_for_commits(
        commits=commits,
        pulls_lookup=pulls_lookup,
        max_workers=max_workers,
    )

    summaries = relevant_pull_requests(
        pulls=pulls,
        repo_full_name=ctx.full_name,
        base_branch=cfg.base_branch,
        release_label=cfg.release_label,
    )
    logger.info(f'{len(summaries)} pull requests qualify for release-candidate')
    for summary in summaries:
        logger.info(f'\t#{summary.number}: {summary.title}')

    return summaries
