# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
the release-candidate-pipeline:

START -> CONTEXT_RESOLVED -> CLONED -> HISTORY_FETCHED -> PRS_CORRELATED -> (ABORTED if empty)
  -> BRANCH_CREATED -> PR_CREATED -> LABELED -> DONE

Each step is a hard prerequisite for the next one. There are no retries; any error aborts the run.
'''

import collections.abc
import datetime
import enum
import logging

import github3
import github3.repos

import release_candidate.changelog
import release_candidate.config
import release_candidate.context
import release_candidate.correlate
import release_candidate.github
import release_candidate.gitutil
import release_candidate.history
import release_candidate.publish
import release_candidate.workspace
from release_candidate.model import (
    CreatedPullRequest,
    NoChangesError,
)

logger = logging.getLogger(__name__)


class PipelineState(enum.StrEnum):
    START = 'start'
    CONTEXT_RESOLVED = 'context-resolved'
    CLONED = 'cloned'
    HISTORY_FETCHED = 'history-fetched'
    PRS_CORRELATED = 'prs-correlated'
    ABORTED = 'aborted'
    BRANCH_CREATED = 'branch-created'
    PR_CREATED = 'pr-created'
    LABELED = 'labeled'
    DONE = 'done'


CloneFunction = collections.abc.Callable[
    [
        release_candidate.context.RepositoryContext,
        release_candidate.config.ReleaseCandidateCfg,
    ],
    release_candidate.gitutil.GitHelper,
]


class ReleaseCandidatePipeline:
    def __init__(
        self,
        ctx: release_candidate.context.RepositoryContext,
        cfg: release_candidate.config.ReleaseCandidateCfg,
        repository: github3.repos.Repository,
        pulls_lookup: release_candidate.correlate.PullsLookup,
        clone: CloneFunction=release_candidate.workspace.clone_repo,
        today: datetime.date | None=None,
    ):
        self.ctx = ctx
        self.cfg = cfg
        self.repository = repository
        self.pulls_lookup = pulls_lookup
        self.clone = clone
        self.today = today or datetime.date.today()

        self.state = PipelineState.START

    def _transition(self, state: PipelineState):
        logger.info(f'{self.state} -> {state}')
        self.state = state

    def run(self) -> CreatedPullRequest:
        ctx = self.ctx
        cfg = self.cfg
        self._transition(PipelineState.CONTEXT_RESOLVED)

        git_helper = self.clone(ctx, cfg)
        self._transition(PipelineState.CLONED)

        commits = release_candidate.history.merge_commits_for_release(
            git_helper=git_helper,
            lookup=release_candidate.history.last_release(self.repository),
            base_branch=cfg.base_branch,
        )
        self._transition(PipelineState.HISTORY_FETCHED)

        pull_requests = release_candidate.correlate.correlate(
            commits=commits,
            pulls_lookup=self.pulls_lookup,
            ctx=ctx,
            cfg=cfg,
        )
        self._transition(PipelineState.PRS_CORRELATED)

        if not pull_requests:
            self._transition(PipelineState.ABORTED)
            raise NoChangesError('No pull requests have been merged since last release')

        body = release_candidate.changelog.release_pr_body(
            pull_requests=pull_requests,
            date=self.today,
        )

        release_candidate.workspace.create_release_candidate_branch(
            git_helper=git_helper,
            cfg=cfg,
            date=self.today,
        )
        self._transition(PipelineState.BRANCH_CREATED)

        pull_request = release_candidate.publish.create_release_pr(
            repository=self.repository,
            cfg=cfg,
            body=body,
            date=self.today,
        )
        self._transition(PipelineState.PR_CREATED)

        release_candidate.publish.label_release_pr(
            repository=self.repository,
            pull_request=pull_request,
            label=cfg.release_label,
        )
        self._transition(PipelineState.LABELED)

        logger.info(f'Pull Request Created: {pull_request.url}')
        self._transition(PipelineState.DONE)

        return pull_request


def run(
    ctx: release_candidate.context.RepositoryContext,
    cfg: release_candidate.config.ReleaseCandidateCfg,
    github_api: github3.GitHub,
    today: datetime.date | None=None,
) -> CreatedPullRequest:
    pipeline = ReleaseCandidatePipeline(
        ctx=ctx,
        cfg=cfg,
        repository=release_candidate.github.repository(github_api, ctx),
        pulls_lookup=release_candidate.correlate.associated_pulls_lookup(github_api, ctx),
        today=today,
    )
    return pipeline.run()
