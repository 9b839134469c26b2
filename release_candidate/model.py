# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import dataclasses
import datetime

import git


class ReleaseCandidateError(RuntimeError):
    '''
    base class for all errors raised by release_candidate. Errors of this type (and errors raised
    by github3 / GitPython) are reported once by the cli, using the error's message.
    '''
    pass


class ContextError(ReleaseCandidateError, ValueError):
    pass


class ConfigError(ReleaseCandidateError, ValueError):
    pass


class ReleaseLookupError(ReleaseCandidateError):
    pass


class NoChangesError(ReleaseCandidateError):
    pass


class ReplaceCommandError(ReleaseCandidateError):
    def __init__(self, command: str, returncode: int, output: str | None=None):
        self.command = command
        self.returncode = returncode
        self.output = output

        super().__init__(f'replace-command failed ({returncode=}): {command}')


class LabelingError(ReleaseCandidateError):
    '''
    raised if the release-label could not be applied to an already created pull request. The
    pull request is left as is (i.e. unlabeled).
    '''
    def __init__(self, pull_request: 'CreatedPullRequest', label: str, cause: Exception):
        self.pull_request = pull_request
        self.label = label
        self.cause = cause

        super().__init__(
            f'created {pull_request.url}, but failed to add {label=}: {cause}'
        )


@dataclasses.dataclass(frozen=True)
class Release:
    tag_name: str
    published_at: datetime.datetime | None = None


@dataclasses.dataclass(frozen=True)
class Commit:
    hexsha: str
    parents: tuple[str, ...] = ()

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    @staticmethod
    def from_git_commit(commit: git.Commit) -> 'Commit':
        return Commit(
            hexsha=commit.hexsha,
            parents=tuple(parent.hexsha for parent in commit.parents),
        )


@dataclasses.dataclass(frozen=True)
class PullRequestSummary:
    '''
    the subset of a pull-request's attributes rendered into the changelog
    '''
    number: int
    url: str
    author: str
    title: str


@dataclasses.dataclass(frozen=True)
class CreatedPullRequest:
    number: int
    url: str


@dataclasses.dataclass(frozen=True)
class Found:
    release: Release


@dataclasses.dataclass(frozen=True)
class NotFound:
    pass


@dataclasses.dataclass(frozen=True)
class QueryFailed:
    cause: Exception


LastReleaseLookup = Found | NotFound | QueryFailed
