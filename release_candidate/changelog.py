# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import collections.abc
import datetime

import release_candidate.github.limits as limits
from release_candidate.model import PullRequestSummary

truncation_marker = '\n\n(changelog was truncated: too many pull requests)'


def format_heading_date(date: datetime.date) -> str:
    return date.strftime('%d %B, %Y')


def changelog_line(pull_request: PullRequestSummary) -> str:
    title = ' '.join(pull_request.title.split())
    return f'* {title} #{pull_request.number} - @{pull_request.author}'


def release_pr_body(
    pull_requests: collections.abc.Iterable[PullRequestSummary],
    date: datetime.date,
) -> str:
    '''
    renders the release-pull-request's body. Pull requests are listed in the order they are passed.
    '''
    body = f'## Release Update - {format_heading_date(date)}\n\n### Changelog\n'

    for pull_request in pull_requests:
        body += f'\n{changelog_line(pull_request)}'

    return body


def body_or_truncated(
    body: str,
    limit: int=limits.pullrequest_body,
) -> tuple[str, bool]:
    '''
    returns given body if it fits into limit (as second value of returned tuple, True is
    returned). Otherwise, body is truncated at a line-boundary, and a hint is appended.
    '''
    if limits.fits(body, limit=limit):
        return body, True

    max_leng = max(limit - len(truncation_marker), 0)
    truncated = body[:max_leng]
    if '\n' in truncated:
        truncated = truncated.rsplit('\n', 1)[0]

    return f'{truncated}{truncation_marker}', False
