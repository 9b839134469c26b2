# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import os

import github3
import github3.repos

import release_candidate.context


def github_api(
    ctx: release_candidate.context.RepositoryContext,
    token: str,
) -> github3.GitHub:
    '''
    returns an initialised github-api instance for the host of given repository-context, honouring
    `GITHUB_SERVER_URL` (as set for GitHub-Actions-runs) for GitHub-Enterprise-instances.
    '''
    if ctx.host == 'github.com':
        return github3.GitHub(token=token)

    server_url = os.environ.get('GITHUB_SERVER_URL', f'https://{ctx.host}')
    return github3.GitHubEnterprise(
        url=server_url,
        token=token,
    )


def repository(
    github_api: github3.GitHub,
    ctx: release_candidate.context.RepositoryContext,
) -> github3.repos.Repository:
    return github_api.repository(
        owner=ctx.owner,
        repository=ctx.name,
    )
