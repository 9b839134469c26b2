# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import argparse
import logging
import os
import sys
import traceback

import release_candidate.config
import release_candidate.context
import release_candidate.github
import release_candidate.log
import release_candidate.pipeline
from release_candidate.model import CreatedPullRequest

logger = logging.getLogger('release-candidate')

# argparse-dest -> cfg-attribute
cfg_overrides = {
    'github_auth_token': 'token',
    'version': 'version',
    'replace': 'replace_commands',
    'commit_message': 'commit_message',
    'release_label': 'release_label',
    'pr_title': 'pr_title',
    'base_branch': 'base_branch',
    'workspace': 'workspace',
}


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='creates a release-candidate pull request listing pull requests merged since '
        'the last release',
    )
    parser.add_argument(
        '--cfg',
        default=None,
        help='optional YAML-file to read configuration from (overwritten by inputs / arguments)',
    )
    parser.add_argument(
        '--event-path',
        default=os.environ.get('GITHUB_EVENT_PATH'),
        help='path to the triggering event\'s payload (defaults to GitHub-Action\'s default)',
    )
    parser.add_argument(
        '--github-auth-token',
        default=None,
        help='the github-auth-token to use (defaults to GitHub-Action\'s default',
    )
    parser.add_argument('--version', default=None, help='the version to create a candidate for')
    parser.add_argument(
        '--replace',
        default=None,
        help='replace-commands as JSON (`{"commands": [...]}`); `<<DATE>>` is substituted',
    )
    parser.add_argument('--commit-message', default=None)
    parser.add_argument('--release-label', default=None)
    parser.add_argument('--pr-title', default=None)
    parser.add_argument('--base-branch', default=None)
    parser.add_argument(
        '--workspace',
        default=None,
        help='directory to clone into (defaults to GITHUB_WORKSPACE)',
    )
    parser.add_argument('--verbose', '-v', action='store_true', default=False)

    return parser.parse_args(argv)


def overrides_from_args(parsed: argparse.Namespace) -> dict:
    return {
        cfg_attr: value
        for dest, cfg_attr in cfg_overrides.items()
        if (value := getattr(parsed, dest)) is not None
    }


def write_step_outputs(
    pull_request: CreatedPullRequest,
    path: str | None=None,
):
    if not (path := path or os.environ.get('GITHUB_OUTPUT')):
        return

    with open(path, 'a') as f:
        f.write(f'pr-number={pull_request.number}\n')
        f.write(f'pr-url={pull_request.url}\n')


def report_failure(error: Exception):
    message = str(error) or type(error).__name__
    logger.error(message)

    if logger.isEnabledFor(logging.DEBUG):
        traceback.print_exc(file=sys.stderr)

    if os.environ.get('GITHUB_ACTIONS') == 'true':
        # mark step as failed (shown as annotation in GitHub-Actions-UI)
        message = message.replace('%', '%25').replace('\r', '%0D').replace('\n', '%0A')
        print(f'::error::{message}', flush=True)


def main(argv=None) -> int:
    parsed = parse_args(argv)

    release_candidate.log.configure_default_logging(
        stdout_level=logging.DEBUG if parsed.verbose else logging.INFO,
    )

    try:
        cfg = release_candidate.config.load_cfg(
            cfg_path=parsed.cfg,
            overrides=overrides_from_args(parsed),
        )
        ctx = release_candidate.context.from_event_path(path=parsed.event_path)
        github_api = release_candidate.github.github_api(
            ctx=ctx,
            token=cfg.token,
        )

        pull_request = release_candidate.pipeline.run(
            ctx=ctx,
            cfg=cfg,
            github_api=github_api,
        )
    except Exception as e:
        report_failure(e)
        return 1

    write_step_outputs(pull_request)
    return 0
