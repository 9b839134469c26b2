# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
mutations of the local clone of the target repository: cloning, stamping version-specific files
(using configured replace-commands), committing and pushing the release-candidate-branch.

This is the only module allowed to run (user-supplied) shell-commands.
'''

import collections.abc
import datetime
import logging
import os
import subprocess

import release_candidate.config
import release_candidate.context
import release_candidate.gitutil as gitutil
from release_candidate.model import ReplaceCommandError

logger = logging.getLogger(__name__)


def rc_branch_name(version: str) -> str:
    return f'{version}-rc'


def repo_dir(
    ctx: release_candidate.context.RepositoryContext,
    cfg: release_candidate.config.ReleaseCandidateCfg,
) -> str:
    return os.path.join(cfg.workspace, ctx.name)


def git_cfg(
    ctx: release_candidate.context.RepositoryContext,
    cfg: release_candidate.config.ReleaseCandidateCfg,
) -> gitutil.GitCfg:
    return gitutil.GitCfg(
        repo_url=ctx.repo_url,
        user_name=cfg.committer_name,
        user_email=cfg.committer_email,
        auth=(ctx.owner, cfg.token),
        auth_type=gitutil.AuthType.HTTP_TOKEN,
    )


def clone_repo(
    ctx: release_candidate.context.RepositoryContext,
    cfg: release_candidate.config.ReleaseCandidateCfg,
) -> gitutil.GitHelper:
    return gitutil.GitHelper.clone_into(
        target_directory=repo_dir(ctx, cfg),
        git_cfg=git_cfg(ctx, cfg),
        checkout_branch=cfg.base_branch,
    )


def apply_replace_commands(
    commands: collections.abc.Iterable[release_candidate.config.ReplaceCommand],
    repo_dir: str,
    date: datetime.date,
):
    '''
    runs given replace-commands (in given order) using the shell, w/ repo_dir as working
    directory. Stops at the first command returning a non-zero exit-code.
    '''
    for command in commands:
        cmd = command.render(date)
        logger.info(f'running {cmd=}')

        try:
            res = subprocess.run(
                cmd,
                shell=True,
                cwd=repo_dir,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as cpe:
            logger.error(f'{cmd=} failed: {cpe.stderr}')
            raise ReplaceCommandError(
                command=cmd,
                returncode=cpe.returncode,
                output=cpe.stderr,
            ) from cpe

        if res.stdout:
            logger.debug(res.stdout)


def create_release_candidate_branch(
    git_helper: gitutil.GitHelper,
    cfg: release_candidate.config.ReleaseCandidateCfg,
    date: datetime.date,
) -> str:
    '''
    stamps version-specific files, and commits them onto a new release-candidate-branch, which is
    then pushed. Returns the branch's name.

    Nothing is committed if any of the replace-commands fail. Note that there is no cleanup if
    any step after that fails.
    '''
    branch = rc_branch_name(cfg.version)

    apply_replace_commands(
        commands=cfg.replace_commands,
        repo_dir=git_helper.working_tree_dir,
        date=date,
    )

    git_helper.configure_identity()
    git_helper.checkout_new_branch(branch)

    commit = git_helper.add_and_commit(message=cfg.commit_message)
    logger.info(f'created {commit.hexsha=} on {branch=}')

    git_helper.push(
        from_ref=f'refs/heads/{branch}',
        to_ref=f'refs/heads/{branch}',
    )
    logger.info(f'pushed {branch=}')

    return branch
