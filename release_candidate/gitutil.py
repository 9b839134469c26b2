# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import dataclasses
import enum
import logging
import urllib.parse

import git
import git.remote

logger = logging.getLogger(__name__)


class AuthType(enum.StrEnum):
    '''
    HTTP_TOKEN: API-Token as understood by GitHub (embedded into the remote's url)
    PRESET: assume existing .git/config (or given repo_url) contains needed cfg
    '''
    HTTP_TOKEN = 'http-token'
    PRESET = 'preset'


@dataclasses.dataclass(kw_only=True)
class GitCfg:
    '''
    Configuration for interacting w/ a git-repository.

    repo_url: remote to clone from. Note: auth_type needs to match url-schema
    user_name: if set, use as user.name (committer and author)
    user_email: if set, use as user.email (committer and author)
    auth: two-tuple of (user, secret); if set, use for interactions w/ remote
    auth_type: type of auth
    '''
    repo_url: str | None = None
    user_name: str | None = None
    user_email: str | None = None
    auth: tuple[str, str] | None = dataclasses.field(default=None, repr=False)
    auth_type: AuthType = AuthType.PRESET


class GitHelper:
    def __init__(
        self,
        repo,
        git_cfg: GitCfg,
    ):
        if repo is None:
            raise ValueError(repo)
        if isinstance(repo, str):
            repo = git.Repo(repo)
        if not isinstance(repo, git.Repo):
            raise ValueError(repo)

        self.repo = repo
        self.git_cfg = git_cfg

    @property
    def working_tree_dir(self) -> str:
        return self.repo.working_tree_dir

    @staticmethod
    def clone_into(
        target_directory: str,
        git_cfg: GitCfg,
        checkout_branch: str | None=None,
    ) -> 'GitHelper':
        if not git_cfg.repo_url:
            raise ValueError('repo-url must not be None')

        url = _url_with_credentials(git_cfg)

        args = ['--quiet']
        if checkout_branch is not None:
            args += ['--branch', checkout_branch]
        args += [url, target_directory]

        git.Git().clone(*args)
        logger.info(f'cloned {git_cfg.repo_url} into {target_directory}')

        return GitHelper(
            repo=git.Repo(target_directory),
            git_cfg=git_cfg,
        )

    def _actor(self) -> git.Actor | None:
        if (user := self.git_cfg.user_name) and (email := self.git_cfg.user_email):
            return git.Actor(user, email)

        return None

    def configure_identity(self):
        '''
        persists user.name and user.email from git_cfg into the repository's .git/config
        '''
        with self.repo.config_writer() as cfg_writer:
            if (user := self.git_cfg.user_name):
                cfg_writer.set_value('user', 'name', user)
            if (email := self.git_cfg.user_email):
                cfg_writer.set_value('user', 'email', email)

    def has_ref(self, ref: str) -> bool:
        try:
            self.repo.rev_parse(ref)
            return True
        except (git.BadName, git.BadObject, ValueError):
            return False

    def checkout_new_branch(self, branch: str, start_point: str | None=None) -> git.Head:
        args = ['-b', branch]
        if start_point:
            args.append(start_point)

        self.repo.git.checkout(*args)
        return self.repo.heads[branch]

    def iter_merge_commits(
        self,
        rev: str,
        max_count: int | None=None,
    ):
        kwargs = {'merges': True}
        if max_count is not None:
            kwargs['max_count'] = max_count

        yield from self.repo.iter_commits(rev, **kwargs)

    def add_and_commit(self, message: str) -> git.Commit:
        '''
        adds changed, new and removed files (`git add --all`) and creates a commit, updating the
        current branch (`git commit`). If a git_cfg is present, author and committer are set.
        '''
        self.repo.git.add('--all')

        if not self.repo.is_dirty(index=True, working_tree=False, untracked_files=False):
            logger.warning('no changes staged - will create an empty commit')

        actor = self._actor()
        return self.repo.index.commit(
            message=message,
            author=actor,
            committer=actor,
        )

    def push(self, from_ref: str, to_ref: str, remote_name: str='origin'):
        remote: git.Remote = self.repo.remote(remote_name)
        results = remote.push(':'.join((from_ref, to_ref)))
        if not results:
            return # according to remote.push's documentation, empty results indicate
            # an error. however, the documentation seems to be wrong
        if len(results) > 1:
            raise NotImplementedError('more than one result (do not know how to handle')

        push_info: git.remote.PushInfo = results[0]
        if push_info.flags & push_info.ERROR:
            raise RuntimeError(f'git-push failed: {push_info.summary}')


def _url_with_credentials(
    git_cfg: GitCfg,
) -> str:
    if git_cfg.auth_type is AuthType.PRESET:
        return git_cfg.repo_url
    elif git_cfg.auth_type is AuthType.HTTP_TOKEN:
        pass # ok to proceed
    else:
        raise ValueError(f'not implemented: {git_cfg.auth_type=}')

    if not git_cfg.auth:
        raise ValueError(f'{git_cfg.auth_type=} requires auth')

    base_url = urllib.parse.urlparse(git_cfg.repo_url)
    scheme = base_url.scheme or 'https'
    netloc = base_url.netloc

    if not netloc:
        # no scheme given (e.g. github.com/org/repo) -> host is parsed as part of path
        netloc, _, path = base_url.path.partition('/')
        path = f'/{path}'
    else:
        path = base_url.path

    user, secret = git_cfg.auth
    credentials_str = f'{user}:{secret}'

    return f'{scheme}://{credentials_str}@{netloc}{path}'
