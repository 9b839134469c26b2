import os

import git
import pytest


def _commit_file(repo: git.Repo, name: str, content: str, message: str) -> git.Commit:
    path = os.path.join(repo.working_tree_dir, name)
    with open(path, 'w') as f:
        f.write(content)

    repo.index.add([name])
    return repo.index.commit(message)


@pytest.fixture
def origin_repo(tmp_path):
    '''
    a (non-bare) repository w/ a single commit on `master`, intended to be used as remote
    '''
    repo = git.Repo.init(tmp_path / 'origin')
    with repo.config_writer() as cfg_writer:
        cfg_writer.set_value('user', 'name', 'test-user')
        cfg_writer.set_value('user', 'email', 'test-user@example.com')
        # allow pushing to non-bare repository
        cfg_writer.set_value('receive', 'denyCurrentBranch', 'ignore')

    _commit_file(repo, 'VERSION', '1.0.0\n', 'initial commit')
    repo.git.branch('-M', 'master')

    return repo


@pytest.fixture
def merge_pull_request():
    '''
    returns a callable merging a new feature-branch (w/ one commit) into master, creating a
    merge-commit (as done by GitHub when merging a pull request)
    '''
    counter = {'value': 0}

    def merge(repo: git.Repo, number: int | None=None) -> git.Commit:
        counter['value'] += 1
        number = number or counter['value']
        branch = f'feature-{number}'

        repo.git.checkout('-b', branch, 'master')
        _commit_file(repo, f'feature-{number}.txt', f'{number}\n', f'feature {number}')
        repo.git.checkout('master')
        repo.git.merge('--no-ff', '-m', f'Merge pull request #{number} from {branch}', branch)

        return repo.head.commit

    return merge


@pytest.fixture
def commit_file():
    return _commit_file
