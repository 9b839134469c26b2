import datetime
import textwrap

import pytest

import release_candidate.config as examinee
from release_candidate.model import ConfigError


def env(**inputs):
    environ = {
        f'INPUT_{name}': value
        for name, value in inputs.items()
    }
    environ['GITHUB_WORKSPACE'] = '/github/workspace'
    return environ


@pytest.fixture
def action_env():
    return env(
        GITHUB_TOKEN='s3cr3t',
        VERSION_NAME='v2.0.0',
        REPLACE='{"commands": ["echo <<DATE>> > RELEASE_DATE", "echo 2.0.0 > VERSION"]}',
        FILE_UPDATE_COMMIT_DESC='Update version files',
        RELEASE_PR_IDENTIFIER_LABEL='release',
        RELEASE_PR_TITLE='Release <<VERSION>>',
    )


def test_load_cfg_from_action_inputs(action_env):
    cfg = examinee.load_cfg(environ=action_env)

    assert cfg.token == 's3cr3t'
    assert cfg.version == 'v2.0.0'
    assert cfg.commit_message == 'Update version files'
    assert cfg.release_label == 'release'
    assert cfg.workspace == '/github/workspace'
    assert cfg.base_branch == 'master'
    assert cfg.committer_name == examinee.default_committer_name
    assert cfg.replace_commands == (
        examinee.ReplaceCommand(template='echo <<DATE>> > RELEASE_DATE'),
        examinee.ReplaceCommand(template='echo 2.0.0 > VERSION'),
    )


def test_token_is_not_part_of_repr(action_env):
    cfg = examinee.load_cfg(environ=action_env)

    assert 's3cr3t' not in repr(cfg)


def test_token_falls_back_to_github_token(action_env):
    del action_env['INPUT_GITHUB_TOKEN']
    action_env['GITHUB_TOKEN'] = 'from-env'

    assert examinee.load_cfg(environ=action_env).token == 'from-env'


def test_missing_required_values():
    with pytest.raises(ConfigError) as excinfo:
        examinee.load_cfg(environ=env(VERSION_NAME='1.0.0'))

    missing = str(excinfo.value).split(':', 1)[1].strip().split(', ')
    assert missing == ['token', 'commit_message', 'release_label', 'pr_title']


def test_precedence(tmp_path, action_env):
    cfg_file = tmp_path / 'cfg.yaml'
    cfg_file.write_text(textwrap.dedent('''\
        base-branch: main
        release-label: from-file
        replace:
          commands:
            - ./stamp.sh
    '''))
    del action_env['INPUT_REPLACE']

    cfg = examinee.load_cfg(
        cfg_path=str(cfg_file),
        overrides={'version': 'v3.0.0'},
        environ=action_env,
    )

    assert cfg.base_branch == 'main' # only present in file
    assert cfg.release_label == 'release' # inputs take precedence over file
    assert cfg.version == 'v3.0.0' # overrides take precedence over inputs
    assert cfg.replace_commands == (examinee.ReplaceCommand(template='./stamp.sh'),)


def test_unknown_attributes_in_cfg_file(tmp_path, action_env):
    cfg_file = tmp_path / 'cfg.yaml'
    cfg_file.write_text('no-such-attr: 42\n')

    with pytest.raises(ConfigError):
        examinee.load_cfg(cfg_path=str(cfg_file), environ=action_env)


def test_invalid_cfg_file(tmp_path, action_env):
    with pytest.raises(ConfigError):
        examinee.load_cfg(cfg_path=str(tmp_path / 'absent.yaml'), environ=action_env)

    cfg_file = tmp_path / 'cfg.yaml'
    cfg_file.write_text('- a list\n- is not a mapping\n')
    with pytest.raises(ConfigError):
        examinee.load_cfg(cfg_path=str(cfg_file), environ=action_env)


@pytest.mark.parametrize('raw,expected', [
    (None, ()),
    ('', ()),
    ('{"commands": []}', ()),
    ('{"commands": ["a", "b"]}', ('a', 'b')),
    ({'commands': ['a']}, ('a',)),
    (['a', 'b'], ('a', 'b')),
])
def test_parse_replace_commands(raw, expected):
    commands = examinee.parse_replace_commands(raw)

    assert tuple(c.template for c in commands) == expected


@pytest.mark.parametrize('raw', [
    '{"commands": ',
    '{"cmds": ["a"]}',
    '{"commands": [""]}',
    '{"commands": [42]}',
    '42',
    'a plain string',
])
def test_parse_invalid_replace_commands(raw):
    with pytest.raises(ConfigError):
        examinee.parse_replace_commands(raw)


def test_replace_command_render():
    command = examinee.ReplaceCommand(template='sed -i "s/date: .*/date: <<DATE>>/" a <<DATE>>')

    assert command.render(datetime.date(2026, 1, 2)) == \
        'sed -i "s/date: .*/date: 2026-01-02/" a 2026-01-02'


def test_render_pr_title(action_env):
    cfg = examinee.load_cfg(environ=action_env)

    assert cfg.render_pr_title(datetime.date(2026, 1, 2)) == 'Release v2.0.0'
