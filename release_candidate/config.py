# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
configuration for release-candidate-runs

Configuration is read once upon startup, from (in ascending precedence):

- an (optional) YAML-file
- GitHub-Action-inputs (exposed by the runner as `INPUT_<NAME>` environment variables)
- command-line arguments

and combined into a single (immutable) `ReleaseCandidateCfg`.
'''

import collections.abc
import dataclasses
import datetime
import logging
import os

import dacite
import yaml

from release_candidate.model import ConfigError

logger = logging.getLogger(__name__)

DATE_PLACEHOLDER = '<<DATE>>'
VERSION_PLACEHOLDER = '<<VERSION>>'

default_base_branch = 'master'
default_committer_name = 'github-actions[bot]'
default_committer_email = '41898282+github-actions[bot]@users.noreply.github.com'

# cfg-attribute -> name of GitHub-Action-input
action_inputs = {
    'token': 'GITHUB_TOKEN',
    'version': 'VERSION_NAME',
    'replace_commands': 'REPLACE',
    'commit_message': 'FILE_UPDATE_COMMIT_DESC',
    'release_label': 'RELEASE_PR_IDENTIFIER_LABEL',
    'pr_title': 'RELEASE_PR_TITLE',
    'base_branch': 'BASE_BRANCH',
    'committer_name': 'COMMITTER_NAME',
    'committer_email': 'COMMITTER_EMAIL',
}

required_attrs = (
    'token',
    'version',
    'commit_message',
    'release_label',
    'pr_title',
    'workspace',
)


def format_date(date: datetime.date) -> str:
    return date.strftime('%Y-%m-%d')


@dataclasses.dataclass(frozen=True)
class ReplaceCommand:
    '''
    a shell-command used to stamp version-specific files. Occurrences of `<<DATE>>` are replaced
    with the current date (YYYY-MM-DD) before execution.
    '''
    template: str

    def render(self, date: datetime.date) -> str:
        return self.template.replace(DATE_PLACEHOLDER, format_date(date))


@dataclasses.dataclass
class ReplaceCfg:
    '''
    Model-Class for deserialising the `REPLACE` input (`{"commands": [...]}`)
    '''
    commands: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True, kw_only=True)
class ReleaseCandidateCfg:
    token: str = dataclasses.field(repr=False)
    version: str
    commit_message: str
    release_label: str
    pr_title: str
    workspace: str
    replace_commands: tuple[ReplaceCommand, ...] = ()
    base_branch: str = default_base_branch
    committer_name: str = default_committer_name
    committer_email: str = default_committer_email

    def render_pr_title(self, date: datetime.date) -> str:
        return self.pr_title.replace(
            VERSION_PLACEHOLDER, self.version,
        ).replace(
            DATE_PLACEHOLDER, format_date(date),
        )


def parse_replace_commands(
    raw: str | collections.abc.Mapping | collections.abc.Sequence | None,
) -> tuple[ReplaceCommand, ...]:
    '''
    accepts the value of the `REPLACE` input (a JSON/YAML-document of the form
    `{"commands": [...]}`), the already parsed document, or a bare list of commands.
    '''
    if raw is None:
        return ()

    if isinstance(raw, str):
        if not raw.strip():
            return ()
        try:
            raw = yaml.safe_load(raw)
        except yaml.YAMLError as ye:
            raise ConfigError(f'replace-commands are not valid JSON/YAML: {ye}') from ye
        if raw is None:
            return ()

    if isinstance(raw, collections.abc.Mapping):
        try:
            replace_cfg = dacite.from_dict(
                data_class=ReplaceCfg,
                data=raw,
                config=dacite.Config(cast=[tuple], strict=True),
            )
        except dacite.DaciteError as de:
            raise ConfigError(f'invalid replace-commands: {de}') from de
        commands = replace_cfg.commands
    elif isinstance(raw, collections.abc.Sequence) and not isinstance(raw, str):
        commands = tuple(raw)
    else:
        raise ConfigError(f'invalid replace-commands: {raw=}')

    for command in commands:
        if not isinstance(command, str) or not command.strip():
            raise ConfigError(f'replace-commands must be non-empty strings: {command=}')

    return tuple(ReplaceCommand(template=command) for command in commands)


def action_input(
    name: str,
    environ: collections.abc.Mapping=os.environ,
) -> str | None:
    # inputs are exposed as INPUT_<NAME> (upper-case, spaces replaced by underscores)
    value = environ.get(f'INPUT_{name.replace(" ", "_").upper()}', '').strip()
    return value or None


def raw_cfg_from_env(
    environ: collections.abc.Mapping=os.environ,
) -> dict:
    raw = {
        attr: value
        for attr, input_name in action_inputs.items()
        if (value := action_input(input_name, environ=environ)) is not None
    }

    if 'token' not in raw and (token := environ.get('GITHUB_TOKEN')):
        raw['token'] = token

    if (workspace := environ.get('GITHUB_WORKSPACE')):
        raw['workspace'] = workspace

    return raw


def raw_cfg_from_file(path: str) -> dict:
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f'failed to read cfg from {path=}: {e}') from e

    if not raw:
        return {}

    if not isinstance(raw, dict):
        raise ConfigError(f'cfg-file {path=} must contain a mapping')

    # kebab -> snake
    raw = {k.replace('-', '_'): v for k, v in raw.items()}
    if 'replace' in raw:
        raw['replace_commands'] = raw.pop('replace')

    return raw


def merge_raw_cfgs(*raw_cfgs: dict) -> dict:
    '''
    merges given cfg-dicts (later ones take precedence). Values that are None do not overwrite
    existing values.
    '''
    merged = {}
    for raw in raw_cfgs:
        if not raw:
            continue
        merged.update({k: v for k, v in raw.items() if v is not None})

    return merged


def from_raw(*raw_cfgs: dict) -> 'ReleaseCandidateCfg':
    raw = merge_raw_cfgs(*raw_cfgs)

    if (missing := [attr for attr in required_attrs if not raw.get(attr)]):
        raise ConfigError(f'missing required configuration: {", ".join(missing)}')

    raw['replace_commands'] = parse_replace_commands(raw.get('replace_commands'))

    known_attrs = {field.name for field in dataclasses.fields(ReleaseCandidateCfg)}
    if (unknown := set(raw) - known_attrs):
        raise ConfigError(f'unknown configuration attributes: {", ".join(sorted(unknown))}')

    try:
        cfg = dacite.from_dict(
            data_class=ReleaseCandidateCfg,
            data=raw,
            config=dacite.Config(cast=[tuple], strict=True),
        )
    except dacite.DaciteError as de:
        raise ConfigError(f'invalid configuration: {de}') from de

    logger.debug(f'{cfg=}')
    return cfg


def load_cfg(
    cfg_path: str | None=None,
    overrides: dict | None=None,
    environ: collections.abc.Mapping=os.environ,
) -> ReleaseCandidateCfg:
    return from_raw(
        raw_cfg_from_file(cfg_path) if cfg_path else {},
        raw_cfg_from_env(environ=environ),
        overrides or {},
    )
