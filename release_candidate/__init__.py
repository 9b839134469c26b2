'''
Release Candidate

Creates a release-candidate pull request: determines pull requests merged into the base-branch
since the latest release, stamps version-specific files (using configurable shell-commands),
commits them onto a `<version>-rc` branch, and opens a (labeled) pull request listing the changes.

Intended to be run as a step in GitHub-Actions, once per release-cycle.
'''
