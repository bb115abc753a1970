"""
Shared fixtures for pluginpub tests.

Git-backed tests run against real repositories in tmp_path with an isolated
HOME, so the developer's global git configuration never leaks in. They are
skipped when git is not installed.
"""

import shutil
import subprocess
from pathlib import Path

import pytest


class GitRepo:
    """Thin helper to build fixture histories without going through pluginpub."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ['git', *args],
            cwd=self.path,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    def write(self, relpath: str, content: str) -> Path:
        target = self.path / relpath
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
        return target

    def remove(self, relpath: str) -> None:
        (self.path / relpath).unlink()

    def commit(self, message: str, author: str = "Alice <alice@example.com>",
               date: str = "2024-01-15T10:30:00+08:00", allow_empty: bool = False) -> str:
        self.git('add', '-A')
        args = ['commit', '--author', author, '--date', date, '-m', message]
        if allow_empty:
            args.append('--allow-empty')
        self.git(*args)
        return self.git('rev-parse', 'HEAD')


@pytest.fixture
def git_env(tmp_path, monkeypatch):
    """Isolated HOME with a git identity for committer metadata."""
    if shutil.which('git') is None:
        pytest.skip("git is not installed")

    home = tmp_path / 'home'
    home.mkdir()
    monkeypatch.setenv('HOME', str(home))
    monkeypatch.setenv('GIT_CONFIG_NOSYSTEM', '1')
    for key in ('GIT_AUTHOR_NAME', 'GIT_AUTHOR_EMAIL', 'GIT_AUTHOR_DATE',
                'GIT_COMMITTER_NAME', 'GIT_COMMITTER_EMAIL', 'GIT_COMMITTER_DATE'):
        monkeypatch.delenv(key, raising=False)

    for key, value in [
        ('user.name', 'Replay Bot'),
        ('user.email', 'bot@example.com'),
        ('init.defaultBranch', 'main'),
        ('commit.gpgsign', 'false'),
    ]:
        subprocess.run(['git', 'config', '--global', key, value], check=True, capture_output=True)

    return home


@pytest.fixture
def make_repo(git_env, tmp_path):
    """Factory creating empty repositories on branch main."""
    def factory(name: str) -> GitRepo:
        path = tmp_path / name
        path.mkdir(parents=True)
        repo = GitRepo(path)
        repo.git('init')
        repo.git('checkout', '-B', 'main')
        return repo
    return factory


@pytest.fixture
def plugin_repo(make_repo):
    """Source plugin repository with a three-commit history."""
    repo = make_repo('my-plugin')
    repo.write('plugin.json', '{"name": "demo", "pluginName": "Demo", "version": "1.2.0"}\n')
    repo.write('index.js', 'console.log("v1")\n')
    repo.commit("Initial commit", date="2024-01-15T10:30:00+08:00")

    repo.write('index.js', 'console.log("v2")\n')
    repo.write('lib/util.js', 'module.exports = {}\n')
    repo.commit("Add util", author="Bob <bob@example.com>", date="2024-02-01T09:00:00-05:00")

    repo.remove('lib/util.js')
    repo.commit("Remove util\n\nNo longer needed.", date="2024-03-10T18:45:12+00:00")
    return repo


@pytest.fixture
def fork_remote(make_repo, tmp_path):
    """Bare repository standing in for the user's fork of the central repo."""
    central = make_repo('central')
    central.write('README.md', '# Plugins\n')
    central.write('plugins/other/main.js', 'other plugin\n')
    central.commit("Seed central repository", author="Central <central@example.com>")

    bare = tmp_path / 'fork.git'
    subprocess.run(
        ['git', 'clone', '--bare', str(central.path), str(bare)],
        check=True, capture_output=True
    )
    return bare
