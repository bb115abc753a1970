"""
Tests for RemotePublisher.

Tests cover:
- Fork discovery, creation and bounded readiness polling
- Force push of the replay branch
- Pull request reconciliation (reuse vs. create)
"""

from unittest.mock import MagicMock

import pytest

from pluginpub.domain.github import GitHubFork, PullRequestRef
from pluginpub.exit_codes import CommandError, ForkTimeoutError
from pluginpub.services.publish_service import RemotePublisher

FORK = GitHubFork(
    name='ZTools-plugins',
    full_name='alice/ZTools-plugins',
    owner='alice',
    clone_url='https://github.com/alice/ZTools-plugins.git',
)
PR_URL = 'https://github.com/ZToolsCenter/ZTools-plugins/pull/42'


@pytest.fixture
def github():
    github = MagicMock()
    github.central_full_name = 'ZToolsCenter/ZTools-plugins'
    return github


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def publisher(github, sleeps, tmp_path):
    return RemotePublisher(
        github,
        tmp_path / 'clone',
        username='alice',
        git=MagicMock(),
        sleep=sleeps.append,
    )


class TestForkReadiness:
    """Tests for ensure_fork() and wait_for_fork()."""

    def test_existing_fork_is_used(self, publisher, github, sleeps):
        github.get_fork.return_value = FORK

        assert publisher.ensure_fork() is FORK
        github.create_fork.assert_not_called()
        assert sleeps == []

    def test_missing_fork_is_created_and_awaited(self, publisher, github, sleeps):
        github.get_fork.side_effect = [None, None, FORK]

        assert publisher.ensure_fork() is FORK
        github.create_fork.assert_called_once()
        assert sleeps == [2, 2]

    def test_fork_found_on_fifth_probe(self, publisher, github, sleeps):
        github.get_fork.side_effect = [None, None, None, None, FORK]

        assert publisher.wait_for_fork() is FORK
        assert github.get_fork.call_count == 5
        assert sleeps == [2] * 5

    def test_timeout_after_max_attempts(self, publisher, github, sleeps):
        github.get_fork.return_value = None

        with pytest.raises(ForkTimeoutError) as exc_info:
            publisher.wait_for_fork()

        assert exc_info.value.attempts == 10
        assert github.get_fork.call_count == 10
        assert len(sleeps) == 10

    def test_timeout_is_a_timeout_error(self, publisher, github):
        github.get_fork.return_value = None

        with pytest.raises(TimeoutError):
            publisher.wait_for_fork(max_attempts=2)

        assert issubclass(ForkTimeoutError, CommandError)


class TestPublish:
    """Tests for push and pull request reconciliation."""

    def test_push_is_forced(self, publisher):
        branch = publisher.push('demo')

        assert branch == 'plugin/demo'
        publisher.git.push.assert_called_once_with(
            publisher.work_dir, remote='origin', branch='plugin/demo', force=True
        )

    def test_head_ref(self, publisher):
        assert publisher.head_ref('demo') == 'alice:plugin/demo'

    def test_creates_pull_request_when_none_open(self, publisher, github):
        github.get_fork.return_value = FORK
        github.find_open_pull_request.return_value = None
        github.create_pull_request.return_value = PullRequestRef(42, PR_URL, created=True)

        pr = publisher.publish('demo', 'Add demo', 'Body')

        assert pr.html_url == PR_URL
        github.find_open_pull_request.assert_called_once_with('alice:plugin/demo')
        github.create_pull_request.assert_called_once_with(
            'alice:plugin/demo', 'Add demo', 'Body', base='main'
        )

    def test_republish_reuses_open_pull_request(self, publisher, github):
        github.get_fork.return_value = FORK
        opened = PullRequestRef(42, PR_URL, created=True)
        github.find_open_pull_request.side_effect = [None, PullRequestRef(42, PR_URL)]
        github.create_pull_request.return_value = opened

        first = publisher.publish('demo', 'Add demo')
        second = publisher.publish('demo', 'Add demo')

        assert first.html_url == second.html_url == PR_URL
        assert second.created is False
        github.create_pull_request.assert_called_once()
        assert publisher.git.push.call_count == 2

    def test_push_happens_before_pull_request(self, publisher, github):
        calls = []
        publisher.git.push.side_effect = lambda *a, **k: calls.append('push')
        github.get_fork.side_effect = lambda user: calls.append('fork') or FORK
        github.find_open_pull_request.side_effect = lambda head: calls.append('find') or None
        github.create_pull_request.side_effect = lambda *a, **k: calls.append('create') or PullRequestRef(1, PR_URL)

        publisher.publish('demo', 'Add demo')

        assert calls == ['push', 'fork', 'find', 'create']
