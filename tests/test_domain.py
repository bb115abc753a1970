"""
Tests for domain objects.

Tests cover:
- CommitDescriptor helpers
- AccessToken persistence shape and repr
- PluginManifest loading and name validation
- ReplaySummary counting
- GitHub response decoding
"""

import json

import pytest

from pluginpub.domain import (
    AccessToken,
    CommitDescriptor,
    GitHubFork,
    PluginManifest,
    PullRequestRef,
    ReplayStatus,
    ReplayStep,
    ReplaySummary,
    branch_name,
    plugin_subdir,
    sparse_pattern,
)
from pluginpub.domain.plugin import validate_plugin_name
from pluginpub.exit_codes import CONFIG_ERROR, ManifestError


class TestCommitDescriptor:
    """Tests for CommitDescriptor."""

    def test_subject_and_short_hash(self):
        commit = CommitDescriptor('0123456789abcdef', 'A <a@x>', '2024-01-01T00:00:00Z', 'Fix bug\n\nDetails')

        assert commit.subject == 'Fix bug'
        assert commit.short_hash == '0123456'
        assert commit.to_dict()['message'] == 'Fix bug\n\nDetails'


class TestAccessToken:
    """Tests for AccessToken."""

    def test_round_trip_shape(self):
        token = AccessToken(access_token='gho_x', scope='repo', created_at=1700000000000)

        assert token.to_dict() == {
            'access_token': 'gho_x',
            'token_type': 'bearer',
            'scope': 'repo',
            'created_at': 1700000000000,
        }
        assert AccessToken.from_dict(token.to_dict()) == token

    @pytest.mark.parametrize("data", [None, {}, {'access_token': ''}, 'gho_x'])
    def test_unusable_data(self, data):
        assert AccessToken.from_dict(data) is None

    def test_repr_hides_secret(self):
        assert 'gho_secret' not in repr(AccessToken(access_token='gho_secret'))


class TestPluginNaming:
    """Tests for branch and subtree naming."""

    def test_names(self):
        assert branch_name('clipboard') == 'plugin/clipboard'
        assert plugin_subdir('clipboard') == 'plugins/clipboard'
        assert sparse_pattern('clipboard') == 'plugins/clipboard/**'

    @pytest.mark.parametrize("name", ['demo', 'my-plugin', 'v2.0_beta', 'A1'])
    def test_valid_names(self, name):
        assert validate_plugin_name(name) == name

    @pytest.mark.parametrize("name", ['', '-demo', '.hidden', 'a/b', 'a..b', 'has space', 'x$y'])
    def test_invalid_names(self, name):
        with pytest.raises(ManifestError) as exc_info:
            validate_plugin_name(name)

        assert exc_info.value.exit_code == CONFIG_ERROR


class TestPluginManifest:
    """Tests for PluginManifest."""

    def test_load(self, tmp_path):
        (tmp_path / 'plugin.json').write_text(json.dumps({
            'name': 'demo',
            'pluginName': 'Demo Plugin',
            'description': 'Does things',
            'version': '2.1.0',
        }))

        manifest = PluginManifest.load(tmp_path)

        assert manifest.name == 'demo'
        assert manifest.plugin_name == 'Demo Plugin'
        assert manifest.to_dict()['pluginName'] == 'Demo Plugin'

    def test_display_name_defaults_to_name(self):
        assert PluginManifest.from_dict({'name': 'demo'}).plugin_name == 'demo'

    def test_missing_file(self, tmp_path):
        with pytest.raises(ManifestError, match='No plugin.json'):
            PluginManifest.load(tmp_path)

    def test_invalid_json(self, tmp_path):
        (tmp_path / 'plugin.json').write_text('{broken')

        with pytest.raises(ManifestError, match='Cannot parse'):
            PluginManifest.load(tmp_path)

    def test_not_an_object(self):
        with pytest.raises(ManifestError):
            PluginManifest.from_dict(['demo'])

    def test_missing_name(self):
        with pytest.raises(ManifestError):
            PluginManifest.from_dict({'pluginName': 'Demo'})


class TestReplaySummary:
    """Tests for ReplaySummary."""

    def test_counts(self):
        commit = CommitDescriptor('a' * 40, 'A <a@x>', '2024-01-01T00:00:00Z', 'First')
        summary = ReplaySummary(plugin_name='demo')

        summary.add_step(ReplayStep(commit, ReplayStatus.COMMITTED))
        summary.add_step(ReplayStep(commit, ReplayStatus.SKIPPED, 'no changes'))

        assert summary.to_dict() == {'plugin': 'demo', 'total': 2, 'committed': 1, 'skipped': 1}
        assert summary.steps[1].to_dict()['reason'] == 'no changes'
        assert 'reason' not in summary.steps[0].to_dict()


class TestGitHubObjects:
    """Tests for GitHub response decoding."""

    def test_fork_from_api_response(self):
        fork = GitHubFork.from_api_response({
            'name': 'ZTools-plugins',
            'full_name': 'alice/ZTools-plugins',
            'owner': {'login': 'alice'},
            'clone_url': 'https://github.com/alice/ZTools-plugins.git',
        })

        assert fork.owner == 'alice'
        assert fork.clone_url == 'https://github.com/alice/ZTools-plugins.git'

    def test_pull_request_to_dict(self):
        pr = PullRequestRef.from_api_response({'number': 3, 'html_url': 'https://x/pull/3'}, created=True)

        assert pr.to_dict() == {'number': 3, 'url': 'https://x/pull/3', 'created': True}
