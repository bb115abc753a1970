"""
Snapshot export for pluginpub.

Materializes the tracked tree of one commit into a directory using an
archive-and-extract strategy:

1. `git archive` the commit into a transient tar file
2. extract it into a transient staging directory
3. move the staged entries into the target

The archive and the staging directory are removed on every exit path. When
extraction or the final move fails, the target is emptied so it never holds
a partial snapshot.
"""

import logging
import os
import shutil
import tarfile
import tempfile
from pathlib import Path
from typing import Optional

from ..exit_codes import SnapshotError, VCSCommandError
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)


def _extract_all(archive: tarfile.TarFile, dest: Path) -> None:
    # Extraction filters exist from Python 3.12 (and late 3.11 patch releases)
    if hasattr(tarfile, 'tar_filter'):
        archive.extractall(dest, filter='tar')
    else:
        archive.extractall(dest)


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


class SnapshotExporter:
    """
    Writes the file tree of a commit into an arbitrary directory.

    The target does not need to be related to the source repository.

    Example:
        exporter = SnapshotExporter()
        exporter.export_snapshot("a1b2c3d", "/tmp/out", "/path/to/source")
    """

    def __init__(self, git: Optional[GitClient] = None):
        self.git = git or GitClient()

    def export_snapshot(self, commit_hash: str, target_dir, source_repo) -> None:
        """
        Export commit_hash of source_repo into target_dir.

        Args:
            commit_hash: Commit to export
            target_dir: Created if missing; entries from the commit overwrite
                same-named entries already present
            source_repo: Repository that contains commit_hash

        Raises:
            SnapshotError: git archive or extraction failed
        """
        target = Path(target_dir)
        target.mkdir(parents=True, exist_ok=True)
        scratch = target.parent

        fd, archive_name = tempfile.mkstemp(prefix='.git-archive-', suffix='.tar', dir=scratch)
        os.close(fd)
        archive_path = Path(archive_name)
        staging: Optional[Path] = None

        try:
            self.git.archive(source_repo, commit_hash, archive_path)

            staging = Path(tempfile.mkdtemp(prefix='.git-extract-', dir=scratch))
            with tarfile.open(archive_path) as archive:
                _extract_all(archive, staging)

            for entry in staging.iterdir():
                dest = target / entry.name
                if dest.exists() or dest.is_symlink():
                    _remove(dest)
                shutil.move(str(entry), str(dest))

        except VCSCommandError as e:
            raise SnapshotError(
                e.command, e.returncode, e.output,
                message=f"Failed to export commit {commit_hash}"
            ) from e
        except (tarfile.TarError, OSError) as e:
            # A move may have failed halfway through the staged entries
            for entry in target.iterdir():
                _remove(entry)
            raise SnapshotError(
                f"extract {archive_path.name}", -1, str(e),
                message=f"Failed to extract commit {commit_hash}"
            ) from e
        finally:
            if archive_path.exists():
                archive_path.unlink()
            if staging is not None and staging.exists():
                shutil.rmtree(staging, ignore_errors=True)

        logger.debug(f"Exported {commit_hash} into {target}")
