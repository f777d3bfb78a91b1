"""
Git-backed source provider.

Clones a template's branch into a temporary directory and checks out the
pinned commit. Transport failures are retried a bounded number of times with
a linear backoff.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

from scb.core.config.constants import TEMP_DIR_PREFIX
from scb.core.errors import (
    InstallerError,
    RevisionNotFoundError,
    SourceNotFoundError,
    SourceTransportError,
    filesystem_error,
)
from scb.core.templates.models import Template

logger = logging.getLogger(__name__)

MAX_CLONE_ATTEMPTS = 3

# Phrases git prints when the repository itself is missing
_NOT_FOUND_MARKERS = ("repository not found", "does not exist", "not found")


class GitSourceProvider:
    """Fetches template trees with the git command-line client."""

    def __init__(
        self,
        timeout: int = 300,
        max_attempts: int = MAX_CLONE_ATTEMPTS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.timeout = timeout
        self.max_attempts = max_attempts
        self._sleep = sleep

    @staticmethod
    def validate_git_installed() -> None:
        """
        Raises:
            SourceNotFoundError: If git is not on PATH
        """
        if shutil.which("git") is None:
            raise SourceNotFoundError(
                "git is not installed or not in PATH",
                context={"operation": "validate git"},
            )

    def fetch(self, template: Template) -> Path:
        """
        Clone `template` and check out its pinned commit.

        Returns:
            Temporary directory containing the checked-out tree
        """
        self.validate_git_installed()
        try:
            temp_dir = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX))
        except OSError as e:
            raise filesystem_error("create temporary directory", tempfile.gettempdir(), e) from e

        try:
            self._clone_with_retry(template, temp_dir)
            self._checkout(template, temp_dir)
        except InstallerError:
            self.cleanup(temp_dir)
            raise
        logger.info(f"Fetched template {template.id} at {template.commit[:8]} into {temp_dir}")
        return temp_dir

    def cleanup(self, path: Path) -> None:
        """
        Remove a directory created by fetch().

        Raises:
            InstallerError: If the path does not look like one of ours
        """
        if not path.name.startswith(TEMP_DIR_PREFIX):
            raise InstallerError(
                f"refusing to remove {path}: not a temporary source directory",
                context={"operation": "cleanup source", "path": str(path)},
            )
        if not path.exists():
            return
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise filesystem_error("remove temporary directory", path, e) from e
        logger.debug(f"Removed temporary directory {path}")

    # =========================================================================
    # Internals
    # =========================================================================

    def _clone_with_retry(self, template: Template, dest: Path) -> None:
        for attempt in range(1, self.max_attempts + 1):
            try:
                self._clone(template, dest)
                return
            except SourceTransportError as e:
                logger.warning(f"Clone attempt {attempt}/{self.max_attempts} failed: {e}")
                self._reset_dir(dest)
                if attempt == self.max_attempts:
                    raise SourceTransportError(
                        f"failed to clone {template.repo_url} after {self.max_attempts} attempts",
                        cause=e,
                        context={"operation": "clone", "repo": template.repo_url},
                    ) from e
                self._sleep(attempt)

    def _clone(self, template: Template, dest: Path) -> None:
        context = {"operation": "clone", "repo": template.repo_url, "branch": template.branch}
        try:
            subprocess.run(
                ["git", "clone", "-b", template.branch, template.repo_url, str(dest)],
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise SourceTransportError(
                f"git clone timed out after {self.timeout}s", cause=e, context=context
            ) from e
        except subprocess.CalledProcessError as e:
            output = (e.stderr or "").strip()
            if any(marker in output.lower() for marker in _NOT_FOUND_MARKERS):
                raise SourceNotFoundError(
                    f"repository or branch not found: {template.repo_url} ({template.branch})",
                    cause=e,
                    context={**context, "output": output},
                ) from e
            raise SourceTransportError(
                f"git clone failed: {output or e}", cause=e, context=context
            ) from e

    def _checkout(self, template: Template, repo_dir: Path) -> None:
        try:
            subprocess.run(
                ["git", "checkout", template.commit],
                cwd=repo_dir,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise SourceTransportError(
                f"git checkout timed out after {self.timeout}s",
                cause=e,
                context={"operation": "checkout", "commit": template.commit},
            ) from e
        except subprocess.CalledProcessError as e:
            raise RevisionNotFoundError(
                f"failed to checkout commit {template.commit}: {(e.stderr or '').strip()}",
                cause=e,
                context={"operation": "checkout", "commit": template.commit},
            ) from e

    @staticmethod
    def _reset_dir(path: Path) -> None:
        """Empty a partially cloned directory so the next attempt starts clean."""
        if path.exists():
            shutil.rmtree(path, ignore_errors=True)
        path.mkdir(parents=True, exist_ok=True)
