"""
Runner for template-supplied install scripts.

Templates may ship pre-install.sh and post-install.sh at the root of their
tree. A script is copied into the target directory, run there with bash and
removed again. A missing script is not an error.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from scb.core.errors import ScriptError, filesystem_error

logger = logging.getLogger(__name__)


class ScriptRunner:
    """Runs template scripts with the target directory as working directory."""

    def __init__(self, shell: str = "bash") -> None:
        self.shell = shell

    @staticmethod
    def exists(source_dir: Path, name: str) -> bool:
        return (source_dir / name).is_file()

    def run(self, source_dir: Path, target_dir: Path, name: str) -> None:
        """
        Run `name` from `source_dir` inside `target_dir`.

        Raises:
            ScriptError: If the script exits non-zero
        """
        script = source_dir / name
        if not script.is_file():
            logger.debug(f"No {name} in template, skipping")
            return

        local_copy = target_dir / name
        try:
            shutil.copy2(script, local_copy)
            local_copy.chmod(0o755)
        except OSError as e:
            raise filesystem_error(f"copy {name} to", target_dir, e) from e

        logger.info(f"Running {name} in {target_dir}")
        try:
            result = subprocess.run(
                [self.shell, str(local_copy)],
                cwd=target_dir,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise ScriptError(f"failed to start {name}: {e}", script=name) from e
        finally:
            try:
                local_copy.unlink()
            except OSError as e:
                logger.warning(f"Failed to remove {local_copy}: {e}")

        output = (result.stdout or "") + (result.stderr or "")
        if result.returncode != 0:
            raise ScriptError(
                f"{name} exited with status {result.returncode}",
                script=name,
                output=output,
                returncode=result.returncode,
            )
        if output.strip():
            logger.debug(f"{name} output:\n{output}")
