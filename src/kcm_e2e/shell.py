"""
Shell collaborators: make targets and support bundle collection.
"""
import logging
import os
import subprocess
from pathlib import Path
from typing import List, Optional, Union

from kcm_e2e.errors import CommandError

logger = logging.getLogger(__name__)


def _env() -> dict:
    env = os.environ.copy()
    env["PATH"] = f"{os.environ.get('HOME')}/.local/bin:{os.environ.get('PATH')}"
    return env


def _decode(data: Union[bytes, str, None]) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def run(cmd: List[str], cwd: str = ".", timeout: Optional[float] = None) -> str:
    """
    Run a command and return its combined output.

    Args:
        cmd: Command and arguments
        cwd: Working directory
        timeout: Seconds before the command is killed

    Raises:
        CommandError: The command exited non-zero or timed out
    """
    command = " ".join(cmd)
    logger.info(f"running: {command}")
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=_env(),
        )
    except subprocess.TimeoutExpired as e:
        # partial output is bytes on POSIX even with text=True
        output = _decode(e.stdout) + _decode(e.stderr)
        raise CommandError(command, None, output) from e

    output = result.stdout + result.stderr
    if result.returncode != 0:
        logger.error(f"❌ {command} exited with {result.returncode}")
        raise CommandError(command, result.returncode, output)
    logger.debug(output)
    return output


def make(target: str, cwd: str = ".", timeout: Optional[float] = None) -> str:
    return run(["make", target], cwd=cwd, timeout=timeout)


def collect_support_bundle(cluster_name: str = "", output_dir: str = "test/e2e",
                           kubeconfig: Optional[str] = None, cwd: str = ".",
                           timeout: Optional[float] = None) -> Optional[Path]:
    """
    Collect a troubleshoot support bundle from a cluster.

    An empty cluster_name means the management cluster. Failures are logged
    and reported as None so they never hide the outcome of the suite.
    output_dir is relative to cwd.
    """
    name = cluster_name or "management"
    path = Path(output_dir) / f"support-bundle-{name}.tar.gz"
    cmd = ["support-bundle", "--interactive=false", "--load-cluster-specs", f"--output={path}"]
    if kubeconfig:
        cmd.append(f"--kubeconfig={kubeconfig}")
    try:
        run(cmd, cwd=cwd, timeout=timeout)
    except (CommandError, OSError) as e:
        logger.warning(f"⚠️ Failed to collect support bundle for {name}: {e}")
        return None
    path = Path(cwd) / path
    logger.info(f"✅ Support bundle for {name} written to {path}")
    return path
