"""Launchd job definitions for running the hostwright client on a schedule.

The client is a pyinfra run of the deploy in the config directory against
``@local``. launchd starts it every ``interval`` minutes; each run first sleeps
a host-specific number of seconds so that a fleet doesn't converge at once.
"""

import hashlib
import plistlib
import posixpath
import random
import shlex
from typing import Any, Dict, List, Optional

from .settings import get_settings

CLIENT_LABEL = "com.hostwright.client"
LAUNCH_DAEMONS_DIR = "/Library/LaunchDaemons"


def launchd_plist_path(label: str) -> str:
    return posixpath.join(LAUNCH_DAEMONS_DIR, f"{label}.plist")


def splay_sleep_time(splay: int, node_name: str, shard_seed: Optional[int] = None) -> int:
    """Pick a stable number of seconds in ``[0, splay)`` for a host.

    The same host always gets the same delay. The seed is ``shard_seed`` when
    given, else the MD5 of the host name.
    """
    if shard_seed is None:
        shard_seed = int(hashlib.md5(node_name.encode("utf-8")).hexdigest(), 16)
    return random.Random(int(shard_seed)).randrange(splay)


def client_command(
    client_binary_path: str,
    config_directory: str,
    sleep_time: int,
    daemon_options: Optional[List[str]] = None,
) -> List[str]:
    """Program arguments for the client job.

    Returns:
        ``["/bin/sh", "-c", "/bin/sleep <n>; <client> <options> @local <deploy> -y"]``
    """
    run = shlex.join(
        [
            client_binary_path,
            *(daemon_options or []),
            "@local",
            posixpath.join(config_directory, "deploy.py"),
            "-y",
        ]
    )
    return ["/bin/sh", "-c", f"/bin/sleep {sleep_time}; {run}"]


def client_job(
    user: str,
    working_directory: str,
    interval: int,
    program_arguments: List[str],
    log_path: str,
    environment: Optional[Dict[str, str]] = None,
    nice: Optional[int] = None,
    low_priority_io: bool = True,
    label: str = CLIENT_LABEL,
) -> Dict[str, Any]:
    """Build the launchd job dictionary.

    Args:
        user: User the job runs as
        working_directory: Directory the job runs in
        interval: Minutes between runs
        program_arguments: Command to run
        log_path: File receiving stdout and stderr
        environment: Extra environment variables, omitted when empty
        nice: Process priority, omitted when None
        low_priority_io: Run with low priority disk IO
        label: Job label
    """
    job: Dict[str, Any] = {
        "Label": label,
        "UserName": user,
        "WorkingDirectory": working_directory,
        "StartInterval": interval * 60,
        "ProgramArguments": program_arguments,
        "StandardOutPath": log_path,
        "StandardErrorPath": log_path,
        "LowPriorityIO": low_priority_io,
    }
    if environment:
        job["EnvironmentVariables"] = dict(environment)
    if nice is not None:
        job["Nice"] = nice
    return job


def render_job(job: Dict[str, Any]) -> str:
    """Serialise a job as an XML plist."""
    return plistlib.dumps(job, sort_keys=True).decode("utf-8")


def launchctl_load_command(plist_path: str, launchctl: Optional[str] = None) -> str:
    launchctl = launchctl or get_settings().launchctl_path
    return shlex.join([launchctl, "load", "-w", plist_path])


def launchctl_unload_command(plist_path: str, launchctl: Optional[str] = None, disable: bool = False) -> str:
    launchctl = launchctl or get_settings().launchctl_path
    parts = [launchctl, "unload"]
    if disable:
        parts.append("-w")
    parts.append(plist_path)
    return shlex.join(parts)
