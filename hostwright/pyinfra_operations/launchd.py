"""PyInfra operations for scheduling the hostwright client with launchd."""

import logging
from io import StringIO
from typing import Any, Dict, List, Optional

from pyinfra import host
from pyinfra.api import operation
from pyinfra.operations import files

from ..launchd import (
    CLIENT_LABEL,
    client_command,
    client_job,
    launchctl_load_command,
    launchctl_unload_command,
    launchd_plist_path,
    render_job,
    splay_sleep_time,
)
from ..pyinfra_facts.launchd import LaunchdJobDefinition, LaunchdJobLoaded

logger = logging.getLogger(__name__)


@operation()
def client_launchd_enable(
    user: str = "root",
    working_directory: str = "/var/root",
    interval: int = 30,
    splay: int = 300,
    config_directory: str = "/etc/hostwright",
    log_directory: str = "/Library/Logs/Hostwright",
    log_file_name: str = "client.log",
    client_binary_path: str = "/usr/local/bin/pyinfra",
    daemon_options: Optional[List[str]] = None,
    environment: Optional[Dict[str, str]] = None,
    nice: Optional[int] = None,
    low_priority_io: bool = True,
    label: str = CLIENT_LABEL,
    **kwargs: Any,
):
    """Run the hostwright client on a schedule with launchd.

    Args:
        user: User the client runs as
        working_directory: Directory the client runs in
        interval: Minutes between client runs
        splay: Upper bound in seconds of the random delay before each run
        config_directory: Directory holding deploy.py
        log_directory: Directory for the client log, created if missing
        log_file_name: Name of the client log file
        client_binary_path: Path to the pyinfra executable
        daemon_options: Extra arguments for the client
        environment: Extra environment variables for the job
        nice: Process priority, -20 (highest) to 19 (lowest)
        low_priority_io: Run with low priority disk IO
        label: launchd job label
        **kwargs: Additional global operation arguments

    Example:
        client_launchd_enable(interval=30)
    """
    yield from files.directory._inner(
        path=log_directory,
        user=user,
        mode="750",
    )

    sleep_time = splay_sleep_time(splay, host.name, host.data.get("shard_seed"))
    job = client_job(
        user=user,
        working_directory=working_directory,
        interval=interval,
        program_arguments=client_command(
            client_binary_path, config_directory, sleep_time, daemon_options
        ),
        log_path=f"{log_directory.rstrip('/')}/{log_file_name}",
        environment=environment,
        nice=nice,
        low_priority_io=low_priority_io,
        label=label,
    )

    plist_path = launchd_plist_path(label)
    current = host.get_fact(LaunchdJobDefinition, path=plist_path)
    loaded = host.get_fact(LaunchdJobLoaded, label=label)

    if current != job:
        logger.debug(f"Writing launchd job {plist_path}")
        yield from files.put._inner(
            src=StringIO(render_job(job)),
            dest=plist_path,
            user="root",
            group="wheel",
            mode="644",
        )
        if loaded:
            yield launchctl_unload_command(plist_path)
        yield launchctl_load_command(plist_path)
    elif not loaded:
        yield launchctl_load_command(plist_path)
    else:
        host.noop(f"launchd job {label} is already enabled")


@operation()
def client_launchd_disable(
    label: str = CLIENT_LABEL,
    **kwargs: Any,
):
    """Stop scheduling the hostwright client.

    Unloads the job and marks it disabled; the job plist is left in place.

    Args:
        label: launchd job label
        **kwargs: Additional global operation arguments
    """
    if not host.get_fact(LaunchdJobLoaded, label=label):
        host.noop(f"launchd job {label} is not loaded")
        return

    yield launchctl_unload_command(launchd_plist_path(label), disable=True)
