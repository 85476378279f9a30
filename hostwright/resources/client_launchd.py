"""Resource scheduling the hostwright client with launchd on macOS."""

from pydantic import Field

from ..launchd import CLIENT_LABEL
from .base import Resource


class ClientLaunchdResource(Resource):
    """Client launchd resource - runs the compiled deploy on a schedule.

    Run every 30 minutes:
        ClientLaunchdResource(name="schedule-client", interval=30)

    Stop running on a schedule:
        ClientLaunchdResource(name="schedule-client", enabled=False)

    Attributes:
        user: User the client runs as (default: root)
        working_directory: Directory the client runs in (default: /var/root)
        interval: Minutes between client runs (default: 30)
        splay: Upper bound in seconds of a per-host delay added to each run (default: 300)
        config_directory: Directory holding deploy.py (default: /etc/hostwright)
        log_directory: Directory for the client log (default: /Library/Logs/Hostwright)
        log_file_name: Client log file name (default: client.log)
        client_binary_path: Path to the pyinfra executable
        daemon_options: Extra arguments for the client
        environment: Extra environment variables for the job
        nice: Process priority, -20 (highest) to 19 (lowest)
        low_priority_io: Run with low priority disk IO (default: True)
        enabled: Whether the job should be scheduled (default: True)
    """

    user: str = "root"
    working_directory: str = "/var/root"
    interval: int = Field(30, gt=0, description="Minutes between client runs")
    splay: int = Field(300, gt=0, description="Seconds of random delay before each run")
    config_directory: str = "/etc/hostwright"
    log_directory: str = "/Library/Logs/Hostwright"
    log_file_name: str = "client.log"
    client_binary_path: str = "/usr/local/bin/pyinfra"
    daemon_options: list[str] = Field(default_factory=list)
    environment: dict[str, str] = Field(default_factory=dict)
    nice: int | None = Field(
        None,
        ge=-20,
        le=19,
        description="Process priority, -20 is the highest and 19 the lowest",
    )
    low_priority_io: bool = True
    enabled: bool = True

    def to_pyinfra_operations(self) -> str:
        """Generate launchd.client_launchd_enable, or the disable call when not enabled."""
        if not self.enabled:
            return self.to_pyinfra_destroy_operations()

        return self._render_operation(
            "launchd.client_launchd_enable",
            f"Schedule the client every {self.interval} minutes",
            user=self.user,
            working_directory=self.working_directory,
            interval=self.interval,
            splay=self.splay,
            config_directory=self.config_directory,
            log_directory=self.log_directory,
            log_file_name=self.log_file_name,
            client_binary_path=self.client_binary_path,
            daemon_options=self.daemon_options,
            environment=self.environment,
            nice=self.nice,
            low_priority_io=self.low_priority_io,
            label=CLIENT_LABEL,
        )

    def to_pyinfra_destroy_operations(self) -> str:
        return self._render_operation(
            "launchd.client_launchd_disable",
            "Stop scheduling the client",
            label=CLIENT_LABEL,
        )
