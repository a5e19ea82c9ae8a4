"""
Dashboard configuration.

DashboardConfig collects everything needed to reach the AdGuard Home
server and drive the dashboard. Values come from CLI options with
environment variable fallbacks (see guardview.cli.main).

Example:
    ```python
    from guardview.config import DashboardConfig

    config = DashboardConfig(host="192.168.1.2", port=3000,
                             username="admin", password="secret")
    config.validate()
    print(config.base_url)  # "http://192.168.1.2:3000"
    ```
"""

from dataclasses import dataclass
from pathlib import Path

from guardview.exceptions import ConfigError

SUPPORTED_PROTOCOLS = ("http", "https")


@dataclass
class DashboardConfig:
    """
    Connection and refresh settings for one dashboard instance.

    Attributes:
        host: AdGuard Home address (IP or hostname)
        port: AdGuard Home web interface port
        protocol: "http" or "https"
        username: Web interface user
        password: Web interface password
        update_interval: Seconds between producer polls
        query_limit: Number of query log records fetched per poll
        min_frame_interval: Minimum seconds between two redraws (0 disables)
        log_file: Where to write logs while the terminal is in use
    """

    host: str = "127.0.0.1"
    port: int = 80
    protocol: str = "http"
    username: str = ""
    password: str = ""
    update_interval: float = 2.0
    query_limit: int = 100
    min_frame_interval: float = 0.1
    log_file: Path | None = None

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}"

    def validate(self) -> None:
        """
        Check field values.

        Raises:
            ConfigError: On the first invalid field
        """
        if self.protocol not in SUPPORTED_PROTOCOLS:
            raise ConfigError(
                "protocol", f"must be one of {', '.join(SUPPORTED_PROTOCOLS)}"
            )
        if not self.host:
            raise ConfigError("host", "must not be empty")
        if not 0 < self.port < 65536:
            raise ConfigError("port", f"{self.port} is out of range")
        if self.update_interval <= 0:
            raise ConfigError("update_interval", "must be positive")
        if self.query_limit <= 0:
            raise ConfigError("query_limit", "must be positive")
        if self.min_frame_interval < 0:
            raise ConfigError("min_frame_interval", "must not be negative")
