"""
config.py
- Uses pydantic-settings (BaseSettings) to load INFLUXDB_PUBLISHER_* env vars + .env.
- Holds the host-wide values a publish run needs but the targets don't carry:
  proxy, client timeout/retries, log level and project name format.
"""

from typing import List, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from influxdb_publisher.models.target import ProxyConfig
from influxdb_publisher.utils.formatters import NameFormat


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="INFLUXDB_PUBLISHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    name_format: NameFormat = NameFormat.SLUG

    proxy_host: Optional[str] = None
    proxy_port: int = 8080
    proxy_username: Optional[str] = None
    proxy_password: Optional[SecretStr] = None
    no_proxy_hosts: List[str] = Field(default_factory=list)

    client_timeout_s: Optional[float] = 30.0
    client_retries: int = 3

    def proxy_config(self) -> Optional[ProxyConfig]:
        if not self.proxy_host:
            return None
        return ProxyConfig(
            host=self.proxy_host,
            port=self.proxy_port,
            username=self.proxy_username,
            password=self.proxy_password,
            no_proxy_hosts=self.no_proxy_hosts,
        )


settings = Settings()
