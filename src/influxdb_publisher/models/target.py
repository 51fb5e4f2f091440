from fnmatch import fnmatch
from typing import Dict, List, Optional
from urllib.parse import quote

from pydantic import BaseModel, SecretStr


class Target(BaseModel):
    description: str = ""
    url: str
    database: str
    retention_policy: str = "autogen"
    username: Optional[str] = None
    password: Optional[SecretStr] = None
    use_proxy: bool = False
    expose_exceptions: bool = False

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.description or self.url} (url='{self.url}', database='{self.database}')"


class ProxyConfig(BaseModel):
    host: str
    port: int = 8080
    username: Optional[str] = None
    password: Optional[SecretStr] = None
    no_proxy_hosts: List[str] = []

    model_config = {"frozen": True}

    def applies_to(self, hostname: str) -> bool:
        return not any(fnmatch(hostname, pattern) for pattern in self.no_proxy_hosts)

    def proxy_url(self) -> str:
        credentials = ""
        if self.username:
            credentials = quote(self.username, safe="")
            if self.password is not None:
                credentials += ":" + quote(self.password.get_secret_value(), safe="")
            credentials += "@"
        return f"http://{credentials}{self.host}:{self.port}"

    def as_requests_proxies(self) -> Dict[str, str]:
        url = self.proxy_url()
        return {"http": url, "https": url}
