from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    password: SecretStr

    @classmethod
    def from_parts(cls, username: str | None, password: str | SecretStr | None) -> "Credentials | None":
        """Blank username or password means anonymous access."""
        if isinstance(password, SecretStr):
            password = password.get_secret_value()
        if not username or not username.strip() or not password or not password.strip():
            return None
        return cls(username=username, password=SecretStr(password))


class ProxyConfig(BaseModel):
    """Read-only snapshot of the outbound proxy, taken once per request."""

    model_config = ConfigDict(frozen=True)

    host: str
    port: int
    username: str | None = None
    password: SecretStr | None = None

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.username.strip())


ProxySource = Callable[[], ProxyConfig | None]


def no_proxy() -> ProxyConfig | None:
    return None


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BITBUCKET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = Field(default="http://localhost:7990")
    owner: str = Field(default="TEST")
    repository: str | None = None
    user_centric: bool = False
    username: str | None = None
    password: SecretStr | None = None

    proxy_host: str | None = None
    proxy_port: int = 8080
    proxy_username: str | None = None
    proxy_password: SecretStr | None = None

    @property
    def credentials(self) -> Credentials | None:
        return Credentials.from_parts(self.username, self.password)

    @property
    def proxy(self) -> ProxyConfig | None:
        if not self.proxy_host:
            return None
        return ProxyConfig(
            host=self.proxy_host,
            port=self.proxy_port,
            username=self.proxy_username,
            password=self.proxy_password,
        )


def env_proxy_source() -> ProxyConfig | None:
    """Read the proxy settings from the environment on every call."""
    return AppConfig().proxy
