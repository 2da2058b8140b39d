"""Configuration management for pg-gateway."""

from dataclasses import dataclass, field


@dataclass
class HttpClientConfig:
    """Timeouts for outbound provider calls, in seconds."""

    connect_timeout: float = 5.0
    read_timeout: float = 10.0


@dataclass
class TestPgConfig:
    """Credentials for the TestPG provider (AES-GCM encrypted payloads)."""

    __test__ = False  # not a pytest test class

    api_key: str = ""
    iv: str = ""
    base_url: str = "https://api-test-pg.bigs.im"


@dataclass
class TossConfig:
    """Credentials for Toss Payments (Basic auth key-in API)."""

    secret_key: str = ""
    base_url: str = "https://api.tosspayments.com"


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "pg_gateway"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class GatewayConfig:
    """Main configuration for pg-gateway."""

    http: HttpClientConfig = field(default_factory=HttpClientConfig)
    testpg: TestPgConfig = field(default_factory=TestPgConfig)
    toss: TossConfig = field(default_factory=TossConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """Create config from environment variables."""
        import os

        http = HttpClientConfig(
            connect_timeout=float(os.getenv("HTTP_CONNECT_TIMEOUT", "5")),
            read_timeout=float(os.getenv("HTTP_READ_TIMEOUT", "10")),
        )

        testpg = TestPgConfig(
            api_key=os.getenv("TESTPG_API_KEY", ""),
            iv=os.getenv("TESTPG_IV", ""),
            base_url=os.getenv("TESTPG_BASE_URL", TestPgConfig.base_url),
        )

        toss = TossConfig(
            secret_key=os.getenv("TOSS_SECRET_KEY", ""),
            base_url=os.getenv("TOSS_BASE_URL", TossConfig.base_url),
        )

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "pg_gateway"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        )

        return cls(
            http=http,
            testpg=testpg,
            toss=toss,
            postgres=postgres,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
