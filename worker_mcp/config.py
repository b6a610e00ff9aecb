"""Application settings loaded from the environment."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server configuration.

    Every storage or network capability is optional: leaving its setting
    empty leaves the capability absent and tools that need it answer with a
    configuration error instead of failing at startup.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Runtime
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8787
    log_level: str = "INFO"

    # Security / observability
    cors_allowed_origins: str = "*"
    sentry_dsn: str = ""

    # Tool behaviour
    greeting: str = "Hello"
    http_timeout_seconds: float = 30.0

    # Capabilities
    redis_url: str = ""  # key-value + durable counters
    database_url: str = ""  # relational row store (Prisma)
    blob_dir: str = ""  # blob store root directory

    # OpenAI-compatible embeddings
    openai_api_key: str = ""
    embedding_model: str = ""
    cloudflare_account_id: str = ""
    cloudflare_api_token: str = ""

    # MCP identity
    mcp_server_name: str = "worker-mcp-server"
    mcp_server_version: str = "0.1.0"
    mcp_protocol_version: str = "2024-11-05"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse the comma separated CORS origins."""
        if self.cors_allowed_origins.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]


settings = Settings()
