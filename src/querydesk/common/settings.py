from typing import List, Optional
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env into os.environ
load_dotenv()


class Settings(BaseSettings):
    """Process-wide configuration backed by environment variables.

    Loaded once at import time and treated as read-only afterwards. Backends
    receive it at construction, so it must be importable before any connection
    is built.
    """

    snowflake_account: Optional[str] = Field(default=None, validation_alias="SNOWFLAKE_ACCOUNT")
    snowflake_user: Optional[str] = Field(default=None, validation_alias="SNOWFLAKE_USERNAME")
    snowflake_password: Optional[SecretStr] = Field(default=None, validation_alias="SNOWFLAKE_PASSWORD")
    snowflake_warehouse: Optional[str] = Field(default=None, validation_alias="SNOWFLAKE_WAREHOUSE")
    snowflake_database: Optional[str] = Field(default=None, validation_alias="SNOWFLAKE_DATABASE")
    snowflake_schema: Optional[str] = Field(default=None, validation_alias="SNOWFLAKE_SCHEMA")
    snowflake_role: Optional[str] = Field(default=None, validation_alias="SNOWFLAKE_ROLE")
    snowflake_keep_alive: bool = Field(
        default=True,
        validation_alias="SNOWFLAKE_KEEP_ALIVE",
        description="Keep the Snowflake session alive while a statement is running."
    )

    kubeconfig_path: Optional[str] = Field(
        default=None,
        validation_alias="KUBECONFIG_PATH",
        description="Explicit kubeconfig file. Falls back to the default kubeconfig, then in-cluster config."
    )
    kubectl_binary: str = Field(
        default="kubectl",
        validation_alias="KUBECTL_BINARY",
        description="Executable used for native cluster commands."
    )

    warehouse_timeout_sec: int = Field(
        default=60,
        validation_alias="WAREHOUSE_TIMEOUT_SEC",
        description="Upper bound for a single warehouse statement."
    )
    cluster_timeout_sec: int = Field(
        default=30,
        validation_alias="CLUSTER_TIMEOUT_SEC",
        description="Request timeout for orchestration API list calls."
    )
    command_timeout_sec: int = Field(
        default=30,
        validation_alias="COMMAND_TIMEOUT_SEC",
        description="Timeout after which a spawned kubectl process is killed."
    )

    sandbox_workers: int = Field(
        default=8,
        validation_alias="SANDBOX_WORKERS",
        description="Max worker threads for time-bounded backend calls."
    )

    query_echo_limit: int = Field(
        default=200,
        validation_alias="QUERY_ECHO_LIMIT",
        description="Max characters of the query text echoed back in responses."
    )

    breaker_fail_max: int = Field(default=5, validation_alias="BREAKER_FAIL_MAX")
    breaker_reset_timeout_sec: int = Field(default=30, validation_alias="BREAKER_RESET_TIMEOUT_SEC")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_json: bool = Field(default=False, validation_alias="LOG_JSON")

    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        validation_alias="CORS_ORIGINS",
        description="Allowed CORS origins for the HTTP API (JSON list in the environment)."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def snowflake_connect_args(self) -> dict:
        """Keyword arguments for ``snowflake.connector.connect``, without unset values."""
        args = {
            "account": self.snowflake_account,
            "user": self.snowflake_user,
            "password": self.snowflake_password.get_secret_value() if self.snowflake_password else None,
            "warehouse": self.snowflake_warehouse,
            "database": self.snowflake_database,
            "schema": self.snowflake_schema,
            "role": self.snowflake_role,
            "client_session_keep_alive": self.snowflake_keep_alive,
        }
        return {k: v for k, v in args.items() if v is not None}


settings = Settings()

# Configure logging during import
from querydesk.common.logger import configure_logging
configure_logging(
    level=settings.log_level,
    json_format=settings.log_json
)
