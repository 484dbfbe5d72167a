"""Configuration for the PostgreSQL executor."""

from pydantic import BaseModel, SecretStr


class PostgresConfig(BaseModel):
    """Configuration for the PostgreSQL executor."""

    host: str = "localhost"
    port: int = 5432
    dbname: str = "postgres"
    user: str = "postgres"
    password: SecretStr | None = None
    application_name: str = "sql-doctester"
    connect_timeout: int = 10
