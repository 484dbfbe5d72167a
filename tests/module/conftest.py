"""Fixtures for module tests using a PostgreSQL testcontainer."""

from collections.abc import AsyncGenerator, Generator

import pytest
from docker.errors import DockerException
from testcontainers.core import testcontainers_config
from testcontainers.postgres import PostgresContainer

from sql_doctester.executors.postgres import PostgresConfig, PostgresExecutor


@pytest.fixture(scope="session", autouse=True)
def _disable_ryuk() -> None:
    """Disable the extra cleanup instance, we use contexts to clean containers."""
    testcontainers_config.ryuk_disabled = True


@pytest.fixture(scope="session")
def postgres_server() -> Generator[PostgresContainer, None, None]:
    """Start a PostgreSQL container for the session."""
    container = PostgresContainer("postgres:16-alpine", driver=None)

    try:
        container.start()
    except DockerException as e:
        pytest.skip(f"Docker is not available: {e}")

    try:
        yield container
    finally:
        container.stop()


@pytest.fixture(scope="session")
def postgres_config(postgres_server: PostgresContainer) -> PostgresConfig:
    """Executor configuration pointing at the container."""
    return PostgresConfig(
        host=postgres_server.get_container_host_ip(),
        port=int(postgres_server.get_exposed_port(5432)),
        dbname=postgres_server.dbname,
        user=postgres_server.username,
        password=postgres_server.password,
    )


@pytest.fixture
async def postgres_executor(
    postgres_config: PostgresConfig,
) -> AsyncGenerator[PostgresExecutor, None]:
    """Open an executor on the container database."""
    async with PostgresExecutor.from_config(postgres_config) as executor:
        yield executor
