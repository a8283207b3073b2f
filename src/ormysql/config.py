"""
Connection settings and bootstrap helpers.

Builds a pooled SQLAlchemy engine for the PyMySQL driver and wires it into
a ready-to-use MySQLAdapter.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, SecretStr
from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.engine import URL, Engine

from ormysql.adapters.mysql import MySQLAdapter, QueryExecutor
from ormysql.adapters.mysql.executor import QueryLogHook

ENV_PREFIX = "ORMYSQL_"


class AdapterSettings(BaseModel):
    """
    Connection settings for the MySQL adapter.

    Example:
        settings = AdapterSettings(database="app", username="app", password="secret")
        settings = AdapterSettings.from_env()  # ORMYSQL_DATABASE, ORMYSQL_USERNAME, ...
    """

    host: str = "localhost"
    port: int = Field(default=3306, ge=1, le=65535)
    database: str | None = None
    username: str | None = None
    password: SecretStr | None = None
    socket_path: str | None = None
    connection_limit: int = Field(default=10, ge=1)
    charset: str = "utf8mb4"
    debug: bool = False

    model_config = {"frozen": True}

    @classmethod
    def from_env(
        cls,
        prefix: str = ENV_PREFIX,
        environ: Mapping[str, str] | None = None,
    ) -> AdapterSettings:
        """Read settings from `<prefix><FIELD>` environment variables."""
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for name in cls.model_fields:
            key = f"{prefix}{name.upper()}"
            if key in environ:
                values[name] = environ[key]
        return cls.model_validate(values)

    def url(self) -> URL:
        query: dict[str, str] = {"charset": self.charset}
        if self.socket_path:
            query["unix_socket"] = self.socket_path
        return URL.create(
            "mysql+pymysql",
            username=self.username,
            password=self.password.get_secret_value() if self.password else None,
            host=self.host,
            port=self.port,
            database=self.database,
            query=query,
        )


def create_engine(settings: AdapterSettings, **kwargs: Any) -> Engine:
    """Create a pooled engine; `connection_limit` sizes the pool."""
    options: dict[str, Any] = {
        "pool_size": settings.connection_limit,
        "pool_pre_ping": True,
        "echo": settings.debug,
    }
    options.update(kwargs)
    return sa_create_engine(settings.url(), **options)


def initialize(
    settings: AdapterSettings | None = None,
    log: QueryLogHook | None = None,
) -> MySQLAdapter:
    """
    Build an adapter from settings (or the environment).

    Example:
        adapter = initialize(AdapterSettings(database="app", username="root"))
    """
    settings = settings or AdapterSettings.from_env()
    return MySQLAdapter(QueryExecutor(create_engine(settings), log=log))
