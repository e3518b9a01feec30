from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = 10

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config["password"]),
            database=str(db_config["database"]),
            connect_timeout=int(db_config.get("connect_timeout", 10)),
        )

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Connection factory for the hosted library database.

    Note: a short-lived connection is opened per repository call; nothing is cached.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            connection_timeout=self._config.connect_timeout,
        )
