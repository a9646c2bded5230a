from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector
import pyodbc


@dataclass
class DBConfig:
    """HR201 (MySQL) connection settings."""

    host: str
    port: int
    user: str
    password: str
    database: str


@dataclass
class MSSQLConfig:
    """DTR (SQL Server) connection settings."""

    server: str
    port: int
    user: str
    password: str
    database: str
    driver: str = "ODBC Driver 18 for SQL Server"
    encrypt: bool = False
    trust_server_certificate: bool = True

    def connection_string(self) -> str:
        return (
            f"DRIVER={{{self.driver}}};"
            f"SERVER={self.server},{int(self.port)};"
            f"DATABASE={self.database};"
            f"UID={self.user};"
            f"PWD={self.password};"
            f"Encrypt={'yes' if self.encrypt else 'no'};"
            f"TrustServerCertificate={'yes' if self.trust_server_certificate else 'no'};"
        )

    def describe(self) -> str:
        return f"{self.user}@{self.server}:{self.port}/{self.database}"


class DatabaseConnection:
    """Singleton-like HR201 connection factory.

    Note: We create short-lived connections per operation (safe for simple Flask apps).
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance._config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def describe(self) -> str:
        c = self._config
        return f"{c.user}@{c.host}:{c.port}/{c.database}"

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            time_zone="+08:00",
        )


class MSSQLConnection:
    """Singleton-like DTR connection factory (pyodbc, one connection per operation)."""

    _instance: Optional["MSSQLConnection"] = None

    def __init__(self, config: MSSQLConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: MSSQLConfig) -> "MSSQLConnection":
        if cls._instance is None or cls._instance._config != config:
            cls._instance = MSSQLConnection(config)
        return cls._instance

    def describe(self) -> str:
        return self._config.describe()

    def connect(self):
        return pyodbc.connect(self._config.connection_string(), autocommit=False)
