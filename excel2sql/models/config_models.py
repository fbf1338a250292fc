from __future__ import annotations

from dataclasses import dataclass

"""Config dataclasses for the Excel -> MySQL migration tool.

Both objects are immutable snapshots built once by ``config.loader`` and then
shared, read-only, by every table import running on a worker thread.
"""

SUPPORTED_DATABASE_TYPES = ("mysql", "mariadb")


@dataclass(frozen=True)
class DatabaseConfig:
    """Target database identity and credentials."""
    database: str
    database_type: str = "mysql"
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None

    def redacted(self) -> str:
        """Connection target without the password, for log lines."""
        return f"{self.database_type}://{self.user}@{self.host}:{self.port}/{self.database}"


@dataclass(frozen=True)
class ImportOptions:
    """Run options shared by every table import.

    ``skip`` counts rows from the very top of the sheet, header included.
    """
    excel: str  # source workbook path
    database: DatabaseConfig
    clear: bool = False  # DELETE FROM target before loading
    skip: int = 0
    django_style: bool = False  # <stem>_<sheet> table names, c_ prefixed columns
    dry_run: bool = False
