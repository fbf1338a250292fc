# Shared pytest fixtures
from __future__ import annotations

import re
import tempfile
import threading
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from excel2sql.config.loader import ENV_VARS
from excel2sql.errors import TableImportError
from excel2sql.logging.init import reset_logging
from excel2sql.models.config_models import DatabaseConfig, ImportOptions

SHOW_TABLES_RE = re.compile(r'^SHOW TABLES LIKE "(.*)"$')


class FakePool:
    """Records statements; knows a fixed set of existing tables.

    ``fail_when`` makes execute() raise TableImportError for matching SQL.
    """

    def __init__(
        self,
        existing: set[str] | None = None,
        fail_when: Callable[[str], bool] | None = None,
    ) -> None:
        self.existing = set(existing or ())
        self.fail_when = fail_when
        self.statements: list[str] = []
        self._lock = threading.Lock()

    def first(self, sql: str):
        with self._lock:
            self.statements.append(sql)
        m = SHOW_TABLES_RE.match(sql)
        if m and m.group(1) in self.existing:
            return (m.group(1),)
        return None

    def execute(self, sql: str) -> None:
        if self.fail_when is not None and self.fail_when(sql):
            raise TableImportError(f"failed: {sql}", code=1064)
        with self._lock:
            self.statements.append(sql)

    def dispose(self) -> None:
        pass

    def inserts_for(self, table: str) -> list[str]:
        prefix = f"INSERT INTO `{table}` "
        return [s for s in self.statements if s.startswith(prefix)]


@pytest.fixture(autouse=True)
def clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def clean_db_env(monkeypatch):
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def make_workbook() -> Callable[[Path, dict[str, list[list[object]]]], Path]:
    """Write a real .xlsx with one sheet per entry (rows written as-is, no header)."""

    def _make(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet_name, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
        return path

    return _make


@pytest.fixture()
def sample_workbook(temp_workdir: Path, make_workbook) -> Path:
    return make_workbook(
        temp_workdir / "data" / "main.xlsx",
        {
            "Video": [
                ["id", "title", "year"],
                [1, "Alien", 1979],
                [2, "Heat", 1995],
            ],
            "KeyValue": [
                ["id", "key", "value"],
                [1, "theme", "dark"],
            ],
        },
    )


@pytest.fixture()
def options_factory() -> Callable[..., ImportOptions]:
    def _make(**overrides) -> ImportOptions:
        values = dict(
            excel="/data/manifest/main.xlsx",
            database=DatabaseConfig(
                database="appdb", host="localhost", port=3306, user="root", password="secret"
            ),
        )
        values.update(overrides)
        return ImportOptions(**values)

    return _make


@pytest.fixture()
def fake_pool_cls() -> type[FakePool]:
    return FakePool
