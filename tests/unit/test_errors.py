from __future__ import annotations

import pytest

from excel2sql.errors import (
    TABLE_MISSING_CODE,
    TABLE_MISSING_STATE,
    ErrorSource,
    Excel2SqlError,
    ParseError,
    TableImportError,
)


def test_table_missing_payload():
    err = TableImportError.table_missing("Video")
    assert str(err) == "Table 'Video' doesn't exist"
    assert err.code == TABLE_MISSING_CODE == 99
    assert err.state == TABLE_MISSING_STATE == "-1"
    assert err.is_table_missing
    assert err.cause is None


def test_sources():
    assert ParseError("x").source is ErrorSource.PARSE
    assert TableImportError("x").source is ErrorSource.DATABASE


@pytest.mark.parametrize("cls", [ParseError, TableImportError])
def test_family_is_catchable_at_root(cls):
    with pytest.raises(Excel2SqlError):
        raise cls("boom")


def test_describe_includes_source_and_cause():
    cause = ValueError("bad zip")
    err = ParseError("cannot open workbook a.xlsx", cause)
    assert str(err) == "cannot open workbook a.xlsx"
    assert err.describe() == "PARSE: cannot open workbook a.xlsx (caused by ValueError('bad zip'))"


def test_describe_without_cause():
    err = TableImportError("Lost connection", code=2013)
    assert err.describe() == "DATABASE: Lost connection"
    assert not err.is_table_missing
