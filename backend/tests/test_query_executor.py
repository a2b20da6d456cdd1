"""Tests for the query executor against a temporary SQLite database."""

import sqlite3

import databases
import pytest

from app.core.errors import DatabaseError, QueryRejectedError
from app.schemas.ai_request import RejectedStatement, SelectStatement
from app.services.query_executor import QueryExecutor, escape_bind_colons


def setup_test_db(path):
    """Create the IncomeExpenses/Categories schema with a few rows."""
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE Categories (Id INTEGER PRIMARY KEY, Name TEXT)")
    conn.execute(
        """
        CREATE TABLE IncomeExpenses (
            Id INTEGER PRIMARY KEY,
            Amount REAL,
            Type TEXT,
            Date TEXT,
            CategoryId INTEGER REFERENCES Categories(Id)
        )
        """
    )
    conn.executemany(
        "INSERT INTO Categories (Id, Name) VALUES (?, ?)",
        [(1, "Salary"), (2, "Groceries"), (3, None)],
    )
    conn.executemany(
        "INSERT INTO IncomeExpenses (Id, Amount, Type, Date, CategoryId) VALUES (?, ?, ?, ?, ?)",
        [
            (1, 1500, "Income", "2025-01-01", 1),
            (2, 200, "Expense", "2025-01-03", 2),
            (3, 500, "Income", "2025-02-01", 1),
        ],
    )
    conn.commit()
    conn.close()


@pytest.fixture
def db_url(tmp_path):
    path = tmp_path / "finance.db"
    setup_test_db(str(path))
    return f"sqlite:///{path}"


class TestQueryExecutor:
    """Tests for QueryExecutor.execute."""

    @pytest.mark.asyncio
    async def test_joins_first_column(self, db_url):
        database = databases.Database(db_url)
        await database.connect()
        try:
            executor = QueryExecutor(database)
            result = await executor.execute(
                SelectStatement(sql="SELECT Name, Id FROM Categories WHERE Id < 3 ORDER BY Id")
            )
        finally:
            await database.disconnect()

        assert result == "Salary Groceries"

    @pytest.mark.asyncio
    async def test_aggregate(self, db_url):
        database = databases.Database(db_url)
        await database.connect()
        try:
            executor = QueryExecutor(database)
            result = await executor.execute(
                SelectStatement(sql="SELECT CAST(SUM(Amount) AS INTEGER) FROM IncomeExpenses WHERE Type = 'Income'")
            )
        finally:
            await database.disconnect()

        assert result == "2000"

    @pytest.mark.asyncio
    async def test_null_and_empty_results(self, db_url):
        database = databases.Database(db_url)
        await database.connect()
        try:
            executor = QueryExecutor(database)
            null_result = await executor.execute(SelectStatement(sql="SELECT Name FROM Categories WHERE Id = 3"))
            empty_result = await executor.execute(SelectStatement(sql="SELECT Name FROM Categories WHERE Id = 99"))
        finally:
            await database.disconnect()

        assert null_result == ""
        assert empty_result == ""

    @pytest.mark.asyncio
    async def test_bind_values(self, db_url):
        database = databases.Database(db_url)
        await database.connect()
        try:
            executor = QueryExecutor(database)
            result = await executor.execute(
                SelectStatement(sql="SELECT Name FROM Categories WHERE Id = :id"),
                values={"id": 2},
            )
        finally:
            await database.disconnect()

        assert result == "Groceries"

    @pytest.mark.asyncio
    async def test_rejected_statement_never_runs(self, db_url):
        database = databases.Database(db_url)
        await database.connect()
        try:
            executor = QueryExecutor(database)
            with pytest.raises(QueryRejectedError):
                await executor.execute(RejectedStatement(reason="nope", sql="DELETE FROM Categories"))
            with pytest.raises(QueryRejectedError):
                await executor.execute("DELETE FROM Categories")
            remaining = await database.fetch_val("SELECT COUNT(*) FROM Categories")
        finally:
            await database.disconnect()

        assert remaining == 3

    @pytest.mark.asyncio
    async def test_driver_failure_raises_database_error(self, db_url):
        database = databases.Database(db_url)
        await database.connect()
        try:
            executor = QueryExecutor(database)
            with pytest.raises(DatabaseError) as exc_info:
                await executor.execute(SelectStatement(sql="SELECT Missing FROM NoSuchTable"))
        finally:
            await database.disconnect()

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_unconfigured_database(self):
        executor = QueryExecutor()

        with pytest.raises(DatabaseError) as exc_info:
            await executor.execute(SelectStatement(sql="SELECT 1"))

        assert exc_info.value.message == "Database connection string not configured."

    @pytest.mark.asyncio
    async def test_runs_on_read_only_session(self, db_url):
        """A write that reaches the executor unchecked still cannot change data."""
        database = databases.Database(db_url)
        await database.connect()
        try:
            executor = QueryExecutor(database)
            with pytest.raises(DatabaseError):
                await executor.execute(SelectStatement(sql="DELETE FROM Categories"))
            remaining = await database.fetch_val("SELECT COUNT(*) FROM Categories")

            await database.execute("INSERT INTO Categories (Id, Name) VALUES (10, 'Bonus')")
            after_insert = await database.fetch_val("SELECT COUNT(*) FROM Categories")
        finally:
            await database.disconnect()

        assert remaining == 3
        assert after_insert == 4

    @pytest.mark.asyncio
    async def test_colons_in_literals_are_not_bind_parameters(self, db_url):
        database = databases.Database(db_url)
        await database.connect()
        try:
            executor = QueryExecutor(database)
            literal = await executor.execute(SelectStatement(sql="SELECT 'note :Salary'"))
            filtered = await executor.execute(
                SelectStatement(sql="SELECT Name FROM Categories WHERE Name NOT LIKE '%:Salary%' AND Id = 1")
            )
        finally:
            await database.disconnect()

        assert literal == "note :Salary"
        assert filtered == "Salary"


class TestEscapeBindColons:
    """Tests for escape_bind_colons."""

    def test_escapes_named_parameter_shape(self):
        assert escape_bind_colons("SELECT ':Salary'") == "SELECT '\\:Salary'"

    @pytest.mark.parametrize(
        "sql",
        [
            "SELECT Amount::int FROM IncomeExpenses",
            "SELECT '12:30:00'",
            "SELECT 'ratio:value'",
        ],
    )
    def test_leaves_non_parameter_colons(self, sql):
        assert escape_bind_colons(sql) == sql
