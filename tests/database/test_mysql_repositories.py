from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from conftest import make_request
from onduty.core.enums import RequestStatus, Role, Shift
from onduty.core.exceptions import DuplicateEmailError
from onduty.database.bootstrap import apply_schema, iter_sql_statements
from onduty.database.connection import DBConfig
from onduty.database.mysql_base import db_cursor
from onduty.requests.mysql_request_repository import MySQLRequestRepository
from onduty.users.mysql_user_repository import MySQLUserRepository


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 0

    def execute(self, sql, params=()):
        self._conn.executed.append((" ".join(sql.split()), tuple(params)))
        if self._conn.error is not None:
            raise self._conn.error
        self.rowcount = self._conn.rowcount

    def fetchone(self):
        return self._conn.rows[0] if self._conn.rows else None

    def fetchall(self):
        return list(self._conn.rows)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, *, rows=None, rowcount=1, error=None):
        self.rows = rows or []
        self.rowcount = rowcount
        self.error = error
        self.executed = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, conn):
        self.conn = conn
        self.config = DBConfig(host="h", port=3306, user="u", password="p", database="onduty_test")

    def connect(self, *, with_database=True):
        return self.conn


def test_db_cursor_commits_and_closes():
    conn = FakeConnection()
    with db_cursor(FakeConnFactory(conn)) as (_, cur):
        cur.execute("SELECT 1")
    assert conn.committed and conn.closed and not conn.rolled_back


def test_db_cursor_rolls_back_on_error():
    conn = FakeConnection()
    with pytest.raises(RuntimeError):
        with db_cursor(FakeConnFactory(conn)) as (_, cur):
            raise RuntimeError("boom")
    assert conn.rolled_back and conn.closed and not conn.committed


def test_save_transition_is_conditional_on_expected_status(alice):
    conn = FakeConnection(rowcount=1)
    repo = MySQLRequestRepository(FakeConnFactory(conn))
    handled_at = datetime(2024, 4, 22, 8, 0, tzinfo=timezone.utc)
    updated = replace(make_request(owner=alice), status=RequestStatus.ACCEPTED, handled_by="Bob", handled_at=handled_at)

    assert repo.save_transition(updated) is True

    sql, params = conn.executed[-1]
    assert "WHERE request_id=%s AND status=%s" in sql
    assert params == ("accepted", "Bob", datetime(2024, 4, 22, 8, 0), "r_1", "pending")


def test_save_transition_reports_lost_race(alice):
    conn = FakeConnection(rowcount=0)
    repo = MySQLRequestRepository(FakeConnFactory(conn))
    updated = replace(make_request(owner=alice), status=RequestStatus.REJECTED, handled_by="Bob")
    assert repo.save_transition(updated) is False


def test_get_by_id_maps_row():
    row = {
        "request_id": "r_9",
        "user_id": "u_a",
        "user_name": "Alice",
        "duty_date": "2024-05-01",
        "shift": "night",
        "reason": "coverage",
        "status": "pending",
        "created_at": datetime(2024, 4, 20, 9, 0),
        "handled_by": None,
        "handled_at": None,
    }
    repo = MySQLRequestRepository(FakeConnFactory(FakeConnection(rows=[row])))

    req = repo.get_by_id("r_9")

    assert req.shift == Shift.NIGHT
    assert req.status == RequestStatus.PENDING
    assert req.created_at == datetime(2024, 4, 20, 9, 0, tzinfo=timezone.utc)


def test_list_requests_builds_filters(alice):
    conn = FakeConnection(rows=[])
    repo = MySQLRequestRepository(FakeConnFactory(conn))

    repo.list_requests(status=RequestStatus.PENDING, user_id="u_a", limit=10)

    sql, params = conn.executed[-1]
    assert "status=%s AND user_id=%s" in sql
    assert "ORDER BY created_at DESC" in sql
    assert params == ("pending", "u_a", 10)


def test_user_repository_count_by_role():
    conn = FakeConnection(rows=[{"n": 2}])
    repo = MySQLUserRepository(FakeConnFactory(conn))
    assert repo.count_by_role(Role.ADMIN) == 2
    assert conn.executed[-1][1] == ("admin",)


def test_user_repository_add_maps_duplicate_key_to_duplicate_email(alice):
    conn = FakeConnection(error=IntegrityError(msg="Duplicate entry for key 'uq_users_email'", errno=errorcode.ER_DUP_ENTRY))
    repo = MySQLUserRepository(FakeConnFactory(conn))

    with pytest.raises(DuplicateEmailError):
        repo.add(alice)
    assert conn.executed[-1][0].startswith("INSERT INTO users")
    assert conn.rolled_back and not conn.committed


def test_user_repository_add_reraises_other_integrity_errors(alice):
    conn = FakeConnection(error=IntegrityError(msg="Column 'name' cannot be null", errno=errorcode.ER_BAD_NULL_ERROR))
    repo = MySQLUserRepository(FakeConnFactory(conn))

    with pytest.raises(IntegrityError):
        repo.add(alice)


def test_iter_sql_statements_respects_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); SELECT \"x;y\";\n SELECT 1"
    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", 'SELECT "x;y"', "SELECT 1"]


def test_apply_schema_creates_database_and_tables():
    conn = FakeConnection()
    apply_schema(FakeConnFactory(conn))

    statements = [sql for sql, _ in conn.executed]
    assert statements[0].startswith("CREATE DATABASE IF NOT EXISTS `onduty_test`")
    assert any(s.startswith("CREATE TABLE IF NOT EXISTS users") for s in statements)
    assert any(s.startswith("CREATE TABLE IF NOT EXISTS duty_requests") for s in statements)
    assert not any(s.startswith("USE") for s in statements)
