import psycopg2
import pytest

import database


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.conn.executed.append((sql, params))
        if params and any("\x00" in str(p) for p in params):
            # psycopg2 refuses NUL while quoting, before anything reaches the server
            raise ValueError("A string literal cannot contain NUL (0x00) characters.")
        for fragment, notices in self.conn.notices_on.items():
            if fragment in sql:
                self.conn.notices.extend(notices)
        for fragment, error in self.conn.fail_on.items():
            if fragment in sql:
                raise error
        self._rows = []
        for fragment, rows in self.conn.rows_on.items():
            if fragment in sql:
                self._rows = list(rows)

    def fetchall(self):
        return self._rows


class FakeConnection:
    """Stands in for a psycopg2 connection; records every statement"""

    def __init__(self, dbname):
        self.dbname = dbname
        self.autocommit = False
        self.closed = False
        self.notices = []
        self.executed = []
        self.fail_on = {}
        self.rows_on = {}
        self.notices_on = {}

    def cursor(self):
        return FakeCursor(self)

    def close(self):
        self.closed = True

    def statements(self):
        return [sql for sql, _ in self.executed]


class FakeServer:
    """Hands out FakeConnections from a patched psycopg2.connect"""

    def __init__(self):
        self.connections = []
        self.refuse = {}        # dbname -> error raised on connect
        self.setup = {}         # dbname -> callable(conn) run on each new connection

    def connect(self, **params):
        self.last_params = params
        dbname = params["dbname"]
        if dbname in self.refuse:
            raise self.refuse[dbname]
        conn = FakeConnection(dbname)
        if dbname in self.setup:
            self.setup[dbname](conn)
        self.connections.append(conn)
        return conn

    def connections_to(self, dbname):
        return [c for c in self.connections if c.dbname == dbname]


@pytest.fixture
def fake_server(monkeypatch):
    server = FakeServer()
    monkeypatch.setattr(database.psycopg2, "connect", server.connect)
    return server


@pytest.fixture
def db(fake_server):
    instance = database.Database("library", "admin", "x")
    yield instance
    instance.close()


def server_error(message):
    return psycopg2.ProgrammingError(message)


def scripted_input(answers):
    """input() replacement that replays answers and records prompts"""
    answers = list(answers)
    prompts = []

    def _input(prompt=""):
        prompts.append(prompt)
        if not answers:
            raise EOFError
        return answers.pop(0)

    _input.prompts = prompts
    return _input
