"""
Round trips against a real PostgreSQL server.

Skipped unless LIBCAT_TEST_DBNAME, LIBCAT_TEST_USER and LIBCAT_TEST_PASSWORD
point at a database the user may create extensions, tables and databases in.
"""

import os
import uuid

import psycopg2
import pytest

from config import Config
from database import Database

TEST_DB = os.getenv("LIBCAT_TEST_DBNAME")
TEST_USER = os.getenv("LIBCAT_TEST_USER")
TEST_PASSWORD = os.getenv("LIBCAT_TEST_PASSWORD")

pytestmark = pytest.mark.skipif(
    not (TEST_DB and TEST_USER and TEST_PASSWORD),
    reason="LIBCAT_TEST_* variables not set",
)


@pytest.fixture
def db():
    instance = Database(TEST_DB, TEST_USER, TEST_PASSWORD)
    instance.init_procedures()
    yield instance
    instance.close()


@pytest.fixture
def table(db):
    name = f"books_{uuid.uuid4().hex[:8]}"
    assert db.create_table(name).ok
    yield name
    with db.conn.cursor() as cursor:
        cursor.execute(f'DROP TABLE IF EXISTS "{name}"')


def titles(result):
    assert result.ok, result.error
    return [book.title for book in result.books]


def test_added_book_found_by_any_case_insensitive_substring(db, table):
    assert db.add_book(table, "Dune", "Herbert", "Ace", 1965).ok

    for fragment in ["dun", "UNE", "Dune", "e", ""]:
        assert titles(db.search_books(table, fragment)) == ["Dune"]
    assert titles(db.search_books(table, "dunes")) == []


def test_update_replaces_every_field(db, table):
    db.add_book(table, "Dune", "Herbert", "Ace", 1965)
    book_id = db.list_books(table).books[0].id

    assert db.update_book(table, book_id, "Dune Messiah", "F. Herbert", "Putnam", 1969).ok

    books = db.search_books(table, "dune").books
    assert [(b.title, b.author, b.publisher, b.year) for b in books] == [
        ("Dune Messiah", "F. Herbert", "Putnam", 1969)]


def test_delete_matches_exact_title_only(db, table):
    for title in ["Dune", "Dune", "Dune Messiah", "dune"]:
        db.add_book(table, title, "Herbert", "Ace", 1965)

    assert db.delete_books_by_title(table, "Dune").ok

    assert sorted(titles(db.list_books(table))) == ["Dune Messiah", "dune"]


def test_list_returns_every_row_once(db, table):
    for n in range(5):
        db.add_book(table, f"Volume {n}", "Anon", "Self", 2000 + n)

    books = db.list_books(table).books
    assert sorted(b.id for b in books) == sorted({b.id for b in books})
    assert len(books) == 5


def test_create_table_twice_is_not_an_error(db, table):
    assert db.create_table(table).ok


def test_search_on_missing_table_returns_nothing(db):
    assert titles(db.search_books("no_such_table_here", "")) == []


def test_create_then_drop_database_with_session_attached(db):
    name = f"libcat_{uuid.uuid4().hex[:8]}"
    assert db.create_database(name).ok, "create failed"

    attached = psycopg2.connect(host=Config.DB_HOST, port=Config.DB_PORT, dbname=name, user=TEST_USER, password=TEST_PASSWORD)
    try:
        result = db.drop_database(name)
        assert result.ok, result.error
    finally:
        try:
            attached.close()
        except psycopg2.Error:
            pass
