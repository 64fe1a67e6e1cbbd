import logging
import sys
import time

import psycopg2

from book import Book
from config import Config
import procedures

logger = logging.getLogger(__name__)


class LibraryCatalogError(Exception):
    """Base class for errors that end the session"""


class DatabaseConnectionError(LibraryCatalogError):
    """The primary connection could not be opened"""


class ProcedureProvisioningError(LibraryCatalogError):
    """The stored procedures could not be installed"""


class CallResult:
    """Outcome of one remote call: ok, or an error text; search calls also carry books"""

    def __init__(self, ok, error=None, books=None):
        self.ok = ok
        self.error = error
        self.books = books if books is not None else []

    @classmethod
    def success(cls, books=None):
        return cls(True, books=books)

    @classmethod
    def failure(cls, error):
        return cls(False, error=error)

    def __repr__(self):
        if self.ok:
            return f"CallResult(ok, {len(self.books)} books)"
        return f"CallResult(failed: {self.error!r})"


def _error_text(exc):
    """Server message of a psycopg2 error, without the trailing newline"""
    text = getattr(exc, "pgerror", None) or str(exc)
    return text.strip()


class Database:
    def __init__(self, dbname, user, password):
        self.dbname = dbname
        self.user = user
        self.password = password
        self.conn = None
        try:
            self.conn = self.create_connection(dbname)
        except psycopg2.Error as e:
            logger.error(f"Connection to '{dbname}' failed: {_error_text(e)}")
            raise DatabaseConnectionError(f"Error connecting to DB: {_error_text(e)}") from e
        logger.info(f"Connected to '{dbname}' as '{user}'")

    def create_connection(self, dbname):
        """Open an autocommit connection; psycopg2.Error propagates to the caller"""
        conn = psycopg2.connect(**Config.get_dsn_params(dbname, self.user, self.password))
        try:
            conn.autocommit = True  # every call is its own atomic unit
            self._apply_session_settings(conn)
        except psycopg2.Error:
            conn.close()
            raise
        return conn

    def _apply_session_settings(self, conn):
        with conn.cursor() as cursor:
            cursor.execute("SELECT set_config('client_min_messages', %s, false)",
                           (Config.CLIENT_MIN_MESSAGES,))
        del conn.notices[:]

    def init_procedures(self):
        """Install (or replace) every stored procedure in the target database"""
        result = self.call(procedures.PROCEDURES_SQL, None, "Error initializing stored procedures")
        if not result.ok:
            raise ProcedureProvisioningError(result.error)
        logger.info(f"Stored procedures ready in '{self.dbname}'")

    # ——— Dispatcher ———
    def call(self, sql, params, description, echo_notices=False, fetch=False, conn=None):
        """
        Run one remote call and classify the outcome.

        Every parameter goes to the server as text. Server notices raised while the
        call runs are written to stderr only when echo_notices is set.
        """
        conn = conn or self.conn
        text_params = tuple(str(p) for p in params) if params is not None else None
        del conn.notices[:]  # drop whatever earlier statements left behind
        start_time = time.time()
        try:
            with conn.cursor() as cursor:
                cursor.execute(sql, text_params)
                rows = cursor.fetchall() if fetch else []
        except psycopg2.Error as e:
            logger.error(f"{description}: {_error_text(e)}")
            return CallResult.failure(f"{description}: {_error_text(e)}")
        except (ValueError, UnicodeError) as e:
            # raised client-side while adapting a parameter (NUL byte, unencodable text)
            logger.error(f"{description}: {e}")
            return CallResult.failure(f"{description}: {e}")
        finally:
            self._flush_notices(conn, echo_notices)

        duration = time.time() - start_time
        logger.info(f"[DB Call] {sql.strip().splitlines()[0][:80]} took {duration:.4f}s")
        if not fetch:
            return CallResult.success()
        try:
            books = [Book.from_row(row) for row in rows]
        except (TypeError, ValueError) as e:
            logger.error(f"{description}: unexpected row shape: {e}")
            return CallResult.failure(f"{description}: unexpected row returned ({e})")
        logger.info(f"    Fetched {len(books)} rows.")
        return CallResult.success(books)

    def _flush_notices(self, conn, echo):
        notices = list(conn.notices)
        del conn.notices[:]
        if not echo:
            return
        for notice in notices:
            sys.stderr.write(notice)
        sys.stderr.flush()

    # ——— Databases (short-lived connection to the admin database) ———
    def _admin_call(self, sql, name, description, echo_notices):
        try:
            conn = self.create_connection(Config.ADMIN_DATABASE)
        except psycopg2.Error as e:
            logger.error(f"Admin connection failed: {_error_text(e)}")
            return CallResult.failure(f"Error connecting to {Config.ADMIN_DATABASE}: {_error_text(e)}")
        try:
            result = self.call(procedures.DATABASE_PROCEDURES_SQL, None,
                               "Error initializing stored procedures", conn=conn)
            if not result.ok:
                return result
            return self.call(sql, (name,), description, echo_notices=echo_notices, conn=conn)
        finally:
            conn.close()

    def create_database(self, name, echo_notices=False):
        return self._admin_call(procedures.CALL_CREATE_DATABASE, name,
                                "Error creating database", echo_notices)

    def drop_database(self, name, echo_notices=False):
        return self._admin_call(procedures.CALL_DROP_DATABASE, name,
                                "Error dropping database", echo_notices)

    # ——— Tables ———
    def create_table(self, table_name, echo_notices=False):
        return self.call(procedures.CALL_CREATE_TABLE, (table_name,),
                         "Error creating table", echo_notices=echo_notices)

    def clear_table(self, table_name, echo_notices=False):
        return self.call(procedures.CALL_CLEAR_TABLE, (table_name,),
                         "Error clearing table", echo_notices=echo_notices)

    # ——— Books ———
    def add_book(self, table_name, title, author, publisher, year, echo_notices=False):
        return self.call(procedures.CALL_ADD_BOOK,
                         (table_name, title, author, publisher, year),
                         "Error adding book", echo_notices=echo_notices)

    def search_books(self, table_name, title_filter, echo_notices=False):
        """Case-insensitive substring match on title"""
        return self.call(procedures.QUERY_SEARCH_BOOKS, (table_name, title_filter),
                         "Error searching for book", echo_notices=echo_notices, fetch=True)

    def list_books(self, table_name, echo_notices=False):
        return self.search_books(table_name, "", echo_notices=echo_notices)

    def update_book(self, table_name, book_id, title, author, publisher, year, echo_notices=False):
        return self.call(procedures.CALL_UPDATE_BOOK,
                         (table_name, book_id, title, author, publisher, year),
                         "Error updating book", echo_notices=echo_notices)

    def delete_books_by_title(self, table_name, title, echo_notices=False):
        """Removes rows whose title equals `title` exactly"""
        return self.call(procedures.CALL_DELETE_BOOK_BY_TITLE, (table_name, title),
                         "Error deleting book", echo_notices=echo_notices)

    # ——— Accounts ———
    def create_db_user(self, username, password, mode, echo_notices=False):
        return self.call(procedures.CALL_CREATE_DB_USER, (username, password, mode),
                         "Error creating DB user", echo_notices=echo_notices)

    def close(self):
        if self.conn is None:
            return
        try:
            self.conn.close()
            logger.info(f"Connection to '{self.dbname}' closed")
        finally:
            self.conn = None
