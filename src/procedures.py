'''
Server-side routines the client calls. Every table, database and user name reaches
these as a parameter and is quoted with quote_ident / format('%I') before any
dynamic statement is built.
'''

# ——— Database level (needs dblink: CREATE/DROP DATABASE can't run inside a transaction) ———
DATABASE_PROCEDURES_SQL = r"""
CREATE EXTENSION IF NOT EXISTS dblink;

CREATE OR REPLACE PROCEDURE sp_create_database(p_dbname VARCHAR)
LANGUAGE plpgsql AS $$
BEGIN
    PERFORM dblink_exec(
        'host=localhost dbname=postgres user=' || current_user,
        'CREATE DATABASE ' || quote_ident(p_dbname)
    );
    RAISE NOTICE 'Database "%" created.', p_dbname;
END;
$$;

CREATE OR REPLACE PROCEDURE sp_drop_database(p_dbname VARCHAR)
LANGUAGE plpgsql AS $$
BEGIN
    PERFORM dblink_exec(
        'host=localhost dbname=postgres user=' || current_user,
        'DO $inner$
         BEGIN
           PERFORM pg_terminate_backend(pid)
           FROM pg_stat_activity
           WHERE datname = ' || quote_literal(p_dbname) || ' AND pid <> pg_backend_pid();
         END $inner$;'
    );
    PERFORM dblink_exec(
        'host=localhost dbname=postgres user=' || current_user,
        'DROP DATABASE IF EXISTS ' || quote_ident(p_dbname)
    );
    RAISE NOTICE 'Database "%" dropped.', p_dbname;
END;
$$;
"""

# ——— Table level ———
TABLE_PROCEDURES_SQL = r"""
CREATE OR REPLACE PROCEDURE sp_create_table(p_tablename VARCHAR)
LANGUAGE plpgsql AS $$
BEGIN
    IF EXISTS (
        SELECT 1
        FROM information_schema.tables
        WHERE table_schema = 'public'
          AND lower(table_name) = lower(p_tablename)
    ) THEN
        RAISE NOTICE 'Table "%" already exists.', p_tablename;
    ELSE
        EXECUTE format('CREATE TABLE %I (
            id SERIAL PRIMARY KEY,
            title VARCHAR(255),
            author VARCHAR(255),
            publisher VARCHAR(255),
            year INT
        )', p_tablename);
        RAISE NOTICE 'Table "%" created.', p_tablename;
    END IF;
END;
$$;

CREATE OR REPLACE PROCEDURE sp_clear_table(p_tablename VARCHAR)
LANGUAGE plpgsql AS $$
BEGIN
    EXECUTE format('TRUNCATE TABLE %I', p_tablename);
    RAISE NOTICE 'Table "%" cleared.', p_tablename;
END;
$$;
"""

# ——— Book records ———
BOOK_PROCEDURES_SQL = r"""
CREATE OR REPLACE PROCEDURE sp_add_book(
    p_tablename VARCHAR,
    p_title VARCHAR,
    p_author VARCHAR,
    p_publisher VARCHAR,
    p_year INT
)
LANGUAGE plpgsql AS $$
BEGIN
    EXECUTE format(
        'INSERT INTO %I (title, author, publisher, year) VALUES (%L, %L, %L, %s)',
        p_tablename, p_title, p_author, p_publisher, p_year
    );
    RAISE NOTICE 'Book added: %', p_title;
END;
$$;

CREATE OR REPLACE FUNCTION sp_search_book_by_title(p_tablename VARCHAR, p_title VARCHAR)
RETURNS TABLE(
    id INT,
    title VARCHAR,
    author VARCHAR,
    publisher VARCHAR,
    year INT
)
LANGUAGE plpgsql SECURITY DEFINER AS $$
BEGIN
    IF NOT EXISTS (
        SELECT 1 FROM information_schema.tables
        WHERE table_schema = 'public'
          AND lower(table_name) = lower(p_tablename)
    ) THEN
        RETURN;
    ELSE
        RETURN QUERY EXECUTE format(
            'SELECT id, title, author, publisher, year FROM %I WHERE title ILIKE %L',
            p_tablename, '%' || p_title || '%'
        );
    END IF;
END;
$$;

CREATE OR REPLACE PROCEDURE sp_update_book(
    p_tablename VARCHAR,
    p_id INT,
    p_title VARCHAR,
    p_author VARCHAR,
    p_publisher VARCHAR,
    p_year INT
)
LANGUAGE plpgsql AS $$
BEGIN
    EXECUTE format(
        'UPDATE %I SET title=%L, author=%L, publisher=%L, year=%s WHERE id=%s',
        p_tablename, p_title, p_author, p_publisher, p_year, p_id
    );
    RAISE NOTICE 'Book updated with id: %', p_id;
END;
$$;

CREATE OR REPLACE PROCEDURE sp_delete_book_by_title(p_tablename VARCHAR, p_title VARCHAR)
LANGUAGE plpgsql AS $$
BEGIN
    EXECUTE format(
        'DELETE FROM %I WHERE title=%L',
        p_tablename, p_title
    );
    RAISE NOTICE 'Book(s) with title "%" deleted.', p_title;
END;
$$;
"""

# ——— Accounts ———
USER_PROCEDURES_SQL = r"""
CREATE OR REPLACE PROCEDURE sp_create_db_user(p_username VARCHAR, p_password VARCHAR, p_mode VARCHAR)
LANGUAGE plpgsql AS $$
BEGIN
    EXECUTE format('CREATE USER %I WITH PASSWORD %L', p_username, p_password);
    IF lower(p_mode) = 'admin' THEN
        EXECUTE format('ALTER USER %I WITH SUPERUSER', p_username);
    ELSE
        EXECUTE format('ALTER USER %I WITH NOSUPERUSER', p_username);
    END IF;
    RAISE NOTICE 'User "%" created with mode %.', p_username, p_mode;
END;
$$;
"""

PROCEDURES_SQL = (
    DATABASE_PROCEDURES_SQL
    + TABLE_PROCEDURES_SQL
    + BOOK_PROCEDURES_SQL
    + USER_PROCEDURES_SQL
)

# Calls issued by the client (psycopg2 placeholders, values always sent as text)
CALL_CREATE_DATABASE = "CALL sp_create_database(%s)"
CALL_DROP_DATABASE = "CALL sp_drop_database(%s)"
CALL_CREATE_TABLE = "CALL sp_create_table(%s)"
CALL_CLEAR_TABLE = "CALL sp_clear_table(%s)"
CALL_ADD_BOOK = "CALL sp_add_book(%s, %s, %s, %s, %s)"
QUERY_SEARCH_BOOKS = "SELECT * FROM sp_search_book_by_title(%s, %s)"
CALL_UPDATE_BOOK = "CALL sp_update_book(%s, %s, %s, %s, %s, %s)"
CALL_DELETE_BOOK_BY_TITLE = "CALL sp_delete_book_by_title(%s, %s)"
CALL_CREATE_DB_USER = "CALL sp_create_db_user(%s, %s, %s)"
