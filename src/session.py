import getpass
import sys
from enum import Enum

from config import Config


class Role(Enum):
    """Privilege class of a session"""
    ADMIN = "admin"  # full menu
    GUEST = "guest"  # search / view only


def resolve_role(username):
    """Exact, case-sensitive match against the privileged username"""
    if username == Config.PRIVILEGED_USERNAME:
        return Role.ADMIN
    return Role.GUEST


def _password_reader(input_func):
    """getpass only for an interactive terminal; piped input is read line by line"""
    if input_func is input and sys.stdin.isatty():
        return getpass.getpass
    return input_func


class Session:
    """Credentials and working table for one run of the client."""

    def __init__(self, dbname, username, password, table_name=""):
        self.dbname = dbname
        self.username = username
        self.password = password
        self.table_name = table_name
        self.role = resolve_role(username)  # computed once, passed down from here

    @classmethod
    def from_prompts(cls, input_func=input, password_func=None):
        """Ask for database name, username and password"""
        if password_func is None:
            password_func = _password_reader(input_func)
        dbname = input_func("Enter database name: ")
        username = input_func("Enter username: ")
        password = password_func("Enter password: ")
        return cls(dbname, username, password)

    def ask_table_name(self, input_func=input):
        """Ask which table the book operations work on"""
        self.table_name = input_func("Enter table name for operations: ")
        return self.table_name

    def __repr__(self):
        # password left out on purpose so sessions can be logged
        return f"Session(dbname={self.dbname!r}, username={self.username!r}, role={self.role.value})"
