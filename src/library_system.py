import logging
import sys

from book import print_books
from session import Role

logger = logging.getLogger(__name__)

INVALID_CHOICE = "Invalid choice or operation not available for the current role."

# (choice, label, handler name) per role, in display order
ADMIN_OPTIONS = [
    (1, "Create database", "create_database"),
    (2, "Drop database", "drop_database"),
    (3, "Create table", "create_table"),
    (4, "Clear table", "clear_table"),
    (5, "Add book", "add_book"),
    (6, "Update book", "update_book"),
    (7, "Delete book by Title", "delete_book"),
    (8, "Search book by Title", "search_books"),
    (9, "View all records", "view_all_books"),
    (10, "Create new DB user", "create_db_user"),
    (11, "Exit", "exit"),
]

GUEST_OPTIONS = [
    (8, "Search book by Title", "search_books"),
    (9, "View all records", "view_all_books"),
    (10, "Exit", "exit"),
]


def menu_options(role):
    """Return {choice: (label, handler name)} for the given role"""
    options = ADMIN_OPTIONS if role is Role.ADMIN else GUEST_OPTIONS
    return {choice: (label, handler) for choice, label, handler in options}


class InvalidNumber(ValueError):
    """A numeric field got text that is not a whole number"""


class LibrarySystem:
    """Menu loop: one remote call per chosen operation"""

    def __init__(self, db, session, input_func=input):
        self.db = db
        self.session = session
        self.input = input_func
        self.options = menu_options(session.role)  # fixed for the whole run

    def display_menu(self):
        """Display the operations open to this session's role"""
        print()
        print("Available operations:")
        for choice, (label, _) in self.options.items():
            print(f"{choice}. {label}")

    def run(self):
        """Loop until the user picks Exit (or input ends)"""
        while True:
            self.display_menu()
            try:
                raw = self.input("Choose an operation: ")
            except EOFError:
                break
            if not self.handle_choice(raw):
                break
        logger.info("Menu loop finished")

    def handle_choice(self, raw):
        """Run one menu choice; returns False when the session should end"""
        try:
            choice = int(raw.strip())
        except ValueError:
            print("Invalid choice: please enter a number.")
            return True

        if choice not in self.options:
            logger.info(f"Rejected choice {choice} for role {self.session.role.value}")
            print(INVALID_CHOICE)
            return True

        _, handler_name = self.options[choice]
        if handler_name == "exit":
            return False

        handler = getattr(self, handler_name)
        try:
            handler()
        except InvalidNumber as e:
            print(f"Error: {e}", file=sys.stderr)
        return True

    # ——— Input helpers ———
    def _ask_int(self, prompt, field):
        value = self.input(prompt)
        try:
            return int(value.strip())
        except ValueError:
            raise InvalidNumber(f"{field} must be a whole number.") from None

    def _report(self, result, success_message):
        """Print the success line, or the error on stderr"""
        if result.ok:
            print(success_message)
        else:
            print(f"Error: {result.error}", file=sys.stderr)
        return result.ok

    # ——— Databases ———
    def create_database(self):
        name = self.input("Enter the name of the database to create: ")
        result = self.db.create_database(name, echo_notices=True)
        self._report(result, "Database created.")

    def drop_database(self):
        name = self.input("Enter the name of the database to drop: ")
        result = self.db.drop_database(name, echo_notices=True)
        self._report(result, "Database dropped.")

    # ——— Tables ———
    def create_table(self):
        result = self.db.create_table(self.session.table_name, echo_notices=True)
        self._report(result, "Table created.")

    def clear_table(self):
        result = self.db.clear_table(self.session.table_name, echo_notices=True)
        self._report(result, "Table cleared.")

    # ——— Books ———
    def add_book(self):
        """Add new book to the working table"""
        title = self.input("Enter Title: ")
        author = self.input("Enter Author: ")
        publisher = self.input("Enter Publisher: ")
        year = self._ask_int("Enter Year: ", "Year")
        result = self.db.add_book(self.session.table_name, title, author, publisher, year,
                                  echo_notices=True)
        self._report(result, "Book added.")

    def update_book(self):
        """Replace every field of the book with the given id"""
        book_id = self._ask_int("Enter the ID of the book to update: ", "ID")
        title = self.input("Enter new Title: ")
        author = self.input("Enter new Author: ")
        publisher = self.input("Enter new Publisher: ")
        year = self._ask_int("Enter new Year: ", "Year")
        result = self.db.update_book(self.session.table_name, book_id, title, author,
                                     publisher, year, echo_notices=True)
        self._report(result, "Book updated.")

    def delete_book(self):
        title = self.input("Enter the Title of the book to delete: ")
        result = self.db.delete_books_by_title(self.session.table_name, title, echo_notices=True)
        self._report(result, "Book deleted.")

    def search_books(self):
        """Search books by part of the title"""
        title = self.input("Enter part of the Title to search: ")
        self._show(self.db.search_books(self.session.table_name, title, echo_notices=True))

    def view_all_books(self):
        self._show(self.db.list_books(self.session.table_name, echo_notices=True))

    def _show(self, result):
        if result.ok:
            print_books(result.books)
        else:
            print(f"Error: {result.error}", file=sys.stderr)

    # ——— Accounts ———
    def create_db_user(self):
        username = self.input("Enter new DB username: ")
        password = self.input("Enter new DB user password: ")
        mode = self.input("Enter access mode for new user (admin/guest): ")
        result = self.db.create_db_user(username, password, mode, echo_notices=True)
        self._report(result, "New DB user created.")
