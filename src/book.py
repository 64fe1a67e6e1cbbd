'''
This module defines the Book record returned by catalog searches and the helper that prints a list of them.
'''


class Book:
    """One row of a catalog table"""

    def __init__(self, id=0, title="", author="", publisher="", year=0):
        self.id = id                # Server-assigned, sequential
        self.title = title
        self.author = author
        self.publisher = publisher
        self.year = year            # Publication year

    @classmethod
    def from_row(cls, row):
        """Decode an (id, title, author, publisher, year) row"""
        book_id, title, author, publisher, year = row
        return cls(
            id=int(book_id),
            title=title or "",
            author=author or "",
            publisher=publisher or "",
            year=int(year) if year is not None else 0,
        )

    def get_full_info(self):
        """Return all book data as dictionary"""
        return {
            'id': self.id,
            'title': self.title,
            'author': self.author,
            'publisher': self.publisher,
            'year': self.year
        }

    def format_line(self):
        return f"{self.id}: {self.title} by {self.author} ({self.publisher}, {self.year})"

    def __eq__(self, other):
        if not isinstance(other, Book):
            return NotImplemented
        return self.get_full_info() == other.get_full_info()

    def __repr__(self):
        return f"Book({self.id!r}, {self.title!r}, {self.author!r}, {self.publisher!r}, {self.year!r})"


def print_books(books):
    """Print one line per book, or a notice when the list is empty"""
    if not books:
        print("No books found.")
        return
    for book in books:
        print(book.format_line())
