import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Connection and logging settings for the catalog client"""

    # Server location: fixed, and matched by the dblink strings in procedures.py
    DB_HOST = "localhost"
    DB_PORT = 5432

    # Bootstrap database used for CREATE/DROP DATABASE
    ADMIN_DATABASE = "postgres"

    # The one username that gets the admin menu
    PRIVILEGED_USERNAME = "admin"

    # Lowest server message level sent to the client
    CLIENT_MIN_MESSAGES = os.getenv("LIBCAT_CLIENT_MIN_MESSAGES", "notice")

    LOG_FILE = os.getenv("LIBCAT_LOG_FILE", "library_catalog.log")
    LOG_LEVEL = os.getenv("LIBCAT_LOG_LEVEL", "INFO")

    @classmethod
    def get_dsn_params(cls, dbname, user, password):
        """Build the keyword arguments for psycopg2.connect"""
        return {
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "dbname": dbname,
            "user": user,
            "password": password,
        }
