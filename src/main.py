import logging
import sys

from config import Config
from database import Database, LibraryCatalogError
from library_system import LibrarySystem
from session import Session

logger = logging.getLogger(__name__)

LOG_HANDLER_NAME = "library_catalog_file"


def configure_logging(log_file=None, level=None):
    """Send log records to a file so they never mix with the prompts"""
    root = logging.getLogger()
    for handler in root.handlers:
        if handler.get_name() == LOG_HANDLER_NAME:
            return handler  # already set up by an earlier main()
    handler = logging.FileHandler(log_file or Config.LOG_FILE)
    handler.set_name(LOG_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(filename)s:%(funcName)s - %(levelname)s - %(message)s'))
    root.setLevel(level or Config.LOG_LEVEL)
    root.addHandler(handler)
    return handler


def main(input_func=input, password_func=None):
    """Main application entry point"""
    db = None
    try:
        configure_logging()
        session = Session.from_prompts(input_func, password_func)
        logger.info(f"Starting {session!r}")

        db = Database(session.dbname, session.username, session.password)  # fatal on failure
        db.init_procedures()
        print("Connection successful.")

        session.ask_table_name(input_func)
        LibrarySystem(db, session, input_func).run()
    except LibraryCatalogError as e:
        logger.critical(str(e))
        print(f"Critical error: {e}", file=sys.stderr)
    except (KeyboardInterrupt, EOFError):
        print()
    except Exception as e:
        logger.critical(f"Unexpected error: {e}", exc_info=True)
        print(f"Critical error: {e}", file=sys.stderr)
    finally:
        if db is not None:
            db.close()
    return 0


# Ensure main() only runs if this script is executed directly
if __name__ == "__main__":
    sys.exit(main())
