import sys

from app import configure_logging, create_session
from config import DATA_DIR
from exceptions import PersistenceError
from menu import Menu
from persistence import ensure_data_folder


def main():
    try:
        ensure_data_folder(DATA_DIR)
        configure_logging(DATA_DIR)
    except (PersistenceError, OSError) as e:
        # Keep running in memory; saves will report their own failures
        print(f"Error: {e}")

    session = create_session(DATA_DIR)
    return Menu(session).run()


if __name__ == "__main__":
    sys.exit(main())
