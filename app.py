import logging
import os

from config import (DATA_DIR, ROUTES_FILENAME, STUDENTS_FILENAME, RECEIPTS_FILENAME,
                    LOG_FILENAME, LOG_FORMAT)
from data_store import RouteStore, StudentStore, initialize_sample_data
from exceptions import PersistenceError
from persistence import load_store, save_store

logger = logging.getLogger(__name__)


def configure_logging(data_dir=DATA_DIR, level=logging.INFO):
    """Send application logs to a file in the data folder; stdout belongs to the menu"""
    logging.basicConfig(filename=os.path.join(data_dir, LOG_FILENAME), level=level, format=LOG_FORMAT)


class Session:
    """Owns the route and student stores and the files they live in"""

    def __init__(self, data_dir=DATA_DIR):
        self.data_dir = data_dir
        self.routes_file = os.path.join(data_dir, ROUTES_FILENAME)
        self.students_file = os.path.join(data_dir, STUDENTS_FILENAME)
        self.receipts_file = os.path.join(data_dir, RECEIPTS_FILENAME)
        self.routes = RouteStore()
        self.students = StudentStore()

    def load(self):
        """
        Load both collections. A missing file is a first run, not an error;
        a damaged file is reported and that collection starts empty.
        Returns the list of problems encountered.
        """
        problems = []
        for store, filename in ((self.routes, self.routes_file), (self.students, self.students_file)):
            if not os.path.exists(filename):
                logger.info(f"No existing data at {filename}")
                continue
            try:
                load_store(store, filename)
            except PersistenceError as e:
                logger.warning(f"Error loading data: {e}")
                problems.append(str(e))
        return problems

    def save(self):
        """Persist both collections, raising PersistenceError on the first failure"""
        save_store(self.routes, self.routes_file)
        save_store(self.students, self.students_file)


def create_session(data_dir=DATA_DIR, seed=True):
    """Load saved data and fill in sample data when empty"""
    session = Session(data_dir)
    problems = session.load()
    for problem in problems:
        print(f"Error loading data: {problem}")

    if seed:
        initialize_sample_data(session.routes, session.students)

    print(f"Data loaded: {len(session.routes)} routes, {len(session.students)} students")
    return session
