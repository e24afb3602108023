"""
In-memory data store for the college bus fee manager.
This module provides the ordered, id-indexed record stores for routes and students.
"""
import logging

from config import MAX_ROUTE_NAME, MAX_STUDENT_NAME, MAX_RECORD_ID
from exceptions import StoreCapacityError
from models import Route, Student

logger = logging.getLogger(__name__)


def truncate_name(name, limit):
    """Trim surrounding whitespace and cut a display name down to the store limit"""
    if name is None:
        return ''
    # Undecodable console bytes arrive as lone surrogates; store them as U+FFFD
    try:
        raw = name.encode('utf-8', 'surrogateescape')
    except UnicodeEncodeError:
        raw = name.encode('utf-8', 'surrogatepass')
    name = raw.decode('utf-8', 'replace')
    return name.strip()[:limit]


class RecordStore:
    """
    Ordered collection of records with monotonically increasing ids.

    Removal keeps the relative order of the remaining records and never
    hands an id out again during the lifetime of the store.
    """

    record_class = None
    name_limit = 63

    def __init__(self):
        self.records = []
        self.next_id = 1

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def add(self, name, *fields):
        """Create a record from the given fields and return its new id"""
        if self.next_id > MAX_RECORD_ID:
            raise StoreCapacityError(f"No more capacity: {self.record_class.__name__} ids exhausted")

        record = self.record_class(self.next_id, truncate_name(name, self.name_limit), *fields)
        try:
            self.records.append(record)
        except MemoryError:
            raise StoreCapacityError(f"No more capacity for {self.record_class.__name__} records")

        self.next_id += 1
        logger.info(f"Added {record!r}")
        return record.id

    def find_index_by_id(self, record_id):
        """Get the position of a record, or None when no record has that id"""
        for index, record in enumerate(self.records):
            if record.id == record_id:
                return index
        return None

    def get_by_id(self, record_id):
        """Get a specific record by ID"""
        index = self.find_index_by_id(record_id)
        if index is None:
            return None
        return self.records[index]

    def remove_by_id(self, record_id):
        """Remove a record, shifting later records up; unknown ids are ignored"""
        index = self.find_index_by_id(record_id)
        if index is None:
            return False

        removed = self.records.pop(index)
        logger.info(f"Removed {removed!r}")
        return True

    def list_all(self):
        """Get all records in store order"""
        return list(self.records)

    def replace_all(self, records):
        """Install a freshly loaded collection and reseed the id counter from it"""
        self.records = list(records)
        if self.records:
            self.next_id = max(record.id for record in self.records) + 1


class RouteStore(RecordStore):
    record_class = Route
    name_limit = MAX_ROUTE_NAME

    def add_route(self, name, distance_km, rate_per_km):
        return self.add(name, distance_km, rate_per_km)


class StudentStore(RecordStore):
    record_class = Student
    name_limit = MAX_STUDENT_NAME

    def add_student(self, name, route_id=0):
        return self.add(name, route_id)


def initialize_sample_data(routes, students):
    """Fill empty stores with a few example routes and students"""
    if len(routes) == 0:
        routes.add_route("North Campus", 4.5, 6.0)
        routes.add_route("East Colony", 12.0, 5.0)
        routes.add_route("West Market", 8.0, 5.5)
        logger.info("Initialized sample routes")

    if len(students) == 0:
        first_routes = routes.list_all()
        students.add_student("Aman Kumar", first_routes[0].id if first_routes else 0)
        students.add_student("Priya Singh", first_routes[1].id if len(first_routes) > 1 else 0)
        logger.info("Initialized sample students")
