"""
File-based persistence for the bus fee manager.

Each collection is stored in its own binary file:

    header   magic b"BUSF", uint16 version, 1-byte record kind, uint32 count
    route    int32 id, name, float64 distance_km, float64 rate_per_km
    student  int32 id, name, int32 route_id

Names are a uint16 byte length followed by UTF-8 bytes. All values are
little-endian. Files are always rewritten in full and loads are all-or-nothing.
"""
import logging
import os
import struct
import tempfile

from exceptions import PersistenceError
from models import Route, Student

logger = logging.getLogger(__name__)

MAGIC = b'BUSF'
FORMAT_VERSION = 1

_HEADER = struct.Struct('<4sHcI')
_INT = struct.Struct('<i')
_NAME_LENGTH = struct.Struct('<H')
_ROUTE_TAIL = struct.Struct('<dd')

ROUTE_KIND = b'R'
STUDENT_KIND = b'S'


class _Reader:
    """Sequential reader over a byte buffer that fails on short reads"""

    def __init__(self, data):
        self.data = data
        self.offset = 0

    def take(self, size):
        end = self.offset + size
        if end > len(self.data):
            raise PersistenceError(f"Truncated data at byte {self.offset}: needed {size} more bytes")
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def unpack(self, layout):
        return layout.unpack(self.take(layout.size))

    def read_name(self):
        (length,) = self.unpack(_NAME_LENGTH)
        try:
            return self.take(length).decode('utf-8')
        except UnicodeDecodeError as e:
            raise PersistenceError(f"Invalid name encoding: {e}")

    def at_end(self):
        return self.offset == len(self.data)


def _pack_name(name):
    raw = name.encode('utf-8')
    return _NAME_LENGTH.pack(len(raw)) + raw


def _pack_route(route):
    return _INT.pack(route.id) + _pack_name(route.name) + _ROUTE_TAIL.pack(route.distance_km, route.rate_per_km)


def _unpack_route(reader):
    (route_id,) = reader.unpack(_INT)
    name = reader.read_name()
    distance_km, rate_per_km = reader.unpack(_ROUTE_TAIL)
    return Route(route_id, name, distance_km, rate_per_km)


def _pack_student(student):
    return _INT.pack(student.id) + _pack_name(student.name) + _INT.pack(student.route_id)


def _unpack_student(reader):
    (student_id,) = reader.unpack(_INT)
    name = reader.read_name()
    (route_id,) = reader.unpack(_INT)
    return Student(student_id, name, route_id)


# Record kind -> (pack, unpack) for each record class
CODECS = {
    Route: (ROUTE_KIND, _pack_route, _unpack_route),
    Student: (STUDENT_KIND, _pack_student, _unpack_student),
}


def encode_records(record_class, records):
    """Encode a whole collection into the versioned binary format"""
    kind, pack, _ = CODECS[record_class]
    try:
        parts = [_HEADER.pack(MAGIC, FORMAT_VERSION, kind, len(records))]
        parts.extend(pack(record) for record in records)
    except (struct.error, UnicodeEncodeError) as e:
        raise PersistenceError(f"Cannot encode {record_class.__name__} records: {e}")
    return b''.join(parts)


def decode_records(record_class, data):
    """Decode a whole collection; any malformed input raises PersistenceError"""
    kind, _, unpack = CODECS[record_class]
    reader = _Reader(data)

    magic, version, found_kind, count = reader.unpack(_HEADER)
    if magic != MAGIC:
        raise PersistenceError("Not a bus manager data file")
    if version != FORMAT_VERSION:
        raise PersistenceError(f"Unsupported data file version {version}")
    if found_kind != kind:
        raise PersistenceError(f"Expected {kind!r} records, found {found_kind!r}")

    records = [unpack(reader) for _ in range(count)]
    if not reader.at_end():
        raise PersistenceError(f"Unexpected trailing data after {count} records")

    seen = set()
    for record in records:
        if record.id <= 0:
            raise PersistenceError(f"Invalid {record_class.__name__} id {record.id}")
        if record.id in seen:
            raise PersistenceError(f"Duplicate {record_class.__name__} id {record.id}")
        seen.add(record.id)
    return records


def ensure_data_folder(data_dir):
    """Create the data folder on first run"""
    try:
        os.makedirs(data_dir, exist_ok=True)
    except OSError as e:
        raise PersistenceError(f"Cannot create data folder {data_dir}: {e}")


def save_store(store, filename):
    """Overwrite filename with the full contents of store"""
    data = encode_records(store.record_class, store.list_all())
    directory = os.path.dirname(os.path.abspath(filename))

    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.tmp-', suffix='.dat')
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        os.replace(tmp_path, filename)
    except OSError as e:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise PersistenceError(f"Cannot write {filename}: {e}")

    logger.info(f"Saved {len(store)} {store.record_class.__name__} records to {filename}")


def load_store(store, filename):
    """
    Replace the contents of store with the records in filename.
    Returns the number of records loaded. On any failure the store is left untouched.
    """
    try:
        with open(filename, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise PersistenceError(f"Cannot read {filename}: {e}")

    records = decode_records(store.record_class, data)
    store.replace_all(records)
    logger.info(f"Loaded {len(records)} {store.record_class.__name__} records from {filename}")
    return len(records)


def append_receipt(text, filename):
    """Append a block of text to the receipt log"""
    try:
        with open(filename, 'a', encoding='utf-8') as f:
            f.write(text)
    except (OSError, UnicodeEncodeError) as e:
        raise PersistenceError(f"Cannot append to {filename}: {e}")
