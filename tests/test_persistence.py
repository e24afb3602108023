import struct

import pytest

from data_store import RouteStore, StudentStore
from exceptions import PersistenceError
from models import Route, Student
from persistence import (MAGIC, FORMAT_VERSION, append_receipt, decode_records, encode_records,
                         ensure_data_folder, load_store, save_store)


@pytest.fixture
def filled_routes(routes):
    routes.add_route("North Campus", 4.5, 6.0)
    routes.add_route("East Colony", 12.0, 5.0)
    routes.add_route("West Market", 8.0, 5.5)
    routes.remove_by_id(2)
    return routes


def test_routes_round_trip(tmp_path, filled_routes):
    path = str(tmp_path / "routes.dat")
    save_store(filled_routes, path)

    loaded = RouteStore()
    assert load_store(loaded, path) == 2
    assert loaded.list_all() == filled_routes.list_all()
    assert loaded.next_id == 4


def test_students_round_trip(tmp_path, students):
    students.add_student("Aman Kumar", 1)
    students.add_student("Zoë Ångström", 0)
    students.add_student("Priya Singh", 17)
    path = str(tmp_path / "students.dat")
    save_store(students, path)

    loaded = StudentStore()
    load_store(loaded, path)
    assert loaded.list_all() == students.list_all()
    assert loaded.next_id == 4


def test_empty_collection_round_trip(tmp_path, routes):
    path = str(tmp_path / "routes.dat")
    save_store(routes, path)

    loaded = RouteStore()
    assert load_store(loaded, path) == 0
    assert len(loaded) == 0
    assert loaded.next_id == 1


def test_save_overwrites_previous_contents(tmp_path, filled_routes):
    path = str(tmp_path / "routes.dat")
    save_store(filled_routes, path)
    filled_routes.remove_by_id(1)
    save_store(filled_routes, path)

    loaded = RouteStore()
    load_store(loaded, path)
    assert [route.id for route in loaded] == [3]
    assert [p.name for p in tmp_path.iterdir()] == ["routes.dat"]


def test_header_layout():
    data = encode_records(Student, [Student(5, "Aman", 2)])

    assert data[:4] == MAGIC
    assert struct.unpack('<H', data[4:6]) == (FORMAT_VERSION,)
    assert data[6:7] == b'S'
    assert struct.unpack('<I', data[7:11]) == (1,)
    assert struct.unpack('<i', data[11:15]) == (5,)


def test_truncated_file_leaves_store_untouched(tmp_path, filled_routes):
    path = tmp_path / "routes.dat"
    save_store(filled_routes, str(path))
    path.write_bytes(path.read_bytes()[:-3])

    target = RouteStore()
    target.add_route("Keep me", 1.0, 1.0)
    before = target.list_all()

    with pytest.raises(PersistenceError):
        load_store(target, str(path))
    assert target.list_all() == before
    assert target.next_id == 2


def test_count_larger_than_records(filled_routes):
    data = bytearray(encode_records(Route, filled_routes.list_all()))
    data[7:11] = struct.pack('<I', 10)

    with pytest.raises(PersistenceError):
        decode_records(Route, bytes(data))


def test_trailing_bytes_rejected(filled_routes):
    data = encode_records(Route, filled_routes.list_all()) + b'\x00'

    with pytest.raises(PersistenceError):
        decode_records(Route, data)


def test_bad_magic_rejected():
    data = b'XXXX' + encode_records(Route, [])[4:]

    with pytest.raises(PersistenceError, match="Not a bus manager data file"):
        decode_records(Route, data)


def test_unknown_version_rejected():
    data = bytearray(encode_records(Route, []))
    data[4:6] = struct.pack('<H', FORMAT_VERSION + 1)

    with pytest.raises(PersistenceError, match="version"):
        decode_records(Route, bytes(data))


def test_wrong_record_kind_rejected(tmp_path, students):
    students.add_student("Aman Kumar", 1)
    path = str(tmp_path / "students.dat")
    save_store(students, path)

    with pytest.raises(PersistenceError):
        load_store(RouteStore(), path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(PersistenceError):
        load_store(RouteStore(), str(tmp_path / "nope.dat"))


def test_save_into_missing_folder_raises(tmp_path, filled_routes):
    with pytest.raises(PersistenceError):
        save_store(filled_routes, str(tmp_path / "missing" / "routes.dat"))


def test_ensure_data_folder_is_idempotent(tmp_path):
    data_dir = tmp_path / "data"
    ensure_data_folder(str(data_dir))
    ensure_data_folder(str(data_dir))

    assert data_dir.is_dir()


def test_ensure_data_folder_over_a_file(tmp_path):
    blocker = tmp_path / "data"
    blocker.write_text("not a folder")

    with pytest.raises(PersistenceError):
        ensure_data_folder(str(blocker))


def test_unencodable_name_raises_persistence_error():
    with pytest.raises(PersistenceError):
        encode_records(Student, [Student(1, "Ama\udce9", 0)])


def test_unencodable_receipt_raises_persistence_error(tmp_path):
    with pytest.raises(PersistenceError):
        append_receipt("Name: Ama\udce9\n", str(tmp_path / "receipts.txt"))


def test_non_positive_id_rejected(tmp_path):
    path = tmp_path / "routes.dat"
    path.write_bytes(encode_records(Route, [Route(-1, "Odd", 1.0, 1.0)]))

    target = RouteStore()
    with pytest.raises(PersistenceError, match="Invalid Route id -1"):
        load_store(target, str(path))
    assert len(target) == 0
    assert target.add_route("Fresh", 10.0, 10.0) == 1

    with pytest.raises(PersistenceError):
        decode_records(Student, encode_records(Student, [Student(0, "Zero", 0)]))


def test_duplicate_ids_rejected(tmp_path):
    path = tmp_path / "students.dat"
    path.write_bytes(encode_records(Student, [Student(3, "Aman Kumar", 1), Student(3, "Priya Singh", 2)]))

    target = StudentStore()
    target.add_student("Keep me", 0)
    before = target.list_all()

    with pytest.raises(PersistenceError, match="Duplicate Student id 3"):
        load_store(target, str(path))
    assert target.list_all() == before
    assert target.next_id == 2
