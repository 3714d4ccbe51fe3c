"""
Tests for the sqlite entity store and the generate-and-save service.
"""

import pytest

from database.database_manager import DatabaseManager
from database.timetable_service import TimetableService
from models.data_models import Assignment
from solver.errors import DataLoadError, InfeasibleScheduleError


@pytest.fixture
def db():
    manager = DatabaseManager(":memory:")
    manager.create_schema()
    yield manager
    manager.close()


def _store(db, snapshot):
    db.add_courses(snapshot.courses)
    db.add_sections(snapshot.sections)
    db.add_instructors(snapshot.instructors)
    db.add_rooms(snapshot.rooms)
    db.add_time_slots(snapshot.time_slots)


class TestDatabaseManager:
    def test_snapshot_round_trip(self, db, department_snapshot):
        _store(db, department_snapshot)

        loaded = db.load_snapshot()

        assert sorted(c.code for c in loaded.courses) == sorted(c.code for c in department_snapshot.courses)
        assert {s.id: s for s in loaded.sections} == {s.id: s for s in department_snapshot.sections}
        assert {r.name: r for r in loaded.rooms} == {r.name: r for r in department_snapshot.rooms}
        assert loaded.time_slots == department_snapshot.time_slots
        assert {i.external_id: i for i in loaded.instructors} == {
            i.external_id: i for i in department_snapshot.instructors
        }

    def test_missing_optional_fields(self, db, backtrack_snapshot):
        _store(db, backtrack_snapshot)

        rooms = db.get_rooms()
        sections = db.get_sections()

        assert all(r.building is None and r.floor is None for r in rooms)
        assert all(s.preferred_instructor is None for s in sections)

    def test_insert_replaces_by_key(self, db, single_variable_snapshot):
        _store(db, single_variable_snapshot)
        single_variable_snapshot.rooms[0].capacity = 99
        db.add_rooms(single_variable_snapshot.rooms)

        rooms = db.get_rooms()
        assert len(rooms) == 1
        assert rooms[0].capacity == 99

    def test_save_timetable_replaces_entries(self, db):
        first = [Assignment("S1", 1, "C1", "I1", "R1", 1)]
        second = [Assignment("S2", 1, "C2", "I2", "R2", 2), Assignment("S2", 2, "C2", "I2", "R2", 3)]

        db.save_timetable(first)
        db.save_timetable(second)

        assert db.get_timetable_entries() == [a.to_record() for a in second]

    def test_clear_entities(self, db, single_variable_snapshot):
        _store(db, single_variable_snapshot)
        db.clear_entities()

        snapshot = db.load_snapshot()
        assert snapshot.courses == [] and snapshot.sections == [] and snapshot.rooms == []

    def test_query_without_schema_raises(self):
        manager = DatabaseManager(":memory:")
        with pytest.raises(DataLoadError):
            manager.get_courses()
        manager.close()

    def test_context_manager_closes(self):
        with DatabaseManager(":memory:") as manager:
            manager.create_schema()
        assert manager.connection is None


class TestTimetableService:
    def test_generate_and_save(self, db, single_variable_snapshot):
        _store(db, single_variable_snapshot)
        service = TimetableService(db)

        result = service.generate_and_save()

        assert result.success
        assert service.get_all() == [
            {
                "sectionId": "CS101-A",
                "courseCode": "CS101",
                "instructorId": "PROF01",
                "roomName": "R101",
                "timeslotId": 1,
            }
        ]
        assert result.metrics.phase_seconds["data_load"] > 0.0

    def test_infeasible_raises_and_clears_previous(self, db, single_variable_snapshot):
        single_variable_snapshot.rooms[0].capacity = 10
        _store(db, single_variable_snapshot)
        db.save_timetable([Assignment("OLD", 1, "C1", "I1", "R1", 1)])
        service = TimetableService(db)

        with pytest.raises(InfeasibleScheduleError) as excinfo:
            service.generate_and_save()

        assert excinfo.value.result is not None
        assert not excinfo.value.result.success
        assert service.get_all() == []
