"""Tests for attendee sanitization."""
from rsvp_app.models.rsvp import AttendeeAge
from rsvp_app.services.attendee_service import Attendee, sanitize_attendees


class TestSanitizeAttendees:

    def test_trims_names_and_defaults_age(self):
        result = sanitize_attendees([
            {"name": "  Bob  ", "age": "adult"},
            {"name": "Kid", "age": "child"},
            {"name": "Grandma"},
            {"name": "Teen", "age": "CHILD"},
        ])
        assert result == [
            Attendee("Bob", AttendeeAge.adult),
            Attendee("Kid", AttendeeAge.child),
            Attendee("Grandma", AttendeeAge.adult),
            Attendee("Teen", AttendeeAge.adult),
        ]

    def test_blank_and_non_string_names_dropped(self):
        result = sanitize_attendees([
            {"name": ""},
            {"name": "   "},
            {"name": None},
            {"name": 42},
            {"age": "child"},
            "just a string",
            None,
            {"name": "Alice"},
        ])
        assert [a.name for a in result] == ["Alice"]

    def test_non_list_input_gives_empty(self):
        assert sanitize_attendees(None) == []
        assert sanitize_attendees("Bob") == []
        assert sanitize_attendees({"name": "Bob"}) == []

    def test_capped_at_ten(self):
        raw = [{"name": f"Guest {i}"} for i in range(50)]
        result = sanitize_attendees(raw)
        assert len(result) == 10
        assert result[0].name == "Guest 0"
        assert result[-1].name == "Guest 9"

    def test_blank_entries_do_not_consume_cap(self):
        raw = [{"name": " "}] * 5 + [{"name": f"G{i}"} for i in range(10)]
        result = sanitize_attendees(raw)
        assert [a.name for a in result] == [f"G{i}" for i in range(10)]

    def test_custom_limit(self):
        raw = [{"name": "A"}, {"name": "B"}, {"name": "C"}]
        assert [a.name for a in sanitize_attendees(raw, limit=2)] == ["A", "B"]

    def test_order_preserved(self):
        raw = [{"name": n} for n in ["Zed", "Amy", "Mo"]]
        assert [a.name for a in sanitize_attendees(raw)] == ["Zed", "Amy", "Mo"]

    def test_idempotent(self):
        inputs = [
            [],
            [{"name": " Bob ", "age": "child"}, {"name": ""}, {"name": "Al"}],
            [{"name": f" n{i} ", "age": "child" if i % 2 else "x"} for i in range(30)],
        ]
        for raw in inputs:
            once = sanitize_attendees(raw)
            assert sanitize_attendees(once) == once

    def test_accepts_objects_with_attributes(self):
        class Entry:
            def __init__(self, name, age=None):
                self.name = name
                self.age = age

        result = sanitize_attendees([Entry(" Sam ", "child"), Entry(None)])
        assert result == [Attendee("Sam", AttendeeAge.child)]
