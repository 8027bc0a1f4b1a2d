"""Unit tests for student_records/exceptions.py — hierarchy and attributes."""

import pytest


class TestHierarchy:

    @pytest.mark.parametrize("name", [
        "DatabaseConnectionError",
        "NotInitializedError",
        "ConstraintError",
        "NotFoundError",
        "ParseError",
    ])
    def test_store_errors_derive_from_store_error(self, name):
        import student_records.exceptions as exc_mod
        cls = getattr(exc_mod, name)
        assert issubclass(cls, exc_mod.StoreError)
        assert issubclass(cls, exc_mod.StudentRecordsError)

    def test_validation_error_is_not_a_store_error(self):
        from student_records.exceptions import StoreError, ValidationError
        assert not issubclass(ValidationError, StoreError)

    def test_connection_error_does_not_shadow_builtin(self):
        from student_records.exceptions import DatabaseConnectionError
        assert not issubclass(DatabaseConnectionError, ConnectionError)


class TestAttributes:

    def test_constraint_error_carries_field_and_value(self):
        from student_records.exceptions import ConstraintError
        err = ConstraintError("email", "a@b.com")
        assert err.field == "email"
        assert err.value == "a@b.com"
        assert "a@b.com" in str(err)

    def test_not_found_error_carries_id(self):
        from student_records.exceptions import NotFoundError
        err = NotFoundError(42)
        assert err.record_id == 42
        assert "42" in str(err)

    def test_validation_error_fields_default_to_empty(self):
        from student_records.exceptions import ValidationError
        assert ValidationError("bad").fields == []

    def test_not_initialized_default_message(self):
        from student_records.exceptions import NotInitializedError
        assert str(NotInitializedError()) == "Database not initialized"
