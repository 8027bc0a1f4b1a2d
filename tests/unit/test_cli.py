"""
Unit tests for student_records/cli/

Coverage plan
─────────────
arg parsing   → subcommands and global flags
list / stats  → empty and populated store
export/import → file round trip, declined confirmation, malformed file
seed / clear  → confirmation handling
main()        → exit codes
"""

import json

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _parse(args: list[str]):
    """Call the CLI argument parser and return the parsed namespace."""
    from student_records.cli.main import build_parser
    parser = build_parser()
    return parser.parse_args(args)


@pytest.fixture
def store(tmp_path):
    """Fresh, opened RecordStore for CLI command tests."""
    from student_records.store.db import RecordStore
    s = RecordStore(db_path=str(tmp_path / "cli_test.db"))
    s.open()
    return s


def _seed(store):
    from student_records.store.models import sample_students
    store.add_many(sample_students())


# ─────────────────────────────────────────────────────────────────────────────
# 1. Argument parsing
# ─────────────────────────────────────────────────────────────────────────────

class TestArgParsing:

    def test_db_flag_default(self):
        from student_records.config import DEFAULT_DB_PATH
        ns = _parse(["list"])
        assert ns.db == DEFAULT_DB_PATH
        assert ns.debug is False

    def test_debug_flag_selects_debug_log_level(self):
        import logging
        from student_records.config import AppConfig
        ns = _parse(["--debug", "list"])
        assert AppConfig(debug=ns.debug).log_level == logging.DEBUG
        assert AppConfig().log_level == logging.INFO

    def test_list_search_defaults_to_none(self):
        ns = _parse(["list"])
        assert ns.subcommand == "list"
        assert ns.search is None

    def test_list_with_search(self):
        ns = _parse(["list", "--search", "juan"])
        assert ns.search == "juan"

    def test_import_requires_file(self):
        with pytest.raises(SystemExit):
            _parse(["import"])

    def test_import_yes_flag(self):
        ns = _parse(["import", "data.json", "-y"])
        assert ns.file == "data.json"
        assert ns.yes is True

    def test_export_output_defaults_to_none(self):
        ns = _parse(["export"])
        assert ns.output is None


# ─────────────────────────────────────────────────────────────────────────────
# 2. list / stats
# ─────────────────────────────────────────────────────────────────────────────

class TestListAndStats:

    def test_list_empty_store(self, store, capsys):
        from student_records.cli.main import cmd_list
        cmd_list(store=store, search=None)
        assert "0 students found" in capsys.readouterr().out

    def test_list_prints_students(self, store, capsys):
        from student_records.cli.main import cmd_list
        _seed(store)
        cmd_list(store=store, search=None)
        out = capsys.readouterr().out
        assert "MAT-2024-001" in out
        assert "maria.lopez@colegio.edu" in out

    def test_list_with_search_filters(self, store, capsys):
        from student_records.cli.main import cmd_list
        _seed(store)
        cmd_list(store=store, search="carlos")
        out = capsys.readouterr().out
        assert "Carlos" in out
        assert "Juan" not in out

    def test_stats_prints_total_and_grades(self, store, capsys):
        from student_records.cli.main import cmd_stats
        _seed(store)
        cmd_stats(store=store)
        out = capsys.readouterr().out
        assert "Total: 3" in out
        assert "5to Primaria" in out


# ─────────────────────────────────────────────────────────────────────────────
# 3. export / import / seed / clear
# ─────────────────────────────────────────────────────────────────────────────

class TestDataCommands:

    def test_export_writes_file(self, store, tmp_path):
        from student_records.cli.main import cmd_export
        _seed(store)
        path = cmd_export(store=store, output_dir=str(tmp_path / "backup"))
        assert path.exists()
        assert len(json.loads(path.read_text(encoding="utf-8"))) == 3

    def test_import_with_yes_replaces_data(self, store, tmp_path):
        from student_records.cli.main import cmd_import
        _seed(store)
        src = tmp_path / "in.json"
        src.write_text(json.dumps([{
            "firstName": "Lucía", "lastName": "Paz", "email": "lucia@x.com",
            "grade": "4to Primaria", "enrollmentFile": "MAT-9",
        }]), encoding="utf-8")
        assert cmd_import(store=store, path=str(src), assume_yes=True) is True
        assert [r.first_name for r in store.get_all()] == ["Lucía"]

    def test_import_declined_at_prompt(self, store, tmp_path, monkeypatch):
        from student_records.cli.main import cmd_import
        _seed(store)
        src = tmp_path / "in.json"
        src.write_text("[]", encoding="utf-8")
        monkeypatch.setattr("builtins.input", lambda prompt="": "n")
        assert cmd_import(store=store, path=str(src)) is False
        assert store.count() == 3

    def test_import_malformed_file_reports_error(self, store, tmp_path, capsys):
        from student_records.cli.main import cmd_import
        src = tmp_path / "bad.json"
        src.write_text("{oops", encoding="utf-8")
        assert cmd_import(store=store, path=str(src), assume_yes=True) is False
        assert "Could not import" in capsys.readouterr().err

    def test_seed_confirmed_at_prompt(self, store, monkeypatch):
        from student_records.cli.main import cmd_seed
        monkeypatch.setattr("builtins.input", lambda prompt="": "yes")
        assert cmd_seed(store=store) is True
        assert store.count() == 3

    def test_clear_with_yes(self, store, capsys):
        from student_records.cli.main import cmd_clear
        _seed(store)
        assert cmd_clear(store=store, assume_yes=True) is True
        assert store.is_empty()


# ─────────────────────────────────────────────────────────────────────────────
# 4. main()
# ─────────────────────────────────────────────────────────────────────────────

class TestMain:

    def test_no_subcommand_prints_help(self, capsys):
        from student_records.cli.main import main
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_seed_then_list(self, tmp_path, capsys):
        from student_records.cli.main import main
        db = str(tmp_path / "main.db")
        assert main(["--db", db, "seed", "--yes"]) == 0
        assert main(["--db", db, "list"]) == 0
        assert "juan.perez@colegio.edu" in capsys.readouterr().out

    def test_seed_twice_returns_1(self, tmp_path):
        from student_records.cli.main import main
        db = str(tmp_path / "main.db")
        main(["--db", db, "seed", "--yes"])
        assert main(["--db", db, "seed", "--yes"]) == 1

    def test_unopenable_database_returns_1(self, tmp_path, capsys):
        from student_records.cli.main import main
        bad = tmp_path / "bad.db"
        bad.write_bytes(b"garbage" * 200)
        assert main(["--db", str(bad), "list"]) == 1
        assert "Error" in capsys.readouterr().err
