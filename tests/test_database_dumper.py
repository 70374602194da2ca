"""
Unit tests for database_dumper.py
"""

import pytest

from mysqldump_extended.context import RunContext
from mysqldump_extended.database_dumper import DUMP_PROFILES, DatabaseDumper
from mysqldump_extended.errors import DumpError
from mysqldump_extended.models import DumpKind, ErrorPolicy
from mysqldump_extended.runner import CommandRunner


def options_for(kind):
    return next(p.options for p in DUMP_PROFILES if p.kind is kind)


class TestDumpProfiles:
    """Tests for the dump profile table."""

    def test_order(self):
        """Test profiles run structure, data, triggers, events, routines."""
        assert [p.kind for p in DUMP_PROFILES] == [
            DumpKind.STRUCTURE, DumpKind.DATA, DumpKind.TRIGGERS,
            DumpKind.EVENTS, DumpKind.ROUTINES,
        ]

    def test_structure_has_no_rows(self):
        """Test the structure profile excludes data and triggers."""
        options = options_for(DumpKind.STRUCTURE)
        assert "--no-data" in options
        assert "--skip-triggers" in options
        assert "--set-charset" in options

    def test_data_has_no_create_statements(self):
        """Test the data profile excludes CREATE statements."""
        options = options_for(DumpKind.DATA)
        assert "--no-create-db" in options
        assert "--no-create-info" in options
        assert "--hex-blob" in options
        assert "--force" in options
        assert "--skip-triggers" in options

    @pytest.mark.parametrize("kind,flag", [
        (DumpKind.TRIGGERS, "--triggers"),
        (DumpKind.EVENTS, "--events"),
        (DumpKind.ROUTINES, "--routines"),
    ])
    def test_object_profiles(self, kind, flag):
        """Test object profiles include only their object kind."""
        options = options_for(kind)
        assert flag in options
        assert "--no-data" in options
        assert "--no-create-info" in options
        assert "--create-options" in options
        if kind is not DumpKind.TRIGGERS:
            assert "--skip-triggers" in options

    def test_arguments(self, profile):
        """Test connection options come first and the database last."""
        args = DUMP_PROFILES[0].arguments(profile, "app")
        assert args[:5] == profile.client_options()
        assert args[-2:] == ["--databases", "app"]


class TestDumpDatabase:
    """Tests for DatabaseDumper.dump_database."""

    def test_five_artifacts(self, fake_runner, profile, tmp_path):
        """Test one database produces five named, non-empty files."""
        dumper = DatabaseDumper(fake_runner, profile)

        result = dumper.dump_database("app", tmp_path, RunContext())

        names = sorted(p.name for p in tmp_path.iterdir())
        assert names == [
            "app.1-DB+TABLES+VIEWS.sql",
            "app.2-DATA.sql",
            "app.3-TRIGGERS.sql",
            "app.4-EVENTS.sql",
            "app.5-ROUTINES.sql",
        ]
        assert result.success
        assert len(result.artifacts) == 5
        assert all(a.path.stat().st_size > 0 for a in result.artifacts)
        assert (tmp_path / "app.1-DB+TABLES+VIEWS.sql").read_text() == "-- structure of app\n"
        assert (tmp_path / "app.2-DATA.sql").read_text() == "-- data of app\n"

    def test_profiles_run_in_order(self, fake_runner, profile, tmp_path):
        """Test mysqldump is called once per profile, in order."""
        DatabaseDumper(fake_runner, profile).dump_database("app", tmp_path, RunContext())

        calls = fake_runner.calls_for("mysqldump")
        assert [c.stdout_path.name for c in calls] == [
            DumpKind.STRUCTURE.file_name("app"),
            DumpKind.DATA.file_name("app"),
            DumpKind.TRIGGERS.file_name("app"),
            DumpKind.EVENTS.file_name("app"),
            DumpKind.ROUTINES.file_name("app"),
        ]

    def test_elapsed_measured(self, fake_runner, profile, tmp_path):
        """Test elapsed time is recorded."""
        result = DatabaseDumper(fake_runner, profile).dump_database("app", tmp_path, RunContext())
        assert result.elapsed >= 0.0

    def test_failure_continues(self, fake_runner, profile, tmp_path):
        """Test a failing profile does not stop the remaining ones."""
        fake_runner.fail_dump("app", "data")
        context = RunContext()

        result = DatabaseDumper(fake_runner, profile).dump_database("app", tmp_path, context)

        assert len(fake_runner.calls_for("mysqldump")) == 5
        assert [a.kind for a in result.artifacts] == [
            DumpKind.STRUCTURE, DumpKind.TRIGGERS, DumpKind.EVENTS, DumpKind.ROUTINES,
        ]
        assert not result.success
        assert len(context.errors) == 1
        assert context.errors[0]["database"] == "app"
        assert context.errors[0]["kind"] == "data"

    def test_failure_aborts(self, fake_runner, profile, tmp_path):
        """Test the abort policy stops at the first failing profile."""
        fake_runner.fail_dump("app", "data")
        context = RunContext(error_policy=ErrorPolicy.ABORT)

        with pytest.raises(DumpError) as exc_info:
            DatabaseDumper(fake_runner, profile).dump_database("app", tmp_path, context)

        assert exc_info.value.database == "app"
        assert exc_info.value.kind == "data"
        assert len(fake_runner.calls_for("mysqldump")) == 2


class TestDumpProfile:
    """Tests for DatabaseDumper.dump_profile."""

    def test_error_carries_stderr(self, fake_runner, profile, tmp_path):
        """Test the DumpError message includes the tool's stderr."""
        fake_runner.fail_dump("app", "structure")

        with pytest.raises(DumpError) as exc_info:
            DatabaseDumper(fake_runner, profile).dump_profile("app", DUMP_PROFILES[0], tmp_path)

        assert "Got error" in str(exc_info.value)

    def test_existing_file_not_overwritten(self, profile, tmp_path):
        """Test an artifact is never written twice."""
        existing = tmp_path / "app.1-DB+TABLES+VIEWS.sql"
        existing.write_text("keep")

        runner = CommandRunner({"mysqldump": "/nonexistent/mysqldump"})
        with pytest.raises(DumpError):
            DatabaseDumper(runner, profile).dump_profile("app", DUMP_PROFILES[0], tmp_path)

        assert existing.read_text() == "keep"
