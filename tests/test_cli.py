"""
Tests for the command-line front-end.

The remote API is replaced by the in-memory fake through a patched
``build_dashboard``.
"""

from __future__ import annotations

from pathlib import Path
from unittest import mock

import pytest
import requests
import yaml
from click.testing import CliRunner

from portfolio_admin.cli import check_deps
from portfolio_admin.cli import main as cli
from portfolio_admin.core.dashboard import build_dashboard
from tests.fakes import FakeProjectRepository, make_response


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.dump(
            {
                "api": {"base_url": "http://api.test", "timeout": 1},
                "auth": {"token_file": str(tmp_path / "token")},
                "store": {"snapshot_file": str(tmp_path / "projects.json")},
                "reorder": {"send_full_record": False},
            }
        )
    )
    return path


@pytest.fixture
def session() -> mock.MagicMock:
    s = mock.MagicMock(spec=requests.Session)
    s.headers = {}
    return s


@pytest.fixture
def run(config_file: Path, repository: FakeProjectRepository, session, monkeypatch: pytest.MonkeyPatch):
    def fake_build(config, **kwargs):
        return build_dashboard(config, session=session, repository=repository, **kwargs)

    monkeypatch.setattr(cli, "build_dashboard", fake_build)
    runner = CliRunner()

    def invoke(*args: str):
        return runner.invoke(cli.main, ["--config", str(config_file), *args])

    return invoke


class TestProjectsCommands:
    def test_list(self, run) -> None:
        result = run("projects", "list")
        assert result.exit_code == 0, result.output
        assert "Projects" in result.output
        assert "A" in result.output and "C" in result.output

    def test_move(self, run, repository: FakeProjectRepository) -> None:
        result = run("projects", "move", "1", "3")
        assert result.exit_code == 0, result.output
        assert "Project order updated" in result.output
        assert {pid: p.order for pid, p in repository.projects.items()} == {"a": 3, "b": 1, "c": 2}

    def test_move_same_position(self, run, repository: FakeProjectRepository) -> None:
        result = run("projects", "move", "2", "2")
        assert result.exit_code == 0
        assert "Nothing to change" in result.output
        assert repository.calls_named("update") == []

    def test_move_failure_exits_nonzero(self, run, repository: FakeProjectRepository) -> None:
        repository.fail_updates_for = {"b"}
        result = run("projects", "move", "1", "3")
        assert result.exit_code == 1
        assert "Failed to update project order" in result.output

    def test_add(self, run, repository: FakeProjectRepository) -> None:
        result = run("projects", "add", "--title", "Dashboard", "--tech", "react", "--tech", "vite", "--year", "2024")
        assert result.exit_code == 0, result.output
        created = [p for p in repository.projects.values() if p.title == "Dashboard"][0]
        assert created.order == 4
        assert created.technologies == ["react", "vite"]

    def test_edit_requires_a_field(self, run) -> None:
        result = run("projects", "edit", "a")
        assert result.exit_code == 1
        assert "Nothing to update" in result.output

    def test_edit(self, run, repository: FakeProjectRepository) -> None:
        result = run("projects", "edit", "a", "--status", "featured")
        assert result.exit_code == 0, result.output
        assert repository.projects["a"].status == "featured"

    def test_edit_tags_type_and_category(self, run, repository: FakeProjectRepository) -> None:
        result = run(
            "projects", "edit", "a", "--tech", "svelte", "--tech", "go", "--type", "mobile", "--category", "fullstack"
        )
        assert result.exit_code == 0, result.output
        _, _, patch = repository.calls_named("update")[-1]
        assert patch == {"technologies": ["svelte", "go"], "type": "mobile", "category": "fullstack"}
        assert repository.projects["a"].category == "fullstack"

    def test_remove(self, run, repository: FakeProjectRepository) -> None:
        result = run("projects", "remove", "b", "--yes")
        assert result.exit_code == 0, result.output
        assert "b" not in repository.projects

    def test_list_failure(self, run, repository: FakeProjectRepository) -> None:
        repository.fail_list = True
        result = run("projects", "list")
        assert result.exit_code == 1
        assert "Error fetching projects" in result.output

    def test_normalize(self, run, repository: FakeProjectRepository) -> None:
        repository.projects["c"] = repository.projects["c"].with_order(10)
        result = run("projects", "normalize")
        assert result.exit_code == 0, result.output
        assert repository.projects["c"].order == 3

    def test_snapshot_written_after_command(self, run, tmp_path: Path) -> None:
        run("projects", "list")
        assert (tmp_path / "projects.json").exists()


def request_args(session: mock.MagicMock, index: int = -1):
    args, kwargs = session.request.call_args_list[index]
    return args[0], args[1], kwargs


class TestContentCommands:
    def test_skills_list(self, run, session) -> None:
        session.request.return_value = make_response(200, [{"id": "s1", "name": "Postgres", "icon": "database"}])
        result = run("skills", "list")
        assert result.exit_code == 0, result.output
        assert "Postgres" in result.output

    def test_skills_add(self, run, session) -> None:
        session.request.return_value = make_response(201, {"id": "s2", "name": "Docker", "icon": "cloud"})
        result = run("skills", "add", "--name", "Docker", "--icon", "cloud", "--category", "devops")
        assert result.exit_code == 0, result.output
        method, url, kwargs = request_args(session)
        assert (method, url) == ("POST", "http://api.test/api/skills")
        assert kwargs["json"] == {"name": "Docker", "icon": "cloud", "category": "devops"}

    def test_skills_add_rejects_unknown_icon(self, run, session) -> None:
        result = run("skills", "add", "--name", "Zig", "--icon", "lightning")
        assert result.exit_code == 2
        session.request.assert_not_called()

    def test_skills_edit_keeps_other_fields(self, run, session) -> None:
        session.request.side_effect = [
            make_response(200, [{"id": "s1", "name": "Python", "icon": "terminal", "category": "backend"}]),
            make_response(200, {"id": "s1", "name": "Python", "level": "expert"}),
        ]
        result = run("skills", "edit", "s1", "--level", "expert")
        assert result.exit_code == 0, result.output
        method, url, kwargs = request_args(session)
        assert (method, url) == ("PUT", "http://api.test/api/skills/s1")
        assert kwargs["json"]["level"] == "expert"
        assert kwargs["json"]["icon"] == "terminal"
        assert kwargs["json"]["category"] == "backend"

    def test_skills_edit_unknown(self, run, session) -> None:
        session.request.return_value = make_response(200, [])
        result = run("skills", "edit", "nope", "--level", "expert")
        assert result.exit_code == 1
        assert "Skill not found" in result.output

    def test_skills_remove(self, run, session) -> None:
        session.request.return_value = make_response(204)
        result = run("skills", "remove", "s1", "--yes")
        assert result.exit_code == 0, result.output
        assert request_args(session)[:2] == ("DELETE", "http://api.test/api/skills/s1")

    def test_messages_delete(self, run, session) -> None:
        session.request.return_value = make_response(204)
        result = run("messages", "delete", "m1", "--yes")
        assert result.exit_code == 0, result.output
        assert request_args(session)[:2] == ("DELETE", "http://api.test/api/messages/m1")

    def test_profile_edit(self, run, session) -> None:
        session.request.side_effect = [
            make_response(200, {"user": {"name": "Sam", "email": "sam@example.com", "github": "samdev"}}),
            make_response(200, {"user": {"name": "Sam", "email": "sam@example.com", "about": ["Hi", "Bye"]}}),
        ]
        result = run("profile", "edit", "--about", "Hi", "--about", "Bye")
        assert result.exit_code == 0, result.output
        method, url, kwargs = request_args(session)
        assert (method, url) == ("PUT", "http://api.test/api/auth/profile")
        assert kwargs["json"]["about"] == ["Hi", "Bye"]
        assert kwargs["json"]["github"] == "samdev"

    def test_profile_edit_requires_a_field(self, run, session) -> None:
        result = run("profile", "edit")
        assert result.exit_code == 1
        session.request.assert_not_called()

    def test_cv_delete(self, run, session) -> None:
        session.request.return_value = make_response(204)
        result = run("cv", "delete", "--yes")
        assert result.exit_code == 0, result.output
        assert request_args(session)[:2] == ("DELETE", "http://api.test/api/cv")

    def test_upstream_error_exits_nonzero(self, run, session) -> None:
        session.request.return_value = make_response(500, {"message": "db down"})
        result = run("messages", "list")
        assert result.exit_code == 1
        assert "db down" in result.output


class TestConfigErrors:
    def test_missing_config_file(self) -> None:
        result = CliRunner().invoke(cli.main, ["--config", "/nope.yaml", "projects", "list"])
        assert result.exit_code != 0


class TestCheckDeps:
    def test_all_present(self, capsys) -> None:
        assert check_deps.main([]) == 0
        assert "All dependencies present" in capsys.readouterr().out

    def test_missing_package(self, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        monkeypatch.setitem(check_deps.PACKAGES, "not_a_real_module_xyz", "not-a-real-module")
        assert check_deps.main([]) == 1
        assert "not-a-real-module" in capsys.readouterr().out

    def test_test_extra_listed(self, capsys) -> None:
        assert check_deps.main(["--test"]) == 0
        assert "pytest" in capsys.readouterr().out
