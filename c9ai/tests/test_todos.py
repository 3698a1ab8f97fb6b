"""Unit Tests for the Todo Manager"""

import pytest
from unittest.mock import MagicMock

from c9ai.core.errors import ScriptNotFound
from c9ai.core.resolution import Action, Failure
from c9ai.features.todos import TodoManager, parse_todo_line, slugify


@pytest.fixture
def todo_file(tmp_path):
    path = tmp_path / "todo.md"
    path.write_text(
        "# My todos\n"
        "- [ ] Write the report\n"
        "- [ ] Compile paper @action: compile research_paper.tex\n"
        "- [x] Done already @action: run old.sh\n"
        "- [ ] Back up @action: run backup.sh\n",
        encoding="utf-8",
    )
    return path


def make_manager(todo_file, model="claude", answers=("all",), **kwargs):
    replies = iter(answers)
    return TodoManager(
        dispatcher=kwargs.pop("dispatcher", MagicMock()),
        current_model=lambda: model,
        todo_path=todo_file,
        ask=lambda prompt: next(replies),
        **kwargs,
    )


class TestParsing:
    def test_plain_todo(self):
        item = parse_todo_line("- [ ] Write the report")
        assert item.task == "Write the report"
        assert not item.actionable

    def test_actionable_todo(self):
        item = parse_todo_line("- [ ] Compile paper @action: compile research_paper.tex")
        assert item.task == "Compile paper"
        assert item.action == Action("compile", "research_paper.tex")

    def test_non_todo_lines(self):
        assert parse_todo_line("# heading") is None
        assert parse_todo_line("- [x] finished") is None

    def test_slugify(self):
        assert slugify("  Learn Rust  Basics ") == "learn_rust_basics"


class TestReading:
    def test_read_open_todos(self, todo_file):
        items = make_manager(todo_file).read()
        assert [i.task for i in items] == ["Write the report", "Compile paper", "Back up"]

    def test_actionable(self, todo_file):
        assert [i.action.verb for i in make_manager(todo_file).actionable()] == ["compile", "run"]

    def test_missing_file(self, tmp_path):
        assert make_manager(tmp_path / "todo.md").read() == []


class TestAdd:
    def test_explicit_action(self, tmp_path):
        path = tmp_path / "todo.md"
        make_manager(path).add("Paper @action: compile paper.tex")
        assert path.read_text() == "- [ ] Paper @action: compile paper.tex\n"

    def test_shorthand_action(self, tmp_path):
        path = tmp_path / "todo.md"
        make_manager(path).add("Paper @compile paper.tex")
        assert parse_todo_line(path.read_text().strip()).action == Action("compile", "paper.tex")

    def test_cloud_model_infers_search(self, tmp_path):
        path = tmp_path / "todo.md"
        line = make_manager(path, model="gemini").add("Learn Rust basics")
        assert line == "- [ ] Learn Rust basics @action: search learn_rust_basics"

    def test_local_model_uses_supervisor(self, tmp_path):
        supervisor = MagicMock()
        supervisor.resolve.return_value = Action("compile", "thesis.tex")
        path = tmp_path / "todo.md"
        line = make_manager(path, model="local", supervisor=supervisor, has_local_model=lambda: True).add("build my thesis")
        assert line == "- [ ] build my thesis @action: compile thesis.tex"

    def test_local_model_without_action(self, tmp_path):
        supervisor = MagicMock()
        supervisor.resolve.return_value = Failure("unrecognized", "no idea")
        path = tmp_path / "todo.md"
        line = make_manager(path, model="local", supervisor=supervisor, has_local_model=lambda: True).add("ponder life")
        assert line == "- [ ] ponder life"

    def test_appends_to_file_without_trailing_newline(self, tmp_path):
        path = tmp_path / "todo.md"
        path.write_text("- [ ] first")
        make_manager(path, model="local").add("second")
        assert path.read_text() == "- [ ] first\n- [ ] second\n"

    def test_empty_task(self, tmp_path):
        assert make_manager(tmp_path / "todo.md").add("  ") is None

    def test_unknown_subcommand_adds_task(self, tmp_path):
        path = tmp_path / "todo.md"
        make_manager(path, model="local").handle(["buy", "milk"])
        assert path.read_text() == "- [ ] buy milk\n"


class TestExecute:
    def test_execute_all(self, todo_file):
        dispatcher = MagicMock()
        dispatcher.execute.return_value = ""
        make_manager(todo_file, dispatcher=dispatcher).execute()
        assert dispatcher.execute.call_args_list[0].args == (Action("compile", "research_paper.tex"),)
        assert dispatcher.execute.call_count == 2

    def test_execute_selection(self, todo_file):
        dispatcher = MagicMock()
        make_manager(todo_file, dispatcher=dispatcher, answers=("2",)).execute()
        dispatcher.execute.assert_called_once_with(Action("run", "backup.sh"))

    def test_failure_asks_cloud_for_help(self, todo_file):
        """Test that a failed todo sends an analysis prompt to the cloud model"""
        dispatcher = MagicMock()
        dispatcher.execute.side_effect = ScriptNotFound("backup.sh")
        cloud = MagicMock()
        make_manager(todo_file, dispatcher=dispatcher, cloud=cloud, answers=("2",)).execute()

        model, prompt = cloud.start_session.call_args.args
        assert model == "claude"
        assert prompt.startswith('My goal was to execute the intent "@run backup.sh"')
        assert "Script not found: backup.sh" in prompt

    def test_failure_on_local_model_stays_local(self, todo_file):
        dispatcher = MagicMock()
        dispatcher.execute.side_effect = ScriptNotFound("backup.sh")
        cloud = MagicMock()
        make_manager(todo_file, model="local", dispatcher=dispatcher, cloud=cloud, answers=("2",)).execute()
        cloud.start_session.assert_not_called()
