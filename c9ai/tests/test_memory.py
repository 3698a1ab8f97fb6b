"""Unit Tests for the interaction log and the knowledge scanner"""

import json
from datetime import datetime

from c9ai.memory.interaction_log import InteractionLog
from c9ai.memory.knowledge import FALLBACKS, KnowledgeScanner, topic_name


class TestInteractionLog:
    def test_entries_appended_to_daily_file(self, tmp_path):
        log = InteractionLog(tmp_path)
        when = datetime(2024, 3, 1, 9, 30)
        log.log("claude", "explain monads", when=when)
        log.log("local", "list files", when=when)

        entries = json.loads((tmp_path / "2024-03-01.json").read_text())
        assert [e["prompt"] for e in entries] == ["explain monads", "list files"]
        assert entries[0]["timestamp"] == "2024-03-01T09:30:00"
        assert isinstance(entries[0]["session"], int)

    def test_summary(self, tmp_path):
        log = InteractionLog(tmp_path)
        log.log("claude", "a", when=datetime(2024, 3, 1))
        log.log("claude", "b", when=datetime(2024, 3, 2))
        log.log("gemini", "c", when=datetime(2024, 3, 2, 12))
        (tmp_path / "c9ai.log").write_text("not a daily file")

        stats = log.summary()
        assert stats["days"] == 2
        assert stats["total"] == 3
        assert stats["by_model"] == {"claude": 2, "gemini": 1}
        assert stats["last_activity"] == "2024-03-02T12:00:00"

    def test_corrupt_file_is_skipped(self, tmp_path):
        (tmp_path / "2024-03-01.json").write_text("{oops")
        log = InteractionLog(tmp_path)
        assert log.summary()["total"] == 0
        log.log("claude", "again", when=datetime(2024, 3, 1))
        assert log.summary()["total"] == 1

    def test_show_analytics_without_logs(self, tmp_path, capsys):
        InteractionLog(tmp_path / "missing").show_analytics("local")
        out = capsys.readouterr().out
        assert "Current model: LOCAL" in out
        assert "No interactions logged yet" in out


class TestKnowledgeScanner:
    def test_topic_name(self):
        assert topic_name("@acme/widget-kit") == "acme/widget kit"

    def test_scan_project(self, tmp_path):
        project = tmp_path / "weather_app"
        project.mkdir()
        (project / "README.md").write_text(
            "# Weather App\n"
            "A small command line tool that fetches forecasts from public weather services.\n"
            "## Features\n"
            "- hourly forecasts\n"
            "- severe weather alerts\n"
            "```\n"
            "weather --city Oslo\n"
            "```\n"
        )
        (project / "package.json").write_text(json.dumps({
            "name": "forecast-client",
            "description": "HTTP client for forecast APIs",
            "scripts": {"test": "jest", "build": "tsc"},
            "dependencies": {"axios": "^1.0.0"},
        }))
        (project / "parser.py").write_text(
            '"""Parses raw forecast payloads into typed records, normalising units, '
            'timestamps and station identifiers across every supported provider."""\n'
        )
        ignored = project / "node_modules" / "left-pad"
        ignored.mkdir(parents=True)
        (ignored / "package.json").write_text(json.dumps({"name": "left-pad", "description": "pads"}))

        scanner = KnowledgeScanner()
        kb = scanner.scan([tmp_path])

        topics = kb["topics"]
        assert topics["weather app"]["definition"].startswith("A small command line tool")
        assert "2 key features" in topics["weather app"]["trends"]
        assert topics["weather app"]["examples"] == "weather --city Oslo"
        assert topics["forecast client"]["examples"] == "Available scripts: test, build"
        assert topics["parser"]["definition"].startswith("Parses raw forecast payloads")
        assert "left pad" not in topics
        assert kb["fallbacks"] == FALLBACKS

    def test_first_source_keeps_topic(self):
        scanner = KnowledgeScanner()
        scanner.add_topic("git", {"definition": "first"})
        scanner.add_topic("git", {"definition": "second"})
        assert scanner.knowledge_base["topics"]["git"]["definition"] == "first"
        assert scanner.stats["topics_extracted"] == 1

    def test_save(self, tmp_path):
        scanner = KnowledgeScanner()
        scanner.add_topic("git", {"definition": "version control"})
        scanner.save(tmp_path / "kb" / "knowledge_base.json")
        saved = json.loads((tmp_path / "kb" / "knowledge_base.json").read_text())
        assert saved["topics"]["git"]["definition"] == "version control"

    def test_missing_directory(self, tmp_path):
        kb = KnowledgeScanner().scan([tmp_path / "nope"])
        assert kb["topics"] == {}
