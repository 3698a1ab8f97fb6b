"""Unit Tests for the self-learning Application Launcher"""

import json
import pytest
from unittest.mock import MagicMock

from c9ai.core.errors import CommandFailed
from c9ai.execution.app_launcher import AppLauncher
from c9ai.execution.platform_ops import LinuxOps, MacOps, WindowsOps


class FakeLinuxOps(LinuxOps):
    """LinuxOps with a fixed set of installed executables"""

    def __init__(self, installed):
        self.installed = set(installed)
        self.checked = []

    def app_available(self, executable: str) -> bool:
        self.checked.append(executable)
        return executable in self.installed


@pytest.fixture
def runner():
    runner = MagicMock()
    runner.run.return_value = ""
    return runner


@pytest.fixture
def mappings_file(tmp_path):
    return tmp_path / "app_mappings.json"


class TestLookup:
    def test_default_mapping(self, runner, mappings_file):
        launcher = AppLauncher(mappings_file, FakeLinuxOps([]), runner)
        assert launcher.lookup("excel") == "libreoffice --calc"
        assert launcher.lookup("Excel ") == "libreoffice --calc"

    def test_candidates_order(self, runner, mappings_file):
        launcher = AppLauncher(mappings_file, FakeLinuxOps([]), runner)
        assert launcher.candidates("calc") == ["calc", "gnome-calculator", "kcalc", "galculator"]

    def test_unknown_alias_is_its_own_candidate(self, runner, mappings_file):
        launcher = AppLauncher(mappings_file, FakeLinuxOps([]), runner)
        assert launcher.candidates("blender") == ["blender"]


class TestLearning:
    def test_alternative_is_learned_and_persisted(self, runner, mappings_file):
        """Test that the first working alternative is remembered"""
        ops = FakeLinuxOps(["gnome-calculator"])
        launcher = AppLauncher(mappings_file, ops, runner)

        assert launcher.open_application("calc") == "gnome-calculator"
        runner.run.assert_called_once_with("nohup gnome-calculator >/dev/null 2>&1 &", capture=True)

        saved = json.loads(mappings_file.read_text())
        assert saved["learning"]["successful_mappings"]["linux"]["calc"] == "gnome-calculator"
        assert saved["learning"]["failed_attempts"]["linux"]["calc"] == ["calc"]

        reloaded = AppLauncher(mappings_file, FakeLinuxOps([]), runner)
        assert reloaded.lookup("calc") == "gnome-calculator"

    def test_learned_mapping_skips_availability_check(self, runner, mappings_file):
        AppLauncher(mappings_file, FakeLinuxOps(["gnome-calculator"]), runner).open_application("calc")

        ops = FakeLinuxOps([])
        launcher = AppLauncher(mappings_file, ops, runner)
        assert launcher.open_application("calc") == "gnome-calculator"
        assert ops.checked == []

    def test_default_is_not_learned(self, runner, mappings_file):
        launcher = AppLauncher(mappings_file, FakeLinuxOps(["calc"]), runner)
        assert launcher.open_application("calc") == "calc"
        assert "calc" not in launcher.data["learning"]["successful_mappings"].get("linux", {})

    def test_stale_learned_mapping_is_forgotten(self, runner, mappings_file):
        """Test that a learned mapping that fails falls back to the candidate list"""
        AppLauncher(mappings_file, FakeLinuxOps(["gnome-calculator"]), runner).open_application("calc")

        runner.run.reset_mock()
        runner.run.side_effect = [CommandFailed(1, "gone"), ""]
        launcher = AppLauncher(mappings_file, FakeLinuxOps(["kcalc"]), runner)

        assert launcher.open_application("calc") == "kcalc"
        assert runner.run.call_count == 2
        saved = json.loads(mappings_file.read_text())
        assert saved["learning"]["successful_mappings"]["linux"]["calc"] == "kcalc"
        assert "gnome-calculator" in saved["learning"]["failed_attempts"]["linux"]["calc"]

    def test_launch_failure_tries_next(self, runner, mappings_file):
        """Test that an executable that exists but fails to start is skipped"""
        runner.run.side_effect = [CommandFailed(1, "boom"), ""]
        launcher = AppLauncher(mappings_file, FakeLinuxOps(["calc", "gnome-calculator"]), runner)
        assert launcher.open_application("calc") == "gnome-calculator"
        assert runner.run.call_count == 2


class TestFailures:
    def test_unknown_alias_launched_verbatim(self, runner, mappings_file):
        ops = FakeLinuxOps(["blender"])
        launcher = AppLauncher(mappings_file, ops, runner)
        assert launcher.open_application("blender") == "blender"
        assert ops.checked == ["blender"]

    def test_missing_unknown_alias_fails(self, runner, mappings_file):
        """Test that an unmapped app that is not installed is reported as a failure"""
        launcher = AppLauncher(mappings_file, FakeLinuxOps([]), runner)
        with pytest.raises(CommandFailed):
            launcher.open_application("definitely_not_an_app_xyz")
        runner.run.assert_not_called()

    def test_shell_metacharacters_never_run(self, runner, mappings_file):
        launcher = AppLauncher(mappings_file, FakeLinuxOps([]), runner)
        with pytest.raises(CommandFailed):
            launcher.open_application("foo; rm -rf ~")
        runner.run.assert_not_called()

    def test_all_candidates_fail(self, runner, mappings_file):
        launcher = AppLauncher(mappings_file, FakeLinuxOps([]), runner)
        with pytest.raises(CommandFailed) as exc_info:
            launcher.open_application("calc")
        assert "Could not open 'calc'" in str(exc_info.value)
        runner.run.assert_not_called()
        assert launcher.data["learning"]["failed_attempts"]["linux"]["calc"] == [
            "calc", "gnome-calculator", "kcalc", "galculator",
        ]


class TestLaunchCommands:
    """Executables are quoted so shell metacharacters stay literal"""

    def test_linux_arguments_quoted(self):
        assert LinuxOps().launch_app_command("libreoffice --calc") == "nohup libreoffice --calc >/dev/null 2>&1 &"
        assert LinuxOps().launch_app_command("foo; rm -rf ~") == "nohup 'foo;' rm -rf '~' >/dev/null 2>&1 &"

    def test_mac_app_name_quoted(self):
        assert MacOps().launch_app_command("Microsoft Excel") == "open -a 'Microsoft Excel'"

    def test_windows_arguments_quoted(self):
        assert WindowsOps().launch_app_command('calc & del "x"') == 'start "" "calc" "&" "del" "x"'
