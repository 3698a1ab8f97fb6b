"""Platform operations - the single OS boundary

Every OS-specific command string is built here. Callers get one
PlatformOps instance (selected once at startup) and never branch on
sys.platform themselves.
"""

import sys
import shlex
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional


def split_executable(executable: str) -> List[str]:
    """Split an executable spec ("libreoffice --calc") into argv"""
    try:
        return shlex.split(executable)
    except ValueError:
        return executable.split()


class PlatformOps(ABC):
    """Command synthesis for one OS family"""

    family: str = ""
    python_command: str = "python3"
    supports_shell_scripts: bool = True

    @abstractmethod
    def open_command(self, target: str) -> str:
        """Command that opens a file, URL or app with the default handler"""
        raise NotImplementedError

    @abstractmethod
    def list_files_command(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def disk_usage_command(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def process_list_command(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def launch_app_command(self, executable: str) -> str:
        """Command that starts an application without waiting for it"""
        raise NotImplementedError

    def app_available(self, executable: str) -> bool:
        """Check whether an executable can be found on PATH"""
        argv = split_executable(executable)
        return bool(argv) and shutil.which(argv[0]) is not None

    def script_command(self, script_path: Path) -> Optional[str]:
        """Interpreter invocation for a script, by extension.

        Returns None when the script type cannot run on this platform.
        """
        ext = script_path.suffix.lower()
        quoted = f'"{script_path}"'
        if ext == ".sh":
            if not self.supports_shell_scripts:
                return None
            return f"bash {quoted}"
        if ext == ".py":
            return f"{self.python_command} {quoted}"
        if ext == ".js":
            return f"node {quoted}"
        return quoted

    def __repr__(self):
        return f"{self.__class__.__name__}()"


class MacOps(PlatformOps):
    family = "darwin"

    def open_command(self, target: str) -> str:
        return f'open "{target}"'

    def list_files_command(self) -> str:
        return "ls -la"

    def disk_usage_command(self) -> str:
        return "df -h"

    def process_list_command(self) -> str:
        return "ps aux | head -20"

    def launch_app_command(self, executable: str) -> str:
        return f"open -a {shlex.quote(executable)}"

    def app_available(self, executable: str) -> bool:
        for root in ("/Applications", "/System/Applications", str(Path.home() / "Applications")):
            if Path(root, f"{executable}.app").exists():
                return True
        return super().app_available(executable)


class WindowsOps(PlatformOps):
    family = "windows"
    python_command = "python"
    supports_shell_scripts = False

    def open_command(self, target: str) -> str:
        return f'start "" "{target}"'

    def list_files_command(self) -> str:
        return "dir"

    def disk_usage_command(self) -> str:
        return "wmic logicaldisk get size,freespace,caption"

    def process_list_command(self) -> str:
        return "tasklist"

    def launch_app_command(self, executable: str) -> str:
        quoted = " ".join('"' + arg.replace('"', "") + '"' for arg in split_executable(executable))
        return f'start "" {quoted}'

    def script_command(self, script_path: Path) -> Optional[str]:
        if script_path.suffix.lower() == ".bat":
            return f'"{script_path}"'
        return super().script_command(script_path)


class LinuxOps(PlatformOps):
    family = "linux"

    def open_command(self, target: str) -> str:
        return f'xdg-open "{target}"'

    def list_files_command(self) -> str:
        return "ls -la"

    def disk_usage_command(self) -> str:
        return "df -h"

    def process_list_command(self) -> str:
        return "ps aux | head -20"

    def launch_app_command(self, executable: str) -> str:
        quoted = " ".join(shlex.quote(arg) for arg in split_executable(executable))
        return f"nohup {quoted} >/dev/null 2>&1 &"


_FAMILIES = {
    "darwin": MacOps,
    "windows": WindowsOps,
    "linux": LinuxOps,
}


def detect_family(platform: Optional[str] = None) -> str:
    """Map sys.platform (or os.name) onto an OS family key"""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return "windows"
    if platform == "darwin":
        return "darwin"
    return "linux"


def get_platform_ops(family: Optional[str] = None) -> PlatformOps:
    """Create the PlatformOps implementation for an OS family"""
    family = family or detect_family()
    if family not in _FAMILIES:
        raise ValueError(f"Unknown OS family: {family}")
    return _FAMILIES[family]()
