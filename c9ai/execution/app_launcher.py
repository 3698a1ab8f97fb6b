"""Self-learning application launcher

Aliases ("excel", "calc") map to a per-OS executable. When the default is
missing, alternatives are tried in order and the first one that works is
remembered, so the next lookup goes straight to it.
"""

import json
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional

from ..config.settings import PACKAGE_CONFIG_DIR
from ..core.errors import CommandFailed
from .platform_ops import PlatformOps
from .shell import CommandRunner


def load_default_applications() -> Dict[str, Any]:
    with open(PACKAGE_CONFIG_DIR / "apps.yaml", 'r') as f:
        data = yaml.safe_load(f) or {}
    return data.get("applications", {})


class AppLauncher:
    """Resolve and launch applications by alias"""

    def __init__(self, mappings_file: Path, ops: PlatformOps, runner: CommandRunner):
        self.mappings_file = Path(mappings_file)
        self.ops = ops
        self.runner = runner
        self.data = self._load()

    def _load(self) -> Dict[str, Any]:
        data = {
            "applications": load_default_applications(),
            "learning": {"successful_mappings": {}, "failed_attempts": {}},
        }
        if self.mappings_file.exists():
            try:
                with open(self.mappings_file, 'r') as f:
                    saved = json.load(f)
                data["applications"].update(saved.get("applications", {}))
                data["learning"].update(saved.get("learning", {}))
            except Exception as e:
                logging.error(f"Error loading app mappings: {e}")
        return data

    def _save(self):
        try:
            self.mappings_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.mappings_file, 'w') as f:
                json.dump(self.data, f, indent=2)
        except Exception as e:
            logging.error(f"Error saving app mappings: {e}")

    @property
    def _learned(self) -> Dict[str, str]:
        return self.data["learning"]["successful_mappings"].setdefault(self.ops.family, {})

    @property
    def _failed(self) -> Dict[str, List[str]]:
        return self.data["learning"]["failed_attempts"].setdefault(self.ops.family, {})

    def lookup(self, alias: str) -> Optional[str]:
        """Executable for an alias without checking availability: learned first, then default"""
        alias = alias.lower().strip()
        if alias in self._learned:
            return self._learned[alias]
        entry = self.data["applications"].get(alias, {})
        return entry.get(self.ops.family)

    def candidates(self, alias: str) -> List[str]:
        alias = alias.lower().strip()
        if alias in self._learned:
            return [self._learned[alias]]

        entry = self.data["applications"].get(alias)
        if not entry:
            return [alias]

        ordered = []
        default = entry.get(self.ops.family)
        if default:
            ordered.append(default)
        for alt in entry.get("alternatives", {}).get(self.ops.family, []):
            if alt not in ordered:
                ordered.append(alt)
        return ordered or [alias]

    def learn(self, alias: str, executable: str):
        alias = alias.lower().strip()
        self._learned[alias] = executable
        self._save()
        logging.info(f"Learned mapping {alias} -> {executable} ({self.ops.family})")

    def _record_failure(self, alias: str, executable: str):
        attempts = self._failed.setdefault(alias.lower().strip(), [])
        if executable not in attempts:
            attempts.append(executable)

    def _launch(self, alias_key: str, executable: str) -> bool:
        try:
            self.runner.run(self.ops.launch_app_command(executable), capture=True)
            return True
        except CommandFailed as e:
            logging.warning(f"Launching {executable} failed: {e}")
            self._record_failure(alias_key, executable)
            return False

    def open_application(self, alias: str) -> str:
        """Launch an application by alias and return the executable used"""
        alias_key = alias.lower().strip()

        # Learned mappings are launched without checking; a stale one is forgotten
        learned = self._learned.get(alias_key)
        if learned is not None:
            if self._launch(alias_key, learned):
                self._save()
                return learned
            logging.warning(f"Learned mapping {alias_key} -> {learned} failed, forgetting it")
            del self._learned[alias_key]

        candidates = self.candidates(alias_key)
        for index, executable in enumerate(candidates):
            if not self.ops.app_available(executable):
                self._record_failure(alias_key, executable)
                continue
            if not self._launch(alias_key, executable):
                continue

            if index > 0:
                self.learn(alias_key, executable)
            else:
                self._save()
            return executable

        self._save()
        raise CommandFailed(1, f"Could not open '{alias}'. Tried: {', '.join(candidates)}")
