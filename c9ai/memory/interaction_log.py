"""Daily interaction log and usage analytics

Each day gets logs/YYYY-MM-DD.json holding a JSON array of
{timestamp, model, prompt, session}. Entries are appended by rewriting
the whole file.
"""

import os
import json
import logging
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


class InteractionLog:
    """Append-by-rewrite JSON log of prompts sent to models"""

    def __init__(self, logs_dir: Path):
        self.logs_dir = Path(logs_dir)

    def _file_for(self, when: datetime) -> Path:
        return self.logs_dir / f"{when.strftime('%Y-%m-%d')}.json"

    def log(self, model: str, prompt: str, when: Optional[datetime] = None):
        """Record one interaction. Logging failures never interrupt the user."""
        when = when or datetime.now()
        log_file = self._file_for(when)
        entry = {
            "timestamp": when.isoformat(),
            "model": model,
            "prompt": prompt,
            "session": os.getpid(),
        }
        try:
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            entries = self._read(log_file)
            entries.append(entry)
            with open(log_file, 'w') as f:
                json.dump(entries, f, indent=2)
        except OSError as e:
            logging.error(f"Could not write interaction log {log_file}: {e}")

    @staticmethod
    def _read(log_file: Path) -> List[Dict[str, Any]]:
        if not log_file.exists():
            return []
        try:
            with open(log_file, 'r') as f:
                data = json.load(f)
            return data if isinstance(data, list) else []
        except (OSError, json.JSONDecodeError) as e:
            logging.error(f"Corrupt interaction log {log_file}: {e}")
            return []

    def daily_files(self) -> List[Path]:
        if not self.logs_dir.exists():
            return []
        return sorted(p for p in self.logs_dir.glob("????-??-??.json"))

    def summary(self) -> Dict[str, Any]:
        """Counts across all daily logs"""
        by_model: Counter = Counter()
        total = 0
        last = None
        files = self.daily_files()
        for log_file in files:
            for entry in self._read(log_file):
                total += 1
                by_model[entry.get("model", "unknown")] += 1
                last = entry.get("timestamp", last)
        return {
            "days": len(files),
            "total": total,
            "by_model": dict(by_model),
            "last_activity": last,
        }

    def show_analytics(self, current_model: str):
        stats = self.summary()
        print("\n📊 C9 AI Analytics")
        print("=" * 40)
        print(f"Days with activity: {stats['days']}")
        print(f"Total prompts: {stats['total']}")
        print(f"Current model: {current_model.upper()}")
        if stats["by_model"]:
            print("\nPrompts by model:")
            for model, count in sorted(stats["by_model"].items(), key=lambda item: -item[1]):
                print(f"  • {model}: {count}")
        if stats["last_activity"]:
            print(f"\nLast activity: {stats['last_activity']}")
        else:
            print("\n💡 No interactions logged yet")
