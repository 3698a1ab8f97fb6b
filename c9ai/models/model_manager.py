"""Local model store - list, install, remove and inspect downloaded models

The catalog comes from the packaged defaults (local_models section).
Downloads stream to disk with a tqdm progress bar; a failed download never
leaves a partial file behind.
"""

import logging
import requests
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from tqdm import tqdm

from .session import find_model_files

MODEL_ACTIONS = ["list", "install", "remove", "status"]


def download_file(url: str, output_path: Path, desc: str = "") -> None:
    """Download a file with progress bar. Removes the partial file on failure."""
    try:
        response = requests.get(url, stream=True, timeout=30)
        response.raise_for_status()

        total_size = int(response.headers.get('content-length', 0))

        with open(output_path, 'wb') as f:
            with tqdm(total=total_size, unit='B', unit_scale=True, desc=desc) as pbar:
                for chunk in response.iter_content(chunk_size=8192):
                    f.write(chunk)
                    pbar.update(len(chunk))
    except BaseException:
        if output_path.exists():
            output_path.unlink()
        raise


class ModelManager:
    """Manages model files under the models directory"""

    def __init__(self, models_dir: Path, catalog: Dict[str, Dict[str, Any]], current_model: Callable[[], str] = lambda: "claude"):
        self.models_dir = Path(models_dir)
        self.catalog = catalog
        self.current_model = current_model
        self.models_dir.mkdir(parents=True, exist_ok=True)

    def installed(self) -> List[Path]:
        return find_model_files(self.models_dir)

    def is_installed(self, name: str) -> bool:
        info = self.catalog.get(name)
        return info is not None and (self.models_dir / info["filename"]).exists()

    def handle(self, action: Optional[str] = None, name: Optional[str] = None, confirm: Callable[[str], str] = input):
        """Dispatch a `models` subcommand"""
        action = (action or "list").lower()
        if action == "list":
            self.list()
        elif action == "install":
            self.install(name)
        elif action == "remove":
            self.remove(name, confirm=confirm)
        elif action == "status":
            self.status()
        else:
            print(f"❌ Unknown models action: {action}")
            print(f"💡 Available actions: {', '.join(MODEL_ACTIONS)}")

    def list(self):
        print("\n🤖 Local AI Models")
        installed = self.installed()
        if installed:
            print("\n✅ Installed:")
            for path in installed:
                size_mb = path.stat().st_size / (1024 * 1024)
                print(f"  • {path.name} ({size_mb:.1f} MB)")
        else:
            print("\n⚠️  No models installed")

        print("\n📦 Available:")
        for key, info in self.catalog.items():
            marker = "✅" if self.is_installed(key) else "⬇️ "
            print(f"  {marker} {key:<10} {info['name']} ({info['size']}) - {info.get('description', '')}")
        print("\n💡 Install with: c9ai models install <name>")

    def install(self, name: Optional[str]) -> bool:
        if not name:
            print("❌ Please specify a model to install")
            print(f"💡 Available: {', '.join(self.catalog)}")
            return False

        info = self.catalog.get(name)
        if info is None:
            print(f"❌ Unknown model: {name}")
            print(f"💡 Available: {', '.join(self.catalog)}")
            return False

        target = self.models_dir / info["filename"]
        if target.exists():
            print(f"✅ {info['name']} is already installed")
            return True

        print(f"📥 Downloading {info['name']} ({info['size']})...")
        try:
            download_file(info["url"], target, desc=info["name"])
        except Exception as e:
            logging.error(f"Model download failed: {e}")
            print(f"❌ Download failed: {e}")
            return False

        logging.info(f"Installed model {name} at {target}")
        print(f"✅ {info['name']} installed")
        print("💡 Switch to it with: c9ai switch local")
        return True

    def remove(self, name: Optional[str], confirm: Callable[[str], str] = input) -> int:
        if not name:
            print("❌ Please specify a model to remove")
            return 0

        matches = [p for p in self.installed() if name.lower() in p.name.lower()]
        if not matches:
            print(f"⚠️  Model {name} is not installed")
            return 0

        answer = confirm(f"Remove {', '.join(p.name for p in matches)}? (y/N): ").strip().lower()
        if answer not in ("y", "yes"):
            print("Cancelled")
            return 0

        for path in matches:
            path.unlink()
            logging.info(f"Removed model file {path}")
        print(f"✅ Removed {len(matches)} file(s)")
        return len(matches)

    def status(self):
        installed = self.installed()
        print("\n📊 Local Model Status")
        print(f"Models directory: {self.models_dir}")
        print(f"Current model: {self.current_model().upper()}")

        if not installed:
            print("⚠️  No models installed")
            return

        total = 0
        for path in installed:
            stat = path.stat()
            total += stat.st_size
            modified = datetime.fromtimestamp(stat.st_mtime).strftime("%Y-%m-%d %H:%M")
            print(f"  • {path.name}: {stat.st_size / (1024 * 1024):.1f} MB (modified {modified})")
        print(f"Total: {total / (1024 ** 3):.2f} GB")
