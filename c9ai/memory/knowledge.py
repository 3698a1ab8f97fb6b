"""Local knowledge scanner

Walks project directories and builds a small topic knowledge base from
READMEs, Markdown docs, code comments/docstrings and package.json files.
The first source that yields a topic keeps it.
"""

import ast
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

SUPPORTED_EXTENSIONS = {".md", ".txt", ".rst", ".json", ".js", ".py", ".go", ".java", ".cpp", ".c", ".ts"}
DOC_EXTENSIONS = {".md", ".txt", ".rst"}
CODE_EXTENSIONS = {".js", ".ts", ".py", ".go", ".java"}
IGNORE_PATTERNS = ["node_modules", ".git", "dist", "build", ".DS_Store", "__pycache__", ".venv"]
NON_PROJECT_DIRS = {"src", "docs", "doc", "documentation"}

MIN_DESCRIPTION_LENGTH = 50
MIN_DOC_COMMENT_LENGTH = 100

FALLBACKS = {
    "definition": "${topic} is a concept identified in your local codebase and documentation.",
    "trends": "Based on local analysis: actively maintained with documentation and code examples.",
    "perspectives": "Multiple implementation approaches found in your local projects and documentation.",
    "examples": "Examples and usage patterns identified in your local files and projects.",
}


def topic_name(raw: str) -> str:
    return re.sub(r"[@\-_]+", " ", raw).strip().lower()


class KnowledgeScanner:
    """Builds {topics: {...}, fallbacks: {...}} from local files"""

    def __init__(self, max_depth: int = 3, ignore_patterns: Optional[List[str]] = None):
        self.max_depth = max_depth
        self.ignore_patterns = ignore_patterns or IGNORE_PATTERNS
        self.knowledge_base: Dict[str, Any] = {"topics": {}, "fallbacks": {}}
        self.stats = {"files_scanned": 0, "topics_extracted": 0, "directories": 0}

    def scan(self, directories: Iterable[Path]) -> Dict[str, Any]:
        print("🔍 Starting knowledge base scan...")
        for directory in directories:
            directory = Path(directory).expanduser()
            if directory.is_dir():
                print(f"📁 Scanning: {directory}")
                self._scan_directory(directory, 0)
            else:
                print(f"⚠️  Directory not found: {directory}")

        self.knowledge_base["fallbacks"] = dict(FALLBACKS)
        print("\n✅ Knowledge extraction complete:")
        print(f"   📁 Directories scanned: {self.stats['directories']}")
        print(f"   📄 Files processed: {self.stats['files_scanned']}")
        print(f"   🧠 Topics extracted: {self.stats['topics_extracted']}")
        return self.knowledge_base

    def save(self, output_path: Path):
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(self.knowledge_base, f, indent=2)
        print(f"💾 Knowledge base saved to: {output_path}")

    def _ignored(self, name: str) -> bool:
        return any(pattern in name for pattern in self.ignore_patterns)

    def _scan_directory(self, directory: Path, depth: int):
        if depth > self.max_depth:
            return
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            print(f"⚠️  Error scanning {directory}: {e}")
            return

        self.stats["directories"] += 1
        for entry in entries:
            if self._ignored(entry.name):
                continue
            if entry.is_dir():
                self._scan_directory(entry, depth + 1)
            elif entry.is_file():
                self._scan_file(entry)

    def _scan_file(self, path: Path):
        ext = path.suffix.lower()
        name = path.name.lower()
        if "readme" not in name and ext not in SUPPORTED_EXTENSIONS:
            return

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logging.debug(f"Could not read {path}: {e}")
            return

        self.stats["files_scanned"] += 1
        if "readme" in name:
            self.extract_from_readme(path, content)
        elif ext == ".md":
            self.extract_from_markdown(path, content)
        elif ext in CODE_EXTENSIONS:
            self.extract_from_code(path, content)
        elif ext == ".json" and "package" in name:
            self.extract_from_package_json(path, content)

    def add_topic(self, topic: str, knowledge: Dict[str, str]):
        if topic and topic not in self.knowledge_base["topics"]:
            self.knowledge_base["topics"][topic] = knowledge
            self.stats["topics_extracted"] += 1
            print(f"📝 Extracted: {topic}")

    @staticmethod
    def project_name(path: Path) -> Optional[str]:
        for part in reversed(path.parent.parts):
            if part and part.lower() not in NON_PROJECT_DIRS and part != path.anchor:
                return part
        return None

    def extract_from_readme(self, path: Path, content: str):
        project = self.project_name(path)
        if not project:
            return

        lines = [line.strip() for line in content.splitlines() if line.strip()]
        description = ""
        features: List[str] = []
        examples: List[str] = []

        i = 0
        while i < len(lines):
            line = lines[i]
            if line.startswith("#"):
                heading = line.lower()
                if "feature" in heading or "what" in heading:
                    for follow in lines[i + 1:i + 10]:
                        if follow.startswith("#"):
                            break
                        if follow.startswith(("-", "*")):
                            features.append(follow[1:].strip())
            elif line.startswith("```"):
                block = []
                j = i + 1
                while j < len(lines) and not lines[j].startswith("```"):
                    block.append(lines[j])
                    j += 1
                if 0 < len(block) < 10:
                    examples.append("\n".join(block))
                i = j
            elif not description and len(line) > MIN_DESCRIPTION_LENGTH:
                description = line
            i += 1

        if not description:
            return

        topic = topic_name(project)
        self.add_topic(topic, {
            "definition": description,
            "trends": f"Based on project analysis: active development with {len(features)} key features",
            "perspectives": f"Open source project with community contributions. Project focuses on {topic} implementation.",
            "examples": " | ".join(examples) if examples else f"Implementation examples available in {path.parent.name} project",
            "source": str(path),
        })

    def extract_from_markdown(self, path: Path, content: str):
        sections: Dict[str, str] = {}
        current = None
        for line in content.splitlines():
            if line.startswith("#"):
                current = re.sub(r"^#+\s*", "", line).strip().lower()
                sections[current] = ""
            elif current is not None and line.strip():
                sections[current] += line.strip() + " "

        first = next(iter(sections.values()), "")[:200]
        definition = (sections.get("overview") or sections.get("introduction")
                      or sections.get("description") or first).strip()
        if len(definition) <= 30:
            return

        self.add_topic(topic_name(path.stem), {
            "definition": definition,
            "trends": (sections.get("trends") or sections.get("updates") or sections.get("changelog")
                       or "Documentation maintained and updated regularly").strip(),
            "perspectives": (sections.get("considerations") or sections.get("notes")
                             or "Various implementation approaches documented").strip(),
            "examples": (sections.get("examples") or sections.get("usage") or sections.get("demo")
                         or "Examples and usage patterns available in documentation").strip(),
            "source": str(path),
        })

    def extract_from_code(self, path: Path, content: str):
        ext = path.suffix.lower()
        doc_comments = [c for c in self.extract_comments(content, ext) if len(c) > MIN_DOC_COMMENT_LENGTH]
        if not doc_comments:
            return

        language = ext.lstrip(".")
        self.add_topic(topic_name(path.stem), {
            "definition": doc_comments[0][:300],
            "trends": f"Active {language} development with inline documentation",
            "perspectives": f"Technical implementation in {language} programming language",
            "examples": f"Code examples available in {path.name}",
            "source": str(path),
        })

    @staticmethod
    def extract_comments(content: str, ext: str) -> List[str]:
        comments: List[str] = []
        if ext == ".py":
            try:
                tree = ast.parse(content)
            except (SyntaxError, ValueError):
                tree = None
            if tree is not None:
                for node in ast.walk(tree):
                    if isinstance(node, (ast.Module, ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
                        doc = ast.get_docstring(node)
                        if doc:
                            comments.append(" ".join(doc.split()))
            comments.extend(line.strip()[1:].strip() for line in content.splitlines() if line.strip().startswith("#"))
        else:
            for block in re.findall(r"/\*(.*?)\*/", content, flags=re.DOTALL):
                comments.append(" ".join(re.sub(r"^\s*\*+", "", line).strip() for line in block.splitlines()).strip())
            comments.extend(line.strip()[2:].strip() for line in content.splitlines() if line.strip().startswith("//"))
        return [c for c in comments if len(c) > 10]

    def extract_from_package_json(self, path: Path, content: str):
        try:
            package = json.loads(content)
        except json.JSONDecodeError:
            return
        if not isinstance(package, dict) or not package.get("name") or not package.get("description"):
            return

        topic = topic_name(package["name"])
        scripts = package.get("scripts") or {}
        self.add_topic(topic, {
            "definition": package["description"],
            "trends": f"NPM package with {len(package.get('dependencies') or {})} dependencies",
            "perspectives": f"JavaScript/Node.js package for {topic} functionality",
            "examples": f"Available scripts: {', '.join(scripts)}" if scripts else "Package implementation available",
            "source": str(path),
        })
