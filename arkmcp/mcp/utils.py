"""File listing, searching and formatting helpers behind the MCP tools."""

from __future__ import annotations

import fnmatch
import json
import os
import re
import stat
from collections import Counter
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from itertools import islice
from typing import Any

from arkmcp.mcp.options import Option, _extension

ARKLITE_NEWLINE = "␤"
_MASK = "********"
_COMMENT_MARK = "\ue000"


def is_binary(data: bytes) -> bool:
    """Whether ``data`` holds a NUL byte or is not valid UTF-8."""
    if b"\x00" in data:
        return True
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return True
    return False


@dataclass(frozen=True)
class _CommentSyntax:
    line: tuple[str, ...] = ()
    block: tuple[tuple[str, str], ...] = ()
    quotes: tuple[str, ...] = ('"', "'")
    triple_quotes: bool = False

    def pattern(self) -> re.Pattern[str]:
        keep = [r"\A#![^\n]*"]
        if self.triple_quotes:
            keep += [r'"""[\s\S]*?"""', r"'''[\s\S]*?'''"]
        for quote in self.quotes:
            q = re.escape(quote)
            if quote == "`":
                keep.append(r"`[^`]*`")
            else:
                keep.append(rf"{q}(?:\\.|[^{q}\\\n])*{q}")
        drop = [rf"{re.escape(start)}[\s\S]*?{re.escape(end)}" for start, end in self.block]
        drop += [rf"{re.escape(token)}[^\n]*" for token in self.line]
        return re.compile(f"(?P<keep>{'|'.join(keep)})|(?P<drop>{'|'.join(drop)})")


_C_STYLE = _CommentSyntax(line=("//",), block=(("/*", "*/"),), quotes=('"', "'", "`"))
_HASH = _CommentSyntax(line=("#",), triple_quotes=True)
_SQL = _CommentSyntax(line=("--",), block=(("/*", "*/"),))
_LUA = _CommentSyntax(line=("--",), block=(("--[[", "]]"),))
_HASKELL = _CommentSyntax(line=("--",), block=(("{-", "-}"),), quotes=('"',))
_MARKUP = _CommentSyntax(block=(("<!--", "-->"),), quotes=())
_CSS = _CommentSyntax(block=(("/*", "*/"),))
_PHP = _CommentSyntax(line=("//", "#"), block=(("/*", "*/"),))
_LISP = _CommentSyntax(line=(";",), quotes=('"',))
_PERCENT = _CommentSyntax(line=("%",), quotes=('"',))

_COMMENT_SYNTAX: dict[str, _CommentSyntax] = {
    **dict.fromkeys(
        (
            "c", "cpp", "csharp", "go", "java", "javascript", "jsx", "typescript",
            "tsx", "kotlin", "scala", "swift", "rust", "dart", "groovy",
            "objectivec", "scss", "less", "actionscript",
        ),
        _C_STYLE,
    ),
    **dict.fromkeys(
        (
            "python", "ruby", "bash", "perl", "r", "yaml", "toml", "makefile",
            "dockerfile", "cmake", "powershell",
        ),
        _HASH,
    ),
    **dict.fromkeys(("html", "xml", "vue", "markdown"), _MARKUP),
    **dict.fromkeys(("clojure", "lisp", "emacs-lisp"), _LISP),
    "sql": _SQL,
    "lua": _LUA,
    "haskell": _HASKELL,
    "css": _CSS,
    "php": _PHP,
    "erlang": _PERCENT,
}


def delete_comments(data: bytes, path: str) -> bytes:
    """Remove comments from source text, choosing the syntax by file name.

    Lines that held only a comment are dropped; unknown languages pass unchanged.
    """
    syntax = _COMMENT_SYNTAX.get(detect_language(path))
    if syntax is None:
        return data
    text = data.decode("utf-8", errors="surrogateescape")

    def replace(match: re.Match[str]) -> str:
        if match.lastgroup == "keep":
            return match.group()
        return _COMMENT_MARK + ("\n" + _COMMENT_MARK) * match.group().count("\n")

    marked = syntax.pattern().sub(replace, text)
    kept = []
    for line in marked.split("\n"):
        if _COMMENT_MARK in line:
            line = line.replace(_COMMENT_MARK, "").rstrip()
            if not line.strip():
                continue
        kept.append(line)
    return "\n".join(kept).encode("utf-8", errors="surrogateescape")


_SECRET_PATTERNS = (
    re.compile(
        r"-----BEGIN [A-Z ]*PRIVATE KEY-----[\s\S]*?-----END [A-Z ]*PRIVATE KEY-----"
    ),
    re.compile(r"\bAKIA[0-9A-Z]{16}\b"),
    re.compile(r"\bgh[pousr]_[A-Za-z0-9]{36,}\b"),
    re.compile(r"\bxox[abprs]-[A-Za-z0-9-]{10,}"),
)
_SECRET_ASSIGNMENT = re.compile(
    r"(?i)(?P<key>\b[\w.-]*(?:password|passwd|secret|token|api[_-]?key|access[_-]?key)[\w.-]*)"
    r"(?P<sep>\s*[:=]\s*)(?P<quote>[\"']?)(?P<value>[^\s\"',;]+)(?P=quote)"
)


def _mask_secrets(text: str) -> str:
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(_MASK, text)
    return _SECRET_ASSIGNMENT.sub(
        lambda m: f"{m['key']}{m['sep']}{m['quote']}{_MASK}{m['quote']}", text
    )


@dataclass(frozen=True)
class _IgnoreRule:
    pattern: str
    negated: bool
    dir_only: bool
    anchored: bool

    @classmethod
    def parse(cls, line: str) -> _IgnoreRule | None:
        line = line.rstrip()
        if not line or line.startswith("#"):
            return None
        negated = line.startswith("!")
        if negated:
            line = line[1:]
        dir_only = line.endswith("/")
        line = line.rstrip("/")
        while line.startswith("**/"):
            line = line[3:]
        anchored = "/" in line
        line = line.lstrip("/")
        if not line:
            return None
        return cls(line, negated, dir_only, anchored)

    def matches(self, rel: str, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        target = rel if self.anchored else rel.rsplit("/", 1)[-1]
        return fnmatch.fnmatchcase(target, self.pattern)


@dataclass(frozen=True)
class _GitIgnore:
    rules: tuple[_IgnoreRule, ...] = ()

    @classmethod
    def load(cls, root: str) -> _GitIgnore:
        try:
            with open(os.path.join(root, ".gitignore"), encoding="utf-8", errors="replace") as fh:
                lines = fh.read().splitlines()
        except OSError:
            return cls()
        return cls(tuple(rule for rule in map(_IgnoreRule.parse, lines) if rule is not None))

    def ignores(self, rel: str, is_dir: bool) -> bool:
        ignored = False
        for rule in self.rules:
            if rule.matches(rel, is_dir):
                ignored = not rule.negated
        return ignored


@dataclass(frozen=True)
class _Entry:
    path: str
    name: str
    is_dir: bool
    size: int
    is_root: bool


def _scan(root: str, option: Option) -> Iterator[_Entry]:
    """Walk ``root`` in lexical order, yielding what passes the filters."""
    root = os.path.normpath(root)
    try:
        info = os.lstat(root)
    except OSError:
        return
    use_gitignore = option.allow_gitignore and stat.S_ISDIR(info.st_mode)
    rules = _GitIgnore.load(root) if use_gitignore else _GitIgnore()
    yield from _visit(root, "", info, option, rules)


def _visit(path: str, rel: str, info: os.stat_result, option: Option,
           rules: _GitIgnore) -> Iterator[_Entry]:
    is_dir = stat.S_ISDIR(info.st_mode)
    if not option.allows(path, is_dir):
        return
    if rel and rules.ignores(rel, is_dir):
        return
    yield _Entry(path, os.path.basename(path), is_dir, info.st_size, not rel)
    if not is_dir:
        return
    try:
        names = sorted(os.listdir(path))
    except OSError:
        return
    for name in names:
        child = os.path.join(path, name)
        try:
            child_info = os.lstat(child)
        except OSError:
            continue
        yield from _visit(child, f"{rel}/{name}" if rel else name, child_info, option, rules)


def _read_bytes(path: str) -> bytes | None:
    try:
        with open(path, "rb") as fh:
            return fh.read()
    except OSError:
        return None


def generate_directory_tree_json(path: str) -> str:
    """Return the directory tree under ``path`` as indented JSON."""
    root_info = os.lstat(path)
    option = Option(mask_secrets=False, with_line_number=False)
    nodes: dict[str, dict[str, Any]] = {}
    root_node: dict[str, Any] | None = None
    for entry in _scan(path, option):
        node: dict[str, Any] = {
            "name": entry.name,
            "type": "directory" if entry.is_dir else "file",
        }
        if entry.is_dir:
            node["children"] = []
            nodes[entry.path] = node
        else:
            node["size"] = entry.size
        if root_node is None:
            root_node = node
        else:
            nodes[os.path.dirname(entry.path)]["children"].append(node)
    if root_node is None:
        is_dir = stat.S_ISDIR(root_info.st_mode)
        root_node = {
            "name": os.path.basename(os.path.normpath(path)),
            "type": "directory" if is_dir else "file",
        }
        if is_dir:
            root_node["children"] = []
    return json.dumps(root_node, indent=2, ensure_ascii=False)


def read_and_process_file(path: str, option: Option) -> str:
    """Read a file and apply comment removal, masking and line numbering."""
    with open(path, "rb") as fh:
        data = fh.read()
    if option.skip_non_utf8 and is_binary(data):
        raise ValueError("file is binary or non-UTF8")
    if option.delete_comments:
        data = delete_comments(data, path)
    content = data.decode("utf-8", errors="replace")
    if option.mask_secrets:
        content = _mask_secrets(content)
    if option.with_line_number:
        content = "\n".join(
            f"{number}: {line}" for number, line in enumerate(content.split("\n"), 1)
        )
    return content


def list_filtered_files(path: str, option: Option) -> list[str]:
    """List files under ``path`` that pass the filters, relative to ``path``."""
    files = []
    for entry in _scan(path, option):
        if entry.is_dir:
            continue
        if option.skip_non_utf8:
            data = _read_bytes(entry.path)
            if data is not None and is_binary(data):
                continue
        files.append(os.path.relpath(entry.path, path))
    return files


def _search_hits(path: str, matches: Callable[[str], Any], option: Option) -> Iterator[str]:
    for entry in _scan(path, option):
        if entry.is_dir:
            continue
        data = _read_bytes(entry.path)
        if data is None or is_binary(data):
            continue
        rel = os.path.relpath(entry.path, path)
        for number, line in enumerate(data.decode("utf-8").split("\n"), 1):
            if matches(line):
                yield f"{rel}:{number}:{line}"


def search_in_files(path: str, query: str, is_regex: bool, max_results: int,
                    option: Option) -> str:
    """Return up to ``max_results`` matching lines as ``file:line:text``."""
    if is_regex:
        try:
            matches: Callable[[str], Any] = re.compile(query).search
        except re.error as exc:
            raise ValueError(f"invalid regex pattern: {exc}") from None
    else:
        def matches(line: str) -> bool:
            return query in line
    hits = islice(_search_hits(path, matches, option), max(max_results, 0))
    return "\n".join(hits)


_SPECIAL_NAMES = {
    "dockerfile": "dockerfile",
    "cmakelists.txt": "cmake",
    "build.gradle": "groovy",
    "vagrantfile": "ruby",
}

_KNOWN_LANGUAGE_TAGS = {
    ".abap": "abap", ".ada": "ada", ".ahk": "autohotkey", ".apacheconf": "apache",
    ".applescript": "applescript", ".as": "actionscript", ".bash": "bash",
    ".bat": "bat", ".bf": "brainfuck", ".c": "c", ".h": "c", ".cc": "cpp",
    ".cpp": "cpp", ".cxx": "cpp", ".cs": "csharp", ".clj": "clojure",
    ".cljs": "clojure", ".cmake": "cmake", ".coffee": "coffeescript", ".css": "css",
    ".dart": "dart", ".diff": "diff", ".dockerfile": "dockerfile",
    ".el": "emacs-lisp", ".erl": "erlang", ".go": "go", ".groovy": "groovy",
    ".hs": "haskell", ".html": "html", ".ini": "ini", ".java": "java",
    ".js": "javascript", ".jsx": "jsx", ".json": "json", ".kt": "kotlin",
    ".kts": "kotlin", ".less": "less", ".lisp": "lisp", ".lua": "lua",
    ".md": "markdown", ".markdown": "markdown", ".mkd": "markdown",
    ".m": "objectivec", ".mm": "objectivec", ".php": "php", ".pl": "perl",
    ".ps1": "powershell", ".py": "python", ".r": "r", ".rb": "ruby", ".rs": "rust",
    ".scala": "scala", ".scss": "scss", ".sh": "bash", ".zsh": "bash", ".sql": "sql",
    ".swift": "swift", ".tex": "latex", ".toml": "toml", ".ts": "typescript",
    ".tsx": "tsx", ".vue": "vue", ".vim": "vim", ".xml": "xml", ".yml": "yaml",
    ".yaml": "yaml", ".txt": "text",
}


def detect_language(path: str) -> str:
    """Return a language tag for ``path`` from its name or extension, or ``""``."""
    base = os.path.basename(path).lower()
    if base in _SPECIAL_NAMES:
        return _SPECIAL_NAMES[base]
    if base.startswith("makefile"):
        return "makefile"
    return _KNOWN_LANGUAGE_TAGS.get(_extension(path).lower(), "")


def get_project_stats(path: str, option: Option) -> dict[str, Any]:
    """Count files, directories, bytes, languages and extensions under ``path``."""
    total_files = total_directories = total_size = 0
    languages: Counter[str] = Counter()
    extensions: Counter[str] = Counter()
    for entry in _scan(path, option):
        if entry.is_dir:
            if not entry.is_root:
                total_directories += 1
            continue
        total_files += 1
        total_size += entry.size
        language = detect_language(entry.path)
        if language:
            languages[language] += 1
        ext = _extension(entry.path)
        if ext:
            extensions[ext] += 1
    return {
        "totalFiles": total_files,
        "totalDirectories": total_directories,
        "totalSize": total_size,
        "languageStats": dict(languages),
        "extensionStats": dict(extensions),
    }


def generate_arklite_for_files(paths: list[str], option: Option) -> str:
    """Render the given files in arklite form, one line per file."""
    if paths:
        project = os.path.normpath(os.path.dirname(paths[0]) or ".")
    else:
        project = "Multiple Files"
    parts = [f"# Arklite Format: {project}\n\n", "## File Dump\n"]
    for path in paths:
        try:
            content = read_and_process_file(path, option)
        except (OSError, ValueError) as exc:
            parts.append(f"@{path}\nError: {exc}\n")
            continue
        parts.append(f"@{path}\n{content.replace(chr(10), ARKLITE_NEWLINE)}\n")
    return "".join(parts)