"""
Shared pytest fixtures for the charspec test suite.

Provides:
    - project_root: path to the real project root
    - minimal_character_data: the smallest valid v0 character
    - full_character_data: a v0 character exercising every entity
    - make_schema_package: writes a throwaway schema package and returns its name
"""

import sys
import textwrap
import uuid
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Ensure charspec/ is importable regardless of where pytest is invoked
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def project_root():
    """Return the absolute path to the real project root directory."""
    return str(PROJECT_ROOT)


@pytest.fixture
def minimal_character_data():
    """Return the smallest valid v0 character; every optional part is omitted."""
    return {
        "specVersion": 0,
        "id": "c1",
        "name": "Test",
        "description": "desc",
        "prompt": {"description": "p", "lorebook": {}},
        "executables": {},
        "metadata": {},
        "assets": {"assets": []},
    }


@pytest.fixture
def full_character_data():
    """Return a v0 character with lorebook entries, hooks, and a binary asset."""
    return {
        "specVersion": 0,
        "id": "aria-001",
        "name": "Aria",
        "description": "A travelling bard.",
        "avatarUrl": "avatar.png",
        "prompt": {
            "description": "Aria is cheerful and curious.",
            "authorsNote": "Keep answers short.",
            "lorebook": {
                "config": {"tokenLimit": 2048},
                "data": [
                    {
                        "id": "lb-1",
                        "name": "Hometown",
                        "condition": [
                            {"type": "plain_text_match", "text": "hometown"},
                            {"type": "regex_match", "regexPattern": "home\\s*town", "regexFlags": "i"},
                        ],
                        "multipleConditionResolveStrategy": "any",
                        "content": "Aria grew up in Lindale.",
                        "priority": 1.5,
                        "enabled": True,
                    },
                    {
                        "id": "lb-2",
                        "name": "Style",
                        "condition": [{"type": "always"}],
                        "content": "Aria speaks in rhyme.",
                    },
                ],
            },
        },
        "executables": {
            "runtimeSetting": {"mem": 64, "timeout": 5},
            "replaceHooks": {
                "display": [
                    {
                        "input": "lol",
                        "meta": {"type": "string", "caseSensitive": False},
                        "output": "haha",
                    }
                ],
                "input": [
                    {
                        "input": "\\d+",
                        "meta": {"type": "regex", "flag": "g", "priority": -2},
                        "output": "<number>",
                    }
                ],
            },
        },
        "metadata": {"author": "someone", "license": "CC-BY-4.0", "version": "1.0"},
        "assets": {
            "assets": [
                {"mimeType": "image/png", "name": "avatar.png", "data": b"\x89PNG\r\n"},
                {"mimeType": "image/png", "name": "banner.png", "data": "https://example.com/banner.png"},
            ]
        },
    }


@pytest.fixture
def make_schema_package(tmp_path, monkeypatch):
    """Return a factory writing ``{relative_path: source}`` as a fresh package.

    Every call gets a unique package name so imports never collide.
    """

    def factory(files):
        name = f"fixture_schemas_{uuid.uuid4().hex[:8]}"
        root = tmp_path / "src" / name
        root.mkdir(parents=True)
        (root / "__init__.py").write_text("", encoding="utf-8")
        for rel, source in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            for parent in target.relative_to(root).parents:
                init = root / parent / "__init__.py"
                if not init.exists():
                    init.write_text("", encoding="utf-8")
            target.write_text(textwrap.dedent(source), encoding="utf-8")
        monkeypatch.syspath_prepend(str(tmp_path / "src"))
        return name

    return factory
