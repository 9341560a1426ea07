"""
charspec/codegen/generator.py -- Schema package -> TypeScript declaration tree.

Pipeline (all-or-nothing, any error aborts the run):

    1. discover_modules   every schema module under the source package,
                          in lexicographic POSIX-path order
    2. extract_schemas    the ``*Schema`` exports of each module, each
                          checked to be a schema-rule and given a type name
    3. render_module      one ``.d.ts`` per module: an exported type plus a
                          declared ``SchemaRule<T>`` constant per export
    4. barrels            ``<dir>/index.d.ts`` and ``<parent>/<dir>.d.ts``
                          re-exporting everything below a directory
    5. entry point        ``index.d.ts`` with the version-keyed character map

Usage::

    from charspec.codegen import GeneratorConfig, generate

    written = generate(GeneratorConfig(out_dir=Path("dist")))
"""

from __future__ import annotations

import fnmatch
import importlib
import logging
import posixpath
import re
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any

from charspec.codegen.errors import SchemaExtractionError, TypeGenerationError
from charspec.codegen.meta import build_doc_comment, doc_lines, read_schema_meta
from charspec.codegen.render import IDENTIFIER, INDENT, TypeRef, TypeRegistry, TypeRenderer, relative_specifier
from charspec.schema import is_schema
from charspec.utils import atomic_write_text

logger = logging.getLogger(__name__)

# ------------------------------------------------------------------
# Constants
# ------------------------------------------------------------------

DEFAULT_PACKAGE = "charspec.types"
DEFAULT_OUT_DIR = Path("dist")

SCHEMA_SUFFIX = "Schema"
OUTPUT_SUFFIX = ".d.ts"
SCHEMA_RULE_MODULE = "schema-rule"

IGNORED_FILE_PATTERNS = ("__init__.py", "conftest.py", "test_*.py", "*_test.py")

# Names that would shadow built-in TypeScript globals.
RESERVED_TYPE_NAMES = frozenset({
    "Uint8Array",
    "File",
    "Blob",
    "ArrayBuffer",
    "Date",
    "Map",
    "Set",
    "Promise",
    "Error",
})

CHARACTER_MODULE = re.compile(r"^v(\d+)/character/character$")

MODULE_HEADER = (
    "// Auto-generated TypeScript declarations from pydantic schemas. DO NOT EDIT.\n"
    "// Regenerate with: charspec-gen"
)
BARREL_HEADER = "// Auto-generated barrel export. DO NOT EDIT."
ENTRY_HEADER = "// Auto-generated entry declarations. DO NOT EDIT."

SCHEMA_RULE_DTS = """\
// Auto-generated schema-rule contract. DO NOT EDIT.

/**
 * A validation rule whose successful result has type `T`.
 * Validation runs in Python (`charspec.validation.validate`); these
 * declarations only describe the validated shapes.
 */
export interface SchemaRule<T> {
    readonly __output?: T;
}
"""


# ------------------------------------------------------------------
# Data
# ------------------------------------------------------------------

@dataclass
class GeneratorConfig:
    """Settings for one generator run.

    Attributes
    ----------
    package : str
        Dotted name of the source package to scan.
    out_dir : Path
        Root of the declaration tree.
    probe_predicates : bool
        Guess the type of opaque custom predicates from sample values.
        Off by default; prefer ``instance_of`` or ``TsType``.
    """

    package: str = DEFAULT_PACKAGE
    out_dir: Path = DEFAULT_OUT_DIR
    probe_predicates: bool = False


@dataclass(frozen=True)
class SchemaEntry:
    type_name: str
    export_name: str
    schema: Any


@dataclass
class SourceModule:
    path: str
    dotted: str
    entries: list[SchemaEntry] = field(default_factory=list)


# ------------------------------------------------------------------
# Discovery and extraction
# ------------------------------------------------------------------

def discover_modules(package: str) -> list[tuple[str, str]]:
    """Return ``(posix_path, dotted_name)`` for every candidate schema module.

    *posix_path* is relative to the package directory, without ``.py``.
    """
    root_module = load_module(package, package)
    locations = getattr(root_module, "__path__", None)
    if not locations:
        raise TypeGenerationError("Source is not a package (no __path__)", package)
    root = Path(list(locations)[0])

    found: dict[str, str] = {}
    for file in root.rglob("*.py"):
        rel = file.relative_to(root)
        if any(part == "__pycache__" or part.startswith(".") for part in rel.parts):
            continue
        if any(fnmatch.fnmatch(file.name, pattern) for pattern in IGNORED_FILE_PATTERNS):
            continue
        posix = rel.with_suffix("").as_posix()
        found[posix] = ".".join([package, *rel.with_suffix("").parts])

    return sorted(found.items())


def load_module(dotted: str, display_path: str) -> ModuleType:
    try:
        return importlib.import_module(dotted)
    except Exception as exc:
        raise TypeGenerationError(f"Failed to import module: {exc}", display_path, cause=exc) from exc


def exported_bindings(module: ModuleType) -> dict[str, Any]:
    """The module's public names: ``__all__`` if defined, else every public
    attribute except classes imported from other modules."""
    names = getattr(module, "__all__", None)
    if names is not None:
        return {name: getattr(module, name) for name in names if hasattr(module, name)}

    bindings = {}
    for name, value in vars(module).items():
        if name.startswith("_"):
            continue
        if isinstance(value, type) and value.__module__ != module.__name__:
            continue
        bindings[name] = value
    return bindings


def derive_type_name(export_name: str) -> str:
    """``CharacterSchema`` -> ``Character``; ``FileSchema`` -> ``FileType``."""
    base = export_name[: -len(SCHEMA_SUFFIX)] if export_name.endswith(SCHEMA_SUFFIX) else export_name
    if not base:
        raise SchemaExtractionError(
            f"Export '{export_name}' leaves an empty type name after removing '{SCHEMA_SUFFIX}'",
            export_name,
        )
    name = base[0].upper() + base[1:]
    if name in RESERVED_TYPE_NAMES:
        name = f"{name}Type"
    if not IDENTIFIER.match(name):
        raise SchemaExtractionError(f"Derived type name '{name}' is not a valid identifier", export_name)
    return name


def extract_schemas(module: ModuleType, display_path: str) -> list[SchemaEntry]:
    """Collect the ``*Schema`` exports of *module*, sorted by export name."""
    entries: list[SchemaEntry] = []
    seen: dict[str, str] = {}

    for export_name, value in sorted(exported_bindings(module).items()):
        if not export_name.endswith(SCHEMA_SUFFIX):
            continue
        if not is_schema(value):
            raise SchemaExtractionError(
                f"Export '{export_name}' in {display_path} ends with '{SCHEMA_SUFFIX}' "
                f"but is not a schema model or SchemaRule (got {type(value).__name__})",
                export_name,
            )
        if isinstance(value, type) and value.__module__ != module.__name__:
            logger.debug("%s: skipping re-exported model %s", display_path, export_name)
            continue

        type_name = derive_type_name(export_name)
        if type_name in seen:
            raise SchemaExtractionError(
                f"Duplicate type name '{type_name}' in {display_path}: "
                f"derived from both '{seen[type_name]}' and '{export_name}'",
                export_name,
            )
        seen[type_name] = export_name
        entries.append(SchemaEntry(type_name=type_name, export_name=export_name, schema=value))

    return entries


# ------------------------------------------------------------------
# Rendering
# ------------------------------------------------------------------

def render_module(source: SourceModule, registry: TypeRegistry, probe_predicates: bool = False) -> str:
    renderer = TypeRenderer(
        source.path,
        registry,
        local_names={entry.type_name for entry in source.entries},
        probe_predicates=probe_predicates,
    )

    body: list[str] = []
    for entry in source.entries:
        ref = TypeRef(entry.type_name, source.path)
        type_text = renderer.render_entry(entry.schema, ref)
        doc = build_doc_comment(doc_lines(read_schema_meta(entry.schema)))

        if doc:
            body.append(doc)
        body.append(f"export type {entry.type_name} = {type_text};")
        body.append("")
        if doc:
            body.append(doc)
        body.append(f"export declare const {entry.export_name}: SchemaRule<{entry.type_name}>;")
        body.append("")

    for name, definition in renderer.drain_auxiliary():
        body.append(f"type {name} = {definition};")
        body.append("")

    out = [MODULE_HEADER, ""]
    out.append(f'import type {{ SchemaRule }} from "{relative_specifier(source.path, SCHEMA_RULE_MODULE)}";')
    out.extend(renderer.import_lines())
    out.append("")
    out.extend(body)
    return "\n".join(out).rstrip() + "\n"


def directory_index(modules: list[str], subdirs: list[str]) -> str:
    lines = [BARREL_HEADER]
    lines.extend(f'export * from "./{name}";' for name in modules)
    lines.extend(f'export * from "./{name}/index";' for name in subdirs)
    return "\n".join(lines) + "\n"


def parent_barrel(folder: str) -> str:
    return f'{BARREL_HEADER}\nexport * from "./{folder}/index";\n'


def main_index(versions: list[tuple[int, str]]) -> str:
    """Entry declarations; *versions* is ``[(version, module_path), ...]`` sorted."""
    lines = [ENTRY_HEADER, f'import type {{ SchemaRule }} from "./{SCHEMA_RULE_MODULE}";']

    if not versions:
        lines += ["", "// No CharacterSchema exports found.", "export {};"]
        return "\n".join(lines) + "\n"

    lines.append("")
    for version, module_path in versions:
        tag = f"CharacterV{version}"
        lines.append(f'import type {{ Character as {tag} }} from "./{module_path}";')
        lines.append(f"export type {{ {tag} }};")
        lines.append(f'export {{ CharacterSchema as {tag}Schema }} from "./{module_path}";')
        lines.append("")

    lines.append("export declare const characterMap: {")
    for version, _ in versions:
        lines.append(f"{INDENT}readonly {version}: SchemaRule<CharacterV{version}>;")
    lines.append("};")
    lines.append("")

    lines.append("export type CharacterMap = {")
    for version, _ in versions:
        lines.append(f'{INDENT}readonly "{version}": CharacterV{version};')
    lines.append("};")
    lines.append("")

    latest = versions[-1][0]
    lines.append("/** The latest character version. */")
    lines.append(f"export type Character = CharacterV{latest};")
    lines.append("export declare const CharacterSchema: SchemaRule<Character>;")
    lines.append("")
    lines.append("export default characterMap;")
    return "\n".join(lines) + "\n"


# ------------------------------------------------------------------
# Run
# ------------------------------------------------------------------

def collect_sources(config: GeneratorConfig) -> list[SourceModule]:
    """Import every schema module and extract its exports."""
    sources = []
    for path, dotted in discover_modules(config.package):
        display_path = f"{path}.py"
        module = load_module(dotted, display_path)
        entries = extract_schemas(module, display_path)
        if not entries:
            logger.info("Skipping %s: no schema exports", display_path)
            continue
        sources.append(SourceModule(path=path, dotted=dotted, entries=entries))
    return sources


def build_registry(sources: list[SourceModule]) -> TypeRegistry:
    registry = TypeRegistry()
    for source in sources:
        for entry in source.entries:
            ref = TypeRef(entry.type_name, source.path)
            if isinstance(entry.schema, type):
                registry.register(entry.schema, ref)
            else:
                registry.register(entry.schema.annotation, ref)
    return registry


def generate(config: GeneratorConfig) -> list[str]:
    """Run the whole pipeline; returns the written files relative to ``out_dir``."""
    logger.info("Scanning package %s", config.package)
    sources = collect_sources(config)
    registry = build_registry(sources)
    out_dir = Path(config.out_dir)

    rendered: dict[str, str] = {f"{SCHEMA_RULE_MODULE}{OUTPUT_SUFFIX}": SCHEMA_RULE_DTS}
    module_paths = set()
    for source in sources:
        try:
            text = render_module(source, registry, config.probe_predicates)
        except SchemaExtractionError as exc:
            raise TypeGenerationError(str(exc), f"{source.path}.py", cause=exc) from exc
        rendered[f"{source.path}{OUTPUT_SUFFIX}"] = text
        module_paths.add(source.path)
        logger.info("Generated: %s%s", source.path, OUTPUT_SUFFIX)

    if "index" in module_paths:
        raise TypeGenerationError("A root module named 'index' would overwrite the entry declarations", "index.py")
    rendered.update(_barrels(module_paths))
    rendered[f"index{OUTPUT_SUFFIX}"] = main_index(_character_versions(sources))

    for rel in sorted(rendered):
        atomic_write_text(out_dir / rel, rendered[rel])

    logger.info("Type generation complete: %d module(s), %d file(s)", len(sources), len(rendered))
    return sorted(rendered)


def _barrels(module_paths: set[str]) -> dict[str, str]:
    dir_modules: dict[str, set[str]] = defaultdict(set)
    dir_subdirs: dict[str, set[str]] = defaultdict(set)

    for path in module_paths:
        directory = posixpath.dirname(path) or "."
        dir_modules[directory].add(posixpath.basename(path))
        while directory != ".":
            parent = posixpath.dirname(directory) or "."
            dir_subdirs[parent].add(posixpath.basename(directory))
            directory = parent

    files: dict[str, str] = {}
    for directory in sorted(set(dir_modules) | set(dir_subdirs)):
        if directory == ".":
            continue
        index_module = posixpath.join(directory, "index")
        parent_module = posixpath.join(posixpath.dirname(directory), posixpath.basename(directory))
        for barrel in (index_module, parent_module):
            if barrel in module_paths:
                raise TypeGenerationError(
                    f"Barrel {barrel}{OUTPUT_SUFFIX} would overwrite the module declaration of the same name",
                    f"{barrel}.py",
                )

        files[f"{index_module}{OUTPUT_SUFFIX}"] = directory_index(
            sorted(dir_modules[directory]),
            sorted(dir_subdirs[directory]),
        )
        files[f"{parent_module}{OUTPUT_SUFFIX}"] = parent_barrel(posixpath.basename(directory))
        logger.info("Generated barrel: %s/index%s", directory, OUTPUT_SUFFIX)
    return files


def _character_versions(sources: list[SourceModule]) -> list[tuple[int, str]]:
    versions = {}
    for source in sources:
        match = CHARACTER_MODULE.match(source.path)
        if match and any(entry.export_name == "CharacterSchema" for entry in source.entries):
            versions[int(match.group(1))] = source.path
    return sorted(versions.items())
