from __future__ import annotations

import posixpath
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Set

from jinja2 import Environment, FileSystemLoader

from protoc_gen_flow.models import EnumDefinition, MessageDefinition, ResolvedFile
from protoc_gen_flow.options import GeneratorOptions
from protoc_gen_flow.registry import SymbolRegistry

FLAVOR_EXTENSIONS: Dict[str, str] = {
    "flow": ".js",
    "typescript": ".ts",
}

INDEX_STEM = "index"


@dataclass
class GeneratedFile:
    name: str
    content: str


def _get_template_env() -> Environment:
    template_dir = Path(__file__).parent.parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def output_name(proto_name: str, flavor: str) -> str:
    """order/shop.proto -> order/shop.js (or .ts)"""
    return posixpath.splitext(proto_name)[0] + FLAVOR_EXTENSIONS[flavor]


def _module_path(from_file: str, to_file: str) -> str:
    """Relative import specifier from one proto file's output to another's."""
    target = posixpath.splitext(to_file)[0]
    start = posixpath.dirname(from_file) or "."
    rel = posixpath.relpath(target, start)
    if not rel.startswith("."):
        rel = "./" + rel
    return rel


def collect_imports(resolved: ResolvedFile, registry: SymbolRegistry) -> List[Dict]:
    """Group the types a file references from other files by import path."""
    current = resolved.source.name
    by_file: Dict[str, Set[str]] = defaultdict(set)
    for definition in resolved.definitions:
        if not isinstance(definition, MessageDefinition):
            continue
        for field in definition.fields:
            for ref in field.references:
                source = registry.source_file_of(ref)
                if source and source != current:
                    by_file[source].add(ref)

    imports = [
        {"path": _module_path(current, source), "names": sorted(names)}
        for source, names in by_file.items()
    ]
    imports.sort(key=lambda imp: imp["path"])
    return imports


def render_definitions(env: Environment, resolved: ResolvedFile, flavor: str) -> str:
    enum_template = env.get_template(f"{flavor}/enum.j2")
    message_template = env.get_template(f"{flavor}/message.j2")

    chunks: List[str] = []
    for definition in resolved.definitions:
        if isinstance(definition, EnumDefinition):
            chunks.append(enum_template.render(name=definition.name, values=definition.values))
        else:
            fields = [{"name": f.name, "type": f.type} for f in definition.fields]
            chunks.append(message_template.render(name=definition.name, fields=fields))
    return "".join(chunks)


def generate_file(
    resolved: ResolvedFile,
    registry: SymbolRegistry,
    flavor: str,
) -> GeneratedFile:
    """Generate the type module for one proto file, importing foreign types."""
    env = _get_template_env()
    code = env.get_template(f"{flavor}/header.j2").render(sources=[resolved.source.name])
    code += env.get_template("imports.j2").render(imports=collect_imports(resolved, registry))
    code += render_definitions(env, resolved, flavor)
    return GeneratedFile(
        name=output_name(resolved.source.name, flavor),
        content=code.lstrip("\n"),
    )


def generate_index(resolved_files: List[ResolvedFile], flavor: str) -> GeneratedFile:
    """Generate a single module holding the types of every file."""
    env = _get_template_env()
    sources = [r.source.name for r in resolved_files]
    code = env.get_template(f"{flavor}/header.j2").render(sources=sources)
    for resolved in resolved_files:
        code += render_definitions(env, resolved, flavor)
    return GeneratedFile(
        name=INDEX_STEM + FLAVOR_EXTENSIONS[flavor],
        content=code.lstrip("\n"),
    )


def generate(
    resolved_files: List[ResolvedFile],
    files_to_generate: List[str],
    registry: SymbolRegistry,
    options: GeneratorOptions,
) -> List[GeneratedFile]:
    """Produce the output files for a run.

    In ``files`` mode only the requested files are emitted; ``index`` mode
    covers every file of the request, imports included.
    """
    if options.mode == "index":
        return [generate_index(resolved_files, options.flavor)]

    wanted = set(files_to_generate)
    return [
        generate_file(resolved, registry, options.flavor)
        for resolved in resolved_files
        if resolved.source.name in wanted
    ]
