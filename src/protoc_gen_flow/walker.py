from __future__ import annotations

from typing import List

from protoc_gen_flow.models import (
    EnumDecl,
    EnumDefinition,
    MessageDecl,
    MessageDefinition,
    ResolvedFile,
    SchemaFile,
)
from protoc_gen_flow.naming import namespace_for, nested_namespace
from protoc_gen_flow.registry import SymbolRegistry
from protoc_gen_flow.resolver import NameCollisionError, ReferenceResolver


class NamespaceWalker:
    """Assigns qualified names to every declaration and resolves all fields.

    Runs in two passes over all files: the first registers every enum and
    message, the second resolves fields. Field resolution therefore never
    depends on file or declaration order. Two declarations that map to the
    same qualified name abort the run with NameCollisionError.
    """

    def __init__(
        self,
        registry: SymbolRegistry,
        resolver: ReferenceResolver,
        package_prefix: bool = False,
    ):
        self._registry = registry
        self._resolver = resolver
        self._package_prefix = package_prefix

    def walk(self, files: List[SchemaFile]) -> List[ResolvedFile]:
        for schema_file in files:
            self.register_file(schema_file)
        return [self.resolve_file(schema_file) for schema_file in files]

    # -- pass 1: registration --

    def register_file(self, schema_file: SchemaFile) -> None:
        self._registry.add_package(schema_file.package)
        ns = namespace_for(schema_file.package, self._package_prefix)
        for enum in schema_file.enums:
            self._register_enum(ns, enum)
        for msg in schema_file.messages:
            self._register_message(ns, msg)

    def _register_enum(self, namespace: str, enum: EnumDecl) -> None:
        name = namespace + enum.name
        self._check_collision(name, enum.source_file)
        self._registry.register_enum(name, enum)

    def _register_message(self, namespace: str, msg: MessageDecl) -> None:
        name = namespace + msg.name
        nested_ns = nested_namespace(name)
        for enum in msg.nested_enums:
            self._register_enum(nested_ns, enum)
        for nested in msg.nested_messages:
            self._register_message(nested_ns, nested)
        self._check_collision(name, msg.source_file)
        self._registry.register_message(name, msg)

    def _check_collision(self, name: str, source_file: str) -> None:
        if self._registry.contains(name):
            raise NameCollisionError(
                name,
                self._registry.source_file_of(name) or "",
                source_file,
                self._package_prefix,
            )

    # -- pass 2: resolution --

    def resolve_file(self, schema_file: SchemaFile) -> ResolvedFile:
        resolved = ResolvedFile(source=schema_file)
        ns = namespace_for(schema_file.package, self._package_prefix)
        for enum in schema_file.enums:
            resolved.definitions.append(_enum_definition(ns, enum))
        for msg in schema_file.messages:
            self._resolve_message(ns, msg, resolved)
        return resolved

    def _resolve_message(self, namespace: str, msg: MessageDecl, out: ResolvedFile) -> None:
        name = namespace + msg.name
        nested_ns = nested_namespace(name)
        # Nested types come out before their parent, deepest first
        for enum in msg.nested_enums:
            out.definitions.append(_enum_definition(nested_ns, enum))
        for nested in msg.nested_messages:
            self._resolve_message(nested_ns, nested, out)

        fields = [self._resolver.resolve_field(f, name) for f in msg.fields]

        # Map entries are inlined where they are used
        if not msg.is_map_entry:
            out.definitions.append(
                MessageDefinition(name=name, fields=fields, source_file=msg.source_file)
            )


def _enum_definition(namespace: str, enum: EnumDecl) -> EnumDefinition:
    return EnumDefinition(
        name=namespace + enum.name,
        values=list(enum.values),
        source_file=enum.source_file,
    )

