"""Field type resolution.

Turns a FieldDecl into the JS type token written into the generated type,
looking message and enum references up in the SymbolRegistry.
"""

from __future__ import annotations

from typing import List, Tuple

from protoc_gen_flow.models import FieldDecl, MessageDecl, ResolvedField
from protoc_gen_flow.naming import qualified_name
from protoc_gen_flow.registry import SymbolRegistry
from protoc_gen_flow.scalar_types import ANY_TYPE, array_of, map_scalar

# Timestamps are serialized as RFC 3339 text
TIMESTAMP_TYPE_NAME = ".google.protobuf.Timestamp"


class UnresolvedSymbolError(Exception):
    """Raised when a field references a message or enum nobody declared."""

    def __init__(self, kind: str, name: str, field_name: str, namespace: str):
        self.kind = kind
        self.name = name
        self.field_name = field_name
        self.namespace = namespace
        super().__init__(
            f"{kind.capitalize()} '{name}' referenced by field '{field_name}' "
            f"of '{namespace}' not found"
        )


class NameCollisionError(Exception):
    """Raised when two declarations map to the same qualified name."""

    def __init__(self, name: str, first_file: str, second_file: str, package_prefix: bool):
        self.name = name
        self.first_file = first_file
        self.second_file = second_file
        message = (
            f"Type name '{name}' is declared in both {first_file or '<unknown>'} "
            f"and {second_file or '<unknown>'}"
        )
        if not package_prefix:
            message += "; use package_prefix=true to qualify type names with their package"
        super().__init__(message)


class ReferenceResolver:
    def __init__(self, registry: SymbolRegistry, package_prefix: bool = False):
        self._registry = registry
        self._package_prefix = package_prefix

    def qualify(self, proto_type_name: str) -> str:
        """Map ``.pkg.Outer.Inner`` to the registry name of that declaration."""
        package, path = self._registry.split_type_name(proto_type_name)
        return qualified_name(package, path, self._package_prefix)

    def resolve(self, field: FieldDecl, namespace: str) -> str:
        token, _ = self._resolve(field, namespace)
        return token

    def resolve_field(self, field: FieldDecl, namespace: str) -> ResolvedField:
        token, references = self._resolve(field, namespace)
        return ResolvedField(name=field.name, type=token, references=tuple(references))

    def _resolve(self, field: FieldDecl, namespace: str) -> Tuple[str, List[str]]:
        references: List[str] = []

        if field.type == "enum":
            if not field.type_name:
                token = ANY_TYPE
            else:
                name = self.qualify(field.type_name)
                if self._registry.lookup_enum(name) is None:
                    raise UnresolvedSymbolError("enum", name, field.name, namespace)
                token = name
                references.append(name)
        elif field.type == "message":
            if field.type_name == TIMESTAMP_TYPE_NAME:
                token = "string"
            elif not field.type_name:
                token = ANY_TYPE
            else:
                name = self.qualify(field.type_name)
                msg = self._registry.lookup_message(name)
                if msg is None:
                    raise UnresolvedSymbolError("message", name, field.name, namespace)
                if msg.is_map_entry:
                    # Wire format is a repeated entry message, but the JS shape
                    # is one object, so no array suffix.
                    return self._resolve_map(msg, name)
                token = name
                references.append(name)
        else:
            return map_scalar(field.type, field.is_repeated), references

        if field.is_repeated:
            token = array_of(token)
        return token, references

    def _resolve_map(self, entry: MessageDecl, entry_name: str) -> Tuple[str, List[str]]:
        key_type, key_refs = self._resolve(entry.fields[0], entry_name)
        value_type, value_refs = self._resolve(entry.fields[1], entry_name)
        return f"{{ [key: {key_type}]: {value_type} }}", key_refs + value_refs
