from __future__ import annotations

from typing import Dict, List, Optional, Set, Tuple

from protoc_gen_flow.models import EnumDecl, MessageDecl


class SymbolRegistry:
    """Qualified name -> declaration lookups for a single generator run.

    Entries are only ever added. A second registration under the same name
    replaces the first; the walker refuses to do that.
    """

    def __init__(self) -> None:
        self._messages: Dict[str, MessageDecl] = {}
        self._enums: Dict[str, EnumDecl] = {}
        self._packages: Set[str] = set()

    # -- registration --

    def register_message(self, name: str, decl: MessageDecl) -> None:
        self._messages[name] = decl

    def register_enum(self, name: str, decl: EnumDecl) -> None:
        self._enums[name] = decl

    def add_package(self, package: str) -> None:
        self._packages.add(package)

    # -- lookup --

    def lookup_message(self, name: str) -> Optional[MessageDecl]:
        return self._messages.get(name)

    def lookup_enum(self, name: str) -> Optional[EnumDecl]:
        return self._enums.get(name)

    def contains(self, name: str) -> bool:
        return name in self._messages or name in self._enums

    def source_file_of(self, name: str) -> Optional[str]:
        """Return the file that declared ``name``, or None if unknown."""
        decl = self._messages.get(name) or self._enums.get(name)
        if decl is None:
            return None
        return decl.source_file

    def split_type_name(self, proto_type_name: str) -> Tuple[str, List[str]]:
        """Split a fully-qualified proto type name into (package, nesting path).

        The package is the longest registered package that prefixes the name,
        so dotted packages such as ``google.protobuf`` are handled.
        """
        full_name = proto_type_name.lstrip(".")
        best = ""
        for package in self._packages:
            if not package or len(package) <= len(best):
                continue
            if full_name.startswith(package + "."):
                best = package
        remainder = full_name[len(best) + 1:] if best else full_name
        return best, remainder.split(".")

    def __len__(self) -> int:
        return len(self._messages) + len(self._enums)
