from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union


@dataclass
class FieldDecl:
    """A message field as declared in the descriptor.

    ``type`` is the proto keyword (``int32``, ``string``, ``message``, ...).
    ``type_name`` is only set for ``message``/``enum`` fields and holds the
    fully-qualified proto name, e.g. ``.shop.Order.Status``.
    """

    name: str
    type: str
    is_repeated: bool = False
    type_name: Optional[str] = None


@dataclass
class EnumDecl:
    name: str
    values: List[str] = field(default_factory=list)
    source_file: str = ""


@dataclass
class MessageDecl:
    name: str
    fields: List[FieldDecl] = field(default_factory=list)
    nested_enums: List[EnumDecl] = field(default_factory=list)
    nested_messages: List[MessageDecl] = field(default_factory=list)
    is_map_entry: bool = False
    source_file: str = ""


@dataclass
class SchemaFile:
    name: str
    package: str = ""
    enums: List[EnumDecl] = field(default_factory=list)
    messages: List[MessageDecl] = field(default_factory=list)


@dataclass(frozen=True)
class ResolvedField:
    name: str
    type: str
    references: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EnumDefinition:
    name: str
    values: List[str]
    source_file: str = ""


@dataclass(frozen=True)
class MessageDefinition:
    name: str
    fields: List[ResolvedField]
    source_file: str = ""


Definition = Union[EnumDefinition, MessageDefinition]


@dataclass
class ResolvedFile:
    """One input file with its definitions in emission order."""

    source: SchemaFile
    definitions: List[Definition] = field(default_factory=list)
