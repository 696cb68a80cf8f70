"""Map protoc descriptors into the application's SchemaFile models."""

from __future__ import annotations

from typing import Dict, List

from google.protobuf import descriptor_pb2 as d2
from google.protobuf.compiler import plugin_pb2

from protoc_gen_flow.models import EnumDecl, FieldDecl, MessageDecl, SchemaFile

FDP = d2.FieldDescriptorProto

# Descriptor field type -> proto keyword
FIELD_TYPE_NAMES: Dict[int, str] = {
    FDP.TYPE_DOUBLE: "double",
    FDP.TYPE_FLOAT: "float",
    FDP.TYPE_INT64: "int64",
    FDP.TYPE_UINT64: "uint64",
    FDP.TYPE_INT32: "int32",
    FDP.TYPE_FIXED64: "fixed64",
    FDP.TYPE_FIXED32: "fixed32",
    FDP.TYPE_BOOL: "bool",
    FDP.TYPE_STRING: "string",
    FDP.TYPE_GROUP: "group",
    FDP.TYPE_MESSAGE: "message",
    FDP.TYPE_BYTES: "bytes",
    FDP.TYPE_UINT32: "uint32",
    FDP.TYPE_ENUM: "enum",
    FDP.TYPE_SFIXED32: "sfixed32",
    FDP.TYPE_SFIXED64: "sfixed64",
    FDP.TYPE_SINT32: "sint32",
    FDP.TYPE_SINT64: "sint64",
}


def parse_field(desc: d2.FieldDescriptorProto) -> FieldDecl:
    field_type = FIELD_TYPE_NAMES.get(desc.type, "")
    type_name = None
    if field_type in ("message", "enum"):
        type_name = desc.type_name
    return FieldDecl(
        name=desc.name,
        type=field_type,
        is_repeated=desc.label == FDP.LABEL_REPEATED,
        type_name=type_name,
    )


def parse_enum(desc: d2.EnumDescriptorProto, source_file: str) -> EnumDecl:
    # The zero value is represented by leaving the field unset
    values = [v.name for v in desc.value if v.number != 0]
    return EnumDecl(name=desc.name, values=values, source_file=source_file)


def parse_message(desc: d2.DescriptorProto, source_file: str) -> MessageDecl:
    return MessageDecl(
        name=desc.name,
        fields=[parse_field(f) for f in desc.field],
        nested_enums=[parse_enum(e, source_file) for e in desc.enum_type],
        nested_messages=[parse_message(n, source_file) for n in desc.nested_type],
        is_map_entry=desc.options.map_entry,
        source_file=source_file,
    )


def parse_file(desc: d2.FileDescriptorProto) -> SchemaFile:
    """Convert one FileDescriptorProto, keeping declaration order."""
    return SchemaFile(
        name=desc.name,
        package=desc.package,
        enums=[parse_enum(e, desc.name) for e in desc.enum_type],
        messages=[parse_message(m, desc.name) for m in desc.message_type],
    )


def parse_request(request: plugin_pb2.CodeGeneratorRequest) -> List[SchemaFile]:
    """Convert every file of a request, imports included, in request order."""
    return [parse_file(f) for f in request.proto_file]
