"""Builders for descriptor protos used across tests (no protoc required)."""

from typing import Iterable, Optional, Sequence, Tuple

from google.protobuf import descriptor_pb2 as d2
from google.protobuf.compiler import plugin_pb2

FDP = d2.FieldDescriptorProto


def make_field(
    name: str,
    field_type: int,
    number: int = 1,
    repeated: bool = False,
    type_name: Optional[str] = None,
) -> d2.FieldDescriptorProto:
    fd = FDP(
        name=name,
        number=number,
        type=field_type,
        label=FDP.LABEL_REPEATED if repeated else FDP.LABEL_OPTIONAL,
    )
    if type_name is not None:
        fd.type_name = type_name
    return fd


def make_enum(name: str, values: Sequence[Tuple[str, int]]) -> d2.EnumDescriptorProto:
    enum = d2.EnumDescriptorProto(name=name)
    for value_name, number in values:
        enum.value.add(name=value_name, number=number)
    return enum


def make_message(
    name: str,
    fields: Iterable[d2.FieldDescriptorProto] = (),
    nested: Iterable[d2.DescriptorProto] = (),
    enums: Iterable[d2.EnumDescriptorProto] = (),
    map_entry: bool = False,
) -> d2.DescriptorProto:
    msg = d2.DescriptorProto(name=name)
    msg.field.extend(fields)
    msg.nested_type.extend(nested)
    msg.enum_type.extend(enums)
    if map_entry:
        msg.options.map_entry = True
    return msg


def make_map_entry(
    name: str,
    key_type: int,
    value_type: int,
    value_type_name: Optional[str] = None,
) -> d2.DescriptorProto:
    return make_message(
        name,
        fields=[
            make_field("key", key_type, number=1),
            make_field("value", value_type, number=2, type_name=value_type_name),
        ],
        map_entry=True,
    )


def make_file(
    name: str,
    package: str,
    messages: Iterable[d2.DescriptorProto] = (),
    enums: Iterable[d2.EnumDescriptorProto] = (),
    dependencies: Iterable[str] = (),
) -> d2.FileDescriptorProto:
    fd = d2.FileDescriptorProto(name=name, package=package, syntax="proto3")
    fd.message_type.extend(messages)
    fd.enum_type.extend(enums)
    fd.dependency.extend(dependencies)
    return fd


def make_request(
    files: Sequence[d2.FileDescriptorProto],
    to_generate: Optional[Sequence[str]] = None,
    parameter: str = "",
) -> plugin_pb2.CodeGeneratorRequest:
    request = plugin_pb2.CodeGeneratorRequest(parameter=parameter)
    request.proto_file.extend(files)
    if to_generate is None:
        to_generate = [f.name for f in files]
    request.file_to_generate.extend(to_generate)
    return request


def timestamp_file() -> d2.FileDescriptorProto:
    return make_file(
        "google/protobuf/timestamp.proto",
        "google.protobuf",
        messages=[
            make_message("Timestamp", fields=[
                make_field("seconds", FDP.TYPE_INT64, number=1),
                make_field("nanos", FDP.TYPE_INT32, number=2),
            ]),
        ],
    )


def shop_file() -> d2.FileDescriptorProto:
    """shop/order.proto: the Order example with a nested enum, tags and a map."""
    return make_file(
        "shop/order.proto",
        "shop",
        dependencies=["google/protobuf/timestamp.proto"],
        messages=[
            make_message(
                "Order",
                enums=[make_enum("Status", [("PENDING", 0), ("SHIPPED", 1), ("CANCELLED", 2)])],
                nested=[make_map_entry("CountsEntry", FDP.TYPE_STRING, FDP.TYPE_INT32)],
                fields=[
                    make_field("id", FDP.TYPE_INT64, number=1),
                    make_field("status", FDP.TYPE_ENUM, number=2, type_name=".shop.Order.Status"),
                    make_field("tags", FDP.TYPE_STRING, number=3, repeated=True),
                    make_field("counts", FDP.TYPE_MESSAGE, number=4, repeated=True,
                               type_name=".shop.Order.CountsEntry"),
                    make_field("created_at", FDP.TYPE_MESSAGE, number=5,
                               type_name=".google.protobuf.Timestamp"),
                ],
            ),
        ],
    )
