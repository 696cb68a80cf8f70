import pytest

from protoc_gen_flow.models import EnumDecl, FieldDecl, MessageDecl
from protoc_gen_flow.registry import SymbolRegistry
from protoc_gen_flow.resolver import ReferenceResolver, UnresolvedSymbolError


def _map_entry(value: FieldDecl) -> MessageDecl:
    return MessageDecl(
        "Entry",
        fields=[FieldDecl("key", "string"), value],
        is_map_entry=True,
    )


@pytest.fixture
def registry():
    reg = SymbolRegistry()
    reg.add_package("shop")
    reg.add_package("google.protobuf")
    reg.register_enum("Order$Status", EnumDecl("Status", ["SHIPPED", "CANCELLED"]))
    reg.register_message("Order", MessageDecl("Order"))
    reg.register_message("Item", MessageDecl("Item"))
    reg.register_message("Order$CountsEntry", MessageDecl(
        "CountsEntry",
        fields=[FieldDecl("key", "string"), FieldDecl("value", "int32")],
        is_map_entry=True,
    ))
    reg.register_message("Order$ItemsEntry", _map_entry(
        FieldDecl("value", "message", type_name=".shop.Item"),
    ))
    reg.register_message("Order$StatusesEntry", MessageDecl(
        "StatusesEntry",
        fields=[FieldDecl("key", "int64"), FieldDecl("value", "enum", type_name=".shop.Order.Status")],
        is_map_entry=True,
    ))
    return reg


@pytest.fixture
def resolver(registry):
    return ReferenceResolver(registry)


class TestScalars:
    def test_scalar_delegates_to_mapper(self, resolver):
        assert resolver.resolve(FieldDecl("n", "int32"), "Order") == "number"
        assert resolver.resolve(FieldDecl("id", "uint64"), "Order") == "string"

    def test_repeated_string(self, resolver):
        assert resolver.resolve(FieldDecl("tags", "string", is_repeated=True), "Order") == "string[]"

    def test_bytes_and_group(self, resolver):
        assert resolver.resolve(FieldDecl("raw", "bytes"), "Order") == "any"
        assert resolver.resolve(FieldDecl("g", "group", is_repeated=True), "Order") == "any[]"

    def test_scalar_has_no_references(self, resolver):
        assert resolver.resolve_field(FieldDecl("n", "int32"), "Order").references == ()


class TestEnums:
    def test_nested_enum(self, resolver):
        field = FieldDecl("status", "enum", type_name=".shop.Order.Status")
        assert resolver.resolve(field, "Order") == "Order$Status"

    def test_repeated_enum(self, resolver):
        field = FieldDecl("history", "enum", is_repeated=True, type_name=".shop.Order.Status")
        assert resolver.resolve(field, "Order") == "Order$Status[]"

    def test_unknown_enum_is_fatal(self, resolver):
        field = FieldDecl("kind", "enum", type_name=".shop.Kind")
        with pytest.raises(UnresolvedSymbolError, match="Enum 'Kind' referenced by field 'kind' of 'Order'"):
            resolver.resolve(field, "Order")

    def test_message_name_is_not_an_enum(self, resolver):
        field = FieldDecl("kind", "enum", type_name=".shop.Order")
        with pytest.raises(UnresolvedSymbolError):
            resolver.resolve(field, "Order")

    def test_references_recorded(self, resolver):
        field = FieldDecl("status", "enum", type_name=".shop.Order.Status")
        resolved = resolver.resolve_field(field, "Order")
        assert resolved.name == "status"
        assert resolved.references == ("Order$Status",)


class TestMessages:
    def test_message_reference(self, resolver):
        assert resolver.resolve(FieldDecl("item", "message", type_name=".shop.Item"), "Order") == "Item"

    def test_repeated_message(self, resolver):
        field = FieldDecl("items", "message", is_repeated=True, type_name=".shop.Item")
        assert resolver.resolve(field, "Order") == "Item[]"

    def test_unknown_message_is_fatal(self, resolver):
        field = FieldDecl("x", "message", type_name=".shop.Missing")
        with pytest.raises(UnresolvedSymbolError) as exc_info:
            resolver.resolve(field, "Order")
        assert exc_info.value.kind == "message"
        assert exc_info.value.name == "Missing"

    def test_timestamp_is_string(self, resolver):
        field = FieldDecl("created_at", "message", type_name=".google.protobuf.Timestamp")
        assert resolver.resolve(field, "Order") == "string"

    def test_repeated_timestamp(self, resolver):
        field = FieldDecl("seen", "message", is_repeated=True, type_name=".google.protobuf.Timestamp")
        assert resolver.resolve(field, "Order") == "string[]"

    def test_timestamp_needs_no_registration(self):
        resolver = ReferenceResolver(SymbolRegistry())
        field = FieldDecl("created_at", "message", type_name=".google.protobuf.Timestamp")
        assert resolver.resolve_field(field, "Order").references == ()

    def test_empty_type_name_is_any(self, resolver):
        assert resolver.resolve(FieldDecl("x", "message", type_name=""), "Order") == "any"


class TestMaps:
    def test_scalar_map(self, resolver):
        field = FieldDecl("counts", "message", is_repeated=True, type_name=".shop.Order.CountsEntry")
        assert resolver.resolve(field, "Order") == "{ [key: string]: number }"

    def test_message_valued_map(self, resolver):
        field = FieldDecl("items", "message", is_repeated=True, type_name=".shop.Order.ItemsEntry")
        resolved = resolver.resolve_field(field, "Order")
        assert resolved.type == "{ [key: string]: Item }"
        assert resolved.references == ("Item",)

    def test_enum_valued_map_with_int64_key(self, resolver):
        field = FieldDecl("statuses", "message", is_repeated=True, type_name=".shop.Order.StatusesEntry")
        assert resolver.resolve(field, "Order") == "{ [key: string]: Order$Status }"

    def test_map_entry_name_never_referenced(self, resolver):
        field = FieldDecl("counts", "message", is_repeated=True, type_name=".shop.Order.CountsEntry")
        assert "Order$CountsEntry" not in resolver.resolve_field(field, "Order").references


class TestPackagePrefix:
    def test_prefixed_names(self):
        registry = SymbolRegistry()
        registry.add_package("shop.v1")
        registry.register_enum("shop$v1$Order$Status", EnumDecl("Status"))
        resolver = ReferenceResolver(registry, package_prefix=True)

        field = FieldDecl("status", "enum", type_name=".shop.v1.Order.Status")
        assert resolver.qualify(".shop.v1.Order.Status") == "shop$v1$Order$Status"
        assert resolver.resolve(field, "shop$v1$Order") == "shop$v1$Order$Status"
