from __future__ import annotations

from typing import Dict

ANY_TYPE = "any"

# Proto scalar type -> JS type token
SCALAR_TYPE_MAP: Dict[str, str] = {
    "double": "number",
    "float": "number",
    "int32": "number",
    "uint32": "number",
    "sint32": "number",
    "fixed32": "number",
    "sfixed32": "number",
    # JS numbers cannot hold 64-bit integers, they travel as decimal strings
    "int64": "string",
    "uint64": "string",
    "sint64": "string",
    "fixed64": "string",
    "sfixed64": "string",
    "bool": "boolean",
    "string": "string",
    "bytes": ANY_TYPE,
    "group": ANY_TYPE,
}


def array_of(type_token: str) -> str:
    return f"{type_token}[]"


def map_scalar(proto_type: str, is_repeated: bool = False) -> str:
    """Map a proto scalar keyword to its JS type token.

    Unknown keywords map to ``any``. Repeated fields get the array suffix.
    """
    token = SCALAR_TYPE_MAP.get(proto_type, ANY_TYPE)
    if is_repeated:
        return array_of(token)
    return token
