"""protoc plugin pipeline: CodeGeneratorRequest in, CodeGeneratorResponse out."""

from __future__ import annotations

import sys
from typing import List

from google.protobuf.compiler import plugin_pb2

from protoc_gen_flow.generator.typedef_generator import GeneratedFile, generate
from protoc_gen_flow.options import GeneratorOptions, OptionsError, parse_parameter
from protoc_gen_flow.parser.descriptor_parser import parse_request
from protoc_gen_flow.registry import SymbolRegistry
from protoc_gen_flow.resolver import NameCollisionError, ReferenceResolver, UnresolvedSymbolError
from protoc_gen_flow.walker import NamespaceWalker


def build_files(
    request: plugin_pb2.CodeGeneratorRequest,
    options: GeneratorOptions,
) -> List[GeneratedFile]:
    """Parse, walk and render. A fresh registry is built for every call."""
    schema_files = parse_request(request)
    if options.verbose:
        for sf in schema_files:
            print(
                f"  Parsed {sf.name}: {len(sf.messages)} message(s), {len(sf.enums)} enum(s)",
                file=sys.stderr,
            )

    registry = SymbolRegistry()
    resolver = ReferenceResolver(registry, package_prefix=options.package_prefix)
    walker = NamespaceWalker(registry, resolver, package_prefix=options.package_prefix)
    resolved_files = walker.walk(schema_files)

    files_to_generate = list(request.file_to_generate) or [sf.name for sf in schema_files]
    generated = generate(resolved_files, files_to_generate, registry, options)
    if options.verbose:
        for gf in generated:
            print(f"  Generated: {gf.name}", file=sys.stderr)
    return generated


def generate_code(request: plugin_pb2.CodeGeneratorRequest) -> plugin_pb2.CodeGeneratorResponse:
    """Run the generator. Failures are reported in ``response.error`` with no files."""
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL

    try:
        options = parse_parameter(request.parameter)
        generated = build_files(request, options)
    except (OptionsError, UnresolvedSymbolError, NameCollisionError) as e:
        response.error = str(e)
        return response

    for gf in generated:
        response.file.add(name=gf.name, content=gf.content)
    return response
