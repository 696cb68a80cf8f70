from __future__ import annotations

import argparse
import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import List, Optional

from google.protobuf import descriptor_pb2 as d2
from google.protobuf.compiler import plugin_pb2
from google.protobuf.message import DecodeError

from protoc_gen_flow.options import FLAVORS, MODES
from protoc_gen_flow.plugin import generate_code


def _find_proto_files(root: str) -> List[str]:
    """Recursively find .proto files under root, sorted for deterministic output."""
    return sorted(str(p) for p in Path(root).rglob("*.proto"))


def build_request_via_protoc(proto_path: str, parameter: str = "") -> plugin_pb2.CodeGeneratorRequest:
    """Run protoc to get a descriptor set and wrap it in a CodeGeneratorRequest.

    ``proto_path`` is a .proto file or a directory searched recursively; it
    (or the file's directory) becomes the include root.
    """
    if os.path.isdir(proto_path):
        root = os.path.abspath(proto_path)
        inputs = _find_proto_files(root)
        if not inputs:
            raise RuntimeError(f"No .proto files found under directory: {proto_path}")
    else:
        root = os.path.dirname(os.path.abspath(proto_path))
        inputs = [os.path.abspath(proto_path)]

    with tempfile.TemporaryDirectory() as td:
        desc_path = os.path.join(td, "descriptor_set.pb")
        cmd = ["protoc", "--include_imports", f"--descriptor_set_out={desc_path}", "-I", root] + inputs
        try:
            subprocess.run(cmd, check=True, capture_output=True)
        except FileNotFoundError as e:
            raise RuntimeError("'protoc' not found. Please install Protocol Buffers compiler and ensure it is in PATH.") from e
        except subprocess.CalledProcessError as e:
            raise RuntimeError(f"protoc failed: {e.stderr.decode('utf-8', errors='ignore')}") from e

        fds = d2.FileDescriptorSet()
        with open(desc_path, "rb") as f:
            fds.ParseFromString(f.read())

    request = plugin_pb2.CodeGeneratorRequest(parameter=parameter)
    request.proto_file.extend(fds.file)
    request.file_to_generate.extend(Path(p).relative_to(root).as_posix() for p in inputs)
    return request


def run(proto_path: str, out_dir: str, parameter: str = "") -> List[str]:
    """Standalone pipeline: protoc descriptor set -> generated files on disk.

    Returns the written paths. Raises RuntimeError if generation fails; in
    that case nothing is written.
    """
    request = build_request_via_protoc(proto_path, parameter)
    response = generate_code(request)
    if response.error:
        raise RuntimeError(response.error)

    written: List[str] = []
    for gf in response.file:
        out_path = os.path.join(out_dir, gf.name)
        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
        Path(out_path).write_text(gf.content, encoding="utf-8")
        written.append(out_path)
    return written


def run_plugin() -> int:
    """protoc plugin mode: request on stdin, response on stdout."""
    if sys.stdin.isatty():
        print("protoc-gen-flow is a protoc plugin; run it through protoc:", file=sys.stderr)
        print("  protoc --flow_out=OUT_DIR [--flow_opt=flavor=typescript] file.proto", file=sys.stderr)
        print("or generate directly with: protoc-gen-flow --proto PATH --out DIR", file=sys.stderr)
        return 1

    request = plugin_pb2.CodeGeneratorRequest()
    try:
        request.ParseFromString(sys.stdin.buffer.read())
    except DecodeError as e:
        print(f"FATAL: unable to parse CodeGeneratorRequest: {e}", file=sys.stderr)
        return 1

    response = generate_code(request)
    sys.stdout.buffer.write(response.SerializeToString())
    return 0


def _parameter_from_args(args: argparse.Namespace) -> str:
    parts = [f"flavor={args.flavor}", f"mode={args.mode}"]
    if args.package_prefix:
        parts.append("package_prefix=true")
    if args.verbose:
        parts.append("verbose=true")
    return ",".join(parts)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Generate Flow / TypeScript type definitions from .proto files. "
        "Without --proto, acts as a protoc plugin reading a CodeGeneratorRequest from stdin.",
    )
    parser.add_argument("--proto", required=False, help="Path to a .proto file or a directory containing .proto files (recursively)")
    parser.add_argument("--out", required=False, help="Output directory for generated file(s)")
    parser.add_argument("--flavor", choices=FLAVORS, default="flow", help="Type syntax to emit (default: flow)")
    parser.add_argument("--mode", choices=MODES, default="files", help="One output per proto file, or a single index module")
    parser.add_argument("--package-prefix", action="store_true", help="Prefix type names with their proto package")
    parser.add_argument("--verbose", action="store_true", help="Report parsed and generated files on stderr")
    args = parser.parse_args(argv)

    if args.proto is None:
        return run_plugin()
    if not args.out:
        parser.error("--out is required together with --proto")

    try:
        generated = run(args.proto, args.out, _parameter_from_args(args))
    except RuntimeError as e:
        print(f"FATAL: {e}", file=sys.stderr)
        return 1
    print("Generated:\n" + "\n".join(generated))
    return 0


if __name__ == "__main__":
    sys.exit(main())
