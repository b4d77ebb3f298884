"""protoc plugin entry point.

protoc runs ``protoc-gen-gogapic`` with a serialized ``CodeGeneratorRequest``
on stdin and reads a ``CodeGeneratorResponse`` from stdout. Generation
problems are reported through ``response.error``, never as a crash, so
protoc can show them next to the offending proto file.
"""

import logging
import sys
from typing import BinaryIO

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2
from rich.console import Console
from rich.logging import RichHandler

from gapicgen.codegen.doc_file import gen_doc_file
from gapicgen.codegen.generator import GeneratedFile, Generator
from gapicgen.codegen.index import DescriptorIndex
from gapicgen.config import GeneratorConfig, GeneratorSettings
from gapicgen.descriptor_loader import load_files
from gapicgen.exceptions import GapicGenError

logger = logging.getLogger(__name__)

__all__ = ['build_request', 'configure_logging', 'generate', 'main', 'run']


def configure_logging(level: str) -> None:
    """Send log records to stderr; stdout carries the plugin protocol."""
    logging.basicConfig(
        level=level.upper(),
        format='%(message)s',
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def generate(
    request: plugin_pb2.CodeGeneratorRequest,
    settings: GeneratorSettings | None = None,
) -> list[GeneratedFile]:
    """Generate every file of the response.

    Returns:
        Two entries per service (named header, unnamed body) in request
        order, followed by ``doc.go``.

    Raises:
        GapicGenError: On the first fatal problem of the run.
    """
    config = GeneratorConfig.from_parameter(request.parameter)
    files = load_files(request.proto_file)
    index = DescriptorIndex.build(files)
    g = Generator(index, config, settings)

    wanted = set(request.file_to_generate)
    out: list[GeneratedFile] = []
    services = []
    for f in files:
        if f.name not in wanted:
            continue
        for s in f.services:
            out.extend(g.generate_service(f, s))
            services.append(s)

    doc = gen_doc_file(g, services)
    if doc is not None:
        out.append(doc)
    return out


def run(
    request: plugin_pb2.CodeGeneratorRequest,
    settings: GeneratorSettings | None = None,
) -> plugin_pb2.CodeGeneratorResponse:
    """Answer one generation request.

    A failure anywhere in the run is reported as ``response.error`` and the
    response then carries no files at all.
    """
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = (
        plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
    )
    try:
        files = generate(request, settings)
    except GapicGenError as e:
        logger.error('Generation failed: %s', e.message)
        response.error = e.message
        return response

    for f in files:
        entry = response.file.add()
        if f.name is not None:
            entry.name = f.name
        entry.content = f.content
    return response


def build_request(
    files: list[descriptor_pb2.FileDescriptorProto],
    parameter: str,
    files_to_generate: list[str] | None = None,
) -> plugin_pb2.CodeGeneratorRequest:
    """Build a request as protoc would, for runs outside of protoc.

    ``files`` must be in dependency order. Without ``files_to_generate``,
    every file declaring a service is generated.
    """
    if files_to_generate is None:
        files_to_generate = [f.name for f in files if f.service]
    request = plugin_pb2.CodeGeneratorRequest(parameter=parameter)
    request.proto_file.extend(files)
    request.file_to_generate.extend(files_to_generate)
    return request


def main(stdin: BinaryIO | None = None, stdout: BinaryIO | None = None) -> None:
    stdin = stdin or sys.stdin.buffer
    stdout = stdout or sys.stdout.buffer

    settings = GeneratorSettings()
    configure_logging(settings.log_level)

    request = plugin_pb2.CodeGeneratorRequest.FromString(stdin.read())
    response = run(request, settings)
    stdout.write(response.SerializeToString())
    stdout.flush()


if __name__ == '__main__':
    main()
