"""Offline generation driver.

:class:`Codegen` runs the plugin on a request stored on disk instead of one
piped in by protoc, and writes the result to an output directory. The
source is either a serialized ``CodeGeneratorRequest`` or a
``FileDescriptorSet`` as produced by ``protoc --descriptor_set_out
--include_imports --include_source_info``.
"""

import logging

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2
from google.protobuf.message import DecodeError
from upath import UPath

from gapicgen.codegen.file_writer import GoFileWriter
from gapicgen.config import GeneratorSettings, RequestConfig
from gapicgen.exceptions import ConfigurationError
from gapicgen.plugin import build_request, generate

logger = logging.getLogger(__name__)

__all__ = ['Codegen']


class Codegen:
    def __init__(self, config: RequestConfig, settings: GeneratorSettings | None = None):
        self.config = config
        self.settings = settings or GeneratorSettings()

    def load_request(self) -> plugin_pb2.CodeGeneratorRequest:
        """Read and decode the configured source.

        Raises:
            ConfigurationError: If the source is missing or cannot be decoded.
        """
        source = UPath(self.config.source)
        if not source.exists():
            raise ConfigurationError(
                'source not found', config_path=str(source), field='source'
            )
        data = source.read_bytes()

        try:
            if self.config.kind == 'request':
                request = plugin_pb2.CodeGeneratorRequest.FromString(data)
                request.parameter = self.config.parameter
                if self.config.files_to_generate is not None:
                    del request.file_to_generate[:]
                    request.file_to_generate.extend(self.config.files_to_generate)
                return request

            fds = descriptor_pb2.FileDescriptorSet.FromString(data)
        except DecodeError as e:
            raise ConfigurationError(
                f'cannot decode {self.config.kind}: {e}', config_path=str(source)
            ) from e

        return build_request(
            list(fds.file), self.config.parameter, self.config.files_to_generate
        )

    def generate(self) -> list[UPath]:
        """Generate the clients and write them below ``config.output``.

        Returns:
            The written files.

        Raises:
            GapicGenError: On the first generation or output error.
        """
        request = self.load_request()
        logger.info(
            'Generating %d files from %s',
            len(request.file_to_generate),
            self.config.source,
        )
        files = generate(request, self.settings)
        return GoFileWriter(self.config.output).write_all(files)
