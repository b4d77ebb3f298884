"""Client generation driver.

This module provides the :class:`Generator` that turns the services of the
requested proto files into Go client source. It owns the per-output-unit
state (emitter buffer and import set), dispatches every method to the
generator for its call shape and commits each finished unit as a pair of
response files: a header (license, package clause, imports) and a body.
"""

import datetime
import logging
from dataclasses import dataclass, field

from gapicgen.codegen import calls, client_init, paging, stream
from gapicgen.codegen.classifier import (
    LRO_TYPE,
    CallShape,
    IterType,
    classify,
    is_empty_response,
    iter_type_of,
)
from gapicgen.codegen.emitter import CodeEmitter
from gapicgen.codegen.imports import ImportSet
from gapicgen.codegen.index import DescriptorIndex
from gapicgen.codegen.retry import synthesize
from gapicgen.codegen.utils import camel_to_snake, lower_first, reduce_serv_name
from gapicgen.config import GeneratorConfig, GeneratorSettings
from gapicgen.descriptors import FileDescriptor, MethodDescriptor, ServiceDescriptor
from gapicgen.exceptions import GapicGenError, MethodGenerationError

logger = logging.getLogger(__name__)

__all__ = ['APACHE_LICENSE', 'GeneratedFile', 'Generator']

APACHE_LICENSE = """\
// Copyright %d %s
//
// Licensed under the Apache License, Version 2.0 (the "License");
// you may not use this file except in compliance with the License.
// You may obtain a copy of the License at
//
//     https://www.apache.org/licenses/LICENSE-2.0
//
// Unless required by applicable law or agreed to in writing, software
// distributed under the License is distributed on an "AS IS" BASIS,
// WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
// See the License for the specific language governing permissions and
// limitations under the License.

// Code generated by protoc-gen-gogapic. DO NOT EDIT.

"""


@dataclass(frozen=True)
class GeneratedFile:
    """One entry of the plugin response.

    Attributes:
        name: Output path, or None to append ``content`` to the previous
            named file.
        content: The file text.
    """

    name: str | None
    content: str


@dataclass
class _Unit:
    """Mutable state of the output unit currently being generated."""

    emitter: CodeEmitter = field(default_factory=CodeEmitter)
    imports: ImportSet = field(default_factory=ImportSet)
    iters: dict[str, IterType] = field(default_factory=dict)


class Generator:
    """Generates Go GAPIC clients for the services of a descriptor set.

    Attributes:
        index: Lookup tables over every file of the request.
        config: Output import path and Go package name.
        settings: Environment-driven settings (license header).

    Example:
        >>> index = DescriptorIndex.build(files)
        >>> g = Generator(index, GeneratorConfig(import_path='x/y', package_name='y'))
        >>> for f in files_to_generate:
        ...     for s in f.services:
        ...         response_files.extend(g.generate_service(f, s))
    """

    def __init__(
        self,
        index: DescriptorIndex,
        config: GeneratorConfig,
        settings: GeneratorSettings | None = None,
    ):
        self.index = index
        self.config = config
        self.settings = settings or GeneratorSettings()
        self._unit = _Unit()
        # Iterator types already emitted into this Go package by an earlier
        # service of the run.
        self._generated_iters: set[str] = set()

    @property
    def p(self) -> CodeEmitter:
        return self._unit.emitter

    @property
    def imports(self) -> ImportSet:
        return self._unit.imports

    @property
    def license_year(self) -> int:
        return self.settings.license_year or datetime.date.today().year

    def reset(self) -> None:
        """Start a new output unit."""
        self._unit = _Unit()

    def generate_service(
        self, file: FileDescriptor, service: ServiceDescriptor
    ) -> list[GeneratedFile]:
        """Generate and commit the client for one service.

        Per-unit state is reset first, so a failure leaves nothing behind.

        Raises:
            GapicGenError: On the first fatal problem with the service.
        """
        self.reset()
        logger.info('Generating client for %s from %s', service.name, file.name)
        self.gen(service)
        return self.commit(self.output_file_name(service))

    def output_file_name(self, service: ServiceDescriptor) -> str:
        # The package name is not removed here: the client
        # for LoggingServiceV2 lives in logging_client.go even though the
        # type is just Client.
        base = camel_to_snake(reduce_serv_name(service.name, '')) + '_client.go'
        return self.config.join(base)

    def gen(self, serv: ServiceDescriptor) -> None:
        """Emit the client for ``serv`` into the current unit."""
        serv_name = reduce_serv_name(serv.name, self.config.package_name)
        policies = synthesize(serv)

        client_init.client_options(self, serv, serv_name, policies)
        client_init.client_init(self, serv, serv_name)

        for m in serv.methods:
            self.method_doc(m)
            try:
                self.gen_method(serv_name, serv, m)
            except MethodGenerationError:
                raise
            except GapicGenError as e:
                raise MethodGenerationError(serv.name, m.name, cause=e) from e

        iters = [
            it
            for name, it in sorted(self._unit.iters.items())
            if name not in self._generated_iters
        ]
        for it in iters:
            self._generated_iters.add(it.iter_type_name)
            paging.paging_iter(self, it)

    def gen_method(
        self, serv_name: str, serv: ServiceDescriptor, m: MethodDescriptor
    ) -> None:
        """Classify ``m`` and emit it with the generator for its shape."""
        in_type = self.index.message(m.input_type)
        out_type = self.index.message(m.output_type)
        result = classify(m, in_type, out_type)
        logger.debug('%s.%s classified as %s', serv.name, m.name, result.shape.value)

        match result.shape:
            case CallShape.LONG_RUNNING:
                calls.lro_call(self, serv_name, m)
            case CallShape.PAGED_UNARY:
                it = iter_type_of(result.paging_field, self.index)
                self._unit.iters.setdefault(it.iter_type_name, it)
                paging.paging_call(self, serv_name, m, result.paging_field, it)
            case CallShape.SERVER_STREAMING:
                stream.server_stream_call(self, serv_name, serv, m)
            case CallShape.CLIENT_STREAMING | CallShape.BIDI_STREAMING:
                stream.no_request_stream_call(self, serv_name, serv, m)
            case CallShape.UNARY if is_empty_response(m):
                calls.empty_unary_call(self, serv_name, m)
            case CallShape.UNARY:
                calls.unary_call(self, serv_name, m)

    def method_doc(self, m: MethodDescriptor) -> None:
        com = self.index.comment(m).strip()
        # Without a comment, a lone method name only confuses readers.
        if not com:
            return
        self.p.comment(f'{m.name} {lower_first(com)}')

    def has_lro(self, serv: ServiceDescriptor) -> bool:
        return any(m.output_type == LRO_TYPE for m in serv.methods)

    def header(self) -> str:
        """Render the license, package clause and imports of the current unit."""
        out = [
            APACHE_LICENSE % (self.license_year, self.settings.license_holder),
            f'package {self.config.package_name}\n\n',
        ]
        if self.imports.has_imports():
            out.append(self.imports.render())
        return ''.join(out)

    def commit(self, file_name: str) -> list[GeneratedFile]:
        """Finish the current unit as a named header plus an unnamed body."""
        body = self.p.getvalue().rstrip('\n') + '\n'
        return [
            GeneratedFile(name=file_name, content=self.header()),
            GeneratedFile(name=None, content=body),
        ]
