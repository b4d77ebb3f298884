"""gapicgen - Generate Go GAPIC clients from protobuf service descriptors.

gapicgen is a protoc plugin that reads the services of the requested proto
files and generates idiomatic Go client code: a client per service with
call options and retry settings, unary, streaming, paging and long-running
methods, and the package's ``doc.go``.

protoc Usage:
    $ protoc --gogapic_out=./out \\
        --gogapic_opt='example.com/library/apiv1;library' \\
        google/example/library/v1/library.proto

CLI Usage:
    $ gapicgen generate --config gapicgen.yaml
    $ gapicgen generate -s request.bin -o ./out -p 'example.com/library;library'
"""

from gapicgen.codegen import Codegen, DescriptorIndex, Generator
from gapicgen.config import (
    CodegenConfig,
    GeneratorConfig,
    GeneratorSettings,
    RequestConfig,
    get_config,
)
from gapicgen.exceptions import (
    CodeGenerationError,
    ConfigurationError,
    DescriptorError,
    GapicGenError,
    ImportResolutionError,
    MethodGenerationError,
    MissingAnnotationError,
    OutputError,
    PagingShapeError,
    TypeNotFoundError,
    UnsupportedFeatureError,
)
from gapicgen.plugin import run

__all__ = [
    # Main classes
    'Codegen',
    'DescriptorIndex',
    'Generator',
    'run',
    # Configuration
    'CodegenConfig',
    'GeneratorConfig',
    'GeneratorSettings',
    'RequestConfig',
    'get_config',
    # Exceptions
    'GapicGenError',
    'DescriptorError',
    'TypeNotFoundError',
    'ImportResolutionError',
    'MissingAnnotationError',
    'CodeGenerationError',
    'MethodGenerationError',
    'PagingShapeError',
    'ConfigurationError',
    'OutputError',
    'UnsupportedFeatureError',
]

from gapicgen._version import __version__
