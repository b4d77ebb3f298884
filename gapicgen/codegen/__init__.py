"""Code generation module for gapicgen.

This module turns the typed descriptor model into Go client source.

Main Components:
    - DescriptorIndex: Lookup tables over every file of a run
    - classify: Assigns each method its call shape
    - synthesize: Derives retry policies from HTTP bindings
    - CodeEmitter: Auto-indenting text accumulator
    - Generator: Drives the per-shape generators for each service
    - Codegen: Runs the generator on a request stored on disk

Example:
    >>> from gapicgen.codegen import DescriptorIndex, Generator
    >>> from gapicgen.config import GeneratorConfig
    >>>
    >>> index = DescriptorIndex.build(files)
    >>> g = Generator(index, GeneratorConfig.from_parameter('example.com/library;library'))
    >>> entries = g.generate_service(files[0], files[0].services[0])
"""

from gapicgen.codegen.classifier import (
    CallShape,
    Classification,
    IterType,
    classify,
    iter_type_of,
    paging_field,
)
from gapicgen.codegen.emitter import CodeEmitter
from gapicgen.codegen.generator import GeneratedFile, Generator
from gapicgen.codegen.imports import ImportSet, ImportSpec, resolve_import, sort_imports
from gapicgen.codegen.index import DescriptorIndex
from gapicgen.codegen.retry import DEFAULT_RETRY_POLICY, RetryPolicy, synthesize
from gapicgen.codegen.codegen import Codegen

__all__ = [
    'CallShape',
    'Classification',
    'CodeEmitter',
    'Codegen',
    'DEFAULT_RETRY_POLICY',
    'DescriptorIndex',
    'GeneratedFile',
    'Generator',
    'ImportSet',
    'ImportSpec',
    'IterType',
    'RetryPolicy',
    'classify',
    'iter_type_of',
    'paging_field',
    'resolve_import',
    'sort_imports',
    'synthesize',
]
