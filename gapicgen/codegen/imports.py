"""Import resolution and collection for generated Go files.

This module derives the Go import of the package that declares a protobuf
element, and collects the imports one generated file needs so they can be
rendered as a deduplicated, deterministically ordered ``import (...)`` block.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from gapicgen.codegen.utils import go_quote
from gapicgen.descriptors import FileDescriptor
from gapicgen.exceptions import ImportResolutionError

__all__ = ['ImportSet', 'ImportSpec', 'resolve_import', 'sort_imports']

_VERSION_SEGMENT = re.compile(r'v[0-9]')


@dataclass(frozen=True)
class ImportSpec:
    """A Go import: optional alias and import path.

    Two specs are the same import when both the alias and the path match.
    """

    name: str = ''
    path: str = ''

    def render(self) -> str:
        if self.name:
            return f'{self.name} {go_quote(self.path)}'
        return go_quote(self.path)


# Imports of the runtime libraries generated clients build on.
CONTEXT = ImportSpec(path='context')
MATH = ImportSpec(path='math')
RUNTIME = ImportSpec(path='runtime')
TIME = ImportSpec(path='time')
GAX = ImportSpec(name='gax', path='github.com/googleapis/gax-go/v2')
GRPC = ImportSpec(path='google.golang.org/grpc')
GRPC_CODES = ImportSpec(path='google.golang.org/grpc/codes')
GRPC_METADATA = ImportSpec(path='google.golang.org/grpc/metadata')
API_OPTION = ImportSpec(path='google.golang.org/api/option')
API_TRANSPORT = ImportSpec(path='google.golang.org/api/transport')
API_ITERATOR = ImportSpec(path='google.golang.org/api/iterator')
PROTO = ImportSpec(path='google.golang.org/protobuf/proto')
LONGRUNNING = ImportSpec(path='cloud.google.com/go/longrunning')
LRO_AUTO = ImportSpec(name='lroauto', path='cloud.google.com/go/longrunning/autogen')


def resolve_import(file: FileDescriptor) -> ImportSpec:
    """Report the import of the Go package generated for ``file``.

    The alias comes from ``option go_package``. An explicit
    ``path;name`` form is trusted. Otherwise the last path segment that is
    not a version marker (``v1``, ``v2beta``...) names the package, so
    ``google.golang.org/genproto/googleapis/example/library/v1`` is imported
    as ``librarypb``.

    Raises:
        ImportResolutionError: If the file declares no ``go_package``.
    """
    pkg = file.go_package
    if not pkg:
        raise ImportResolutionError(
            file.name, f'file {file.name!r} missing `option go_package`'
        )

    if ';' in pkg:
        path, _, name = pkg.partition(';')
        return ImportSpec(name=name + 'pb', path=path)

    while True:
        p = pkg.rfind('/')
        if p < 0:
            return ImportSpec(name=pkg + 'pb', path=pkg)
        elem = pkg[p + 1 :]
        if _VERSION_SEGMENT.match(elem):
            pkg = pkg[:p]
            continue
        return ImportSpec(name=elem + 'pb', path=pkg)


def _is_third_party(spec: ImportSpec) -> bool:
    return '.' in spec.path


def sort_imports(specs: Iterable[ImportSpec]) -> tuple[list[ImportSpec], int]:
    """Sort import specs and locate the first third-party import.

    Standard library imports (paths without a dot) come first. Within each
    group specs are ordered by path, then by alias.

    Returns:
        The sorted list and the index of its first third-party import
        (``len(list)`` when there is none).
    """
    ordered = sorted(specs, key=lambda s: (_is_third_party(s), s.path, s.name))
    for i, spec in enumerate(ordered):
        if _is_third_party(spec):
            return ordered, i
    return ordered, len(ordered)


class ImportSet:
    """Collects the imports needed by one generated file.

    Example:
        >>> imports = ImportSet()
        >>> imports.add(ImportSpec(path='context'))
        >>> imports.add(ImportSpec(name='gax', path='github.com/googleapis/gax-go/v2'))
        >>> imports.add(ImportSpec(path='context'))
        >>> len(imports)
        2
    """

    def __init__(self):
        self._specs: set[ImportSpec] = set()

    def add(self, spec: ImportSpec) -> None:
        self._specs.add(spec)

    def add_path(self, path: str, name: str = '') -> None:
        self._specs.add(ImportSpec(name=name, path=path))

    def update(self, specs: Iterable[ImportSpec]) -> None:
        self._specs.update(specs)

    def __contains__(self, spec: ImportSpec) -> bool:
        return spec in self._specs

    def __len__(self) -> int:
        return len(self._specs)

    def has_imports(self) -> bool:
        return bool(self._specs)

    def clear(self) -> None:
        self._specs.clear()

    def sorted(self) -> tuple[list[ImportSpec], int]:
        return sort_imports(self._specs)

    def render(self) -> str:
        """Render the Go import block, separating standard and third-party imports."""
        ordered, boundary = self.sorted()
        lines = ['import (']
        lines.extend(f'\t{spec.render()}' for spec in ordered[:boundary])
        if 0 < boundary < len(ordered):
            lines.append('')
        lines.extend(f'\t{spec.render()}' for spec in ordered[boundary:])
        lines.append(')')
        return '\n'.join(lines) + '\n\n'
