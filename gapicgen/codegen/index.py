"""Lookup tables over the full descriptor set of one generation run.

The index is built once from every file in the request, including files that
are not being generated, because methods routinely reference messages
declared in other files. It is read-only after :meth:`DescriptorIndex.build`
and is handed explicitly to every generator.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from types import MappingProxyType

from gapicgen.codegen.imports import ImportSpec, resolve_import
from gapicgen.descriptors import (
    Element,
    EnumDescriptor,
    FileDescriptor,
    MessageDescriptor,
    ServiceDescriptor,
    element_name,
)
from gapicgen.exceptions import ImportResolutionError, TypeNotFoundError

logger = logging.getLogger(__name__)

# Field numbers in FileDescriptorProto / ServiceDescriptorProto used by
# SourceCodeInfo paths.
SERVICE_FIELD_NUMBER = 6
METHOD_FIELD_NUMBER = 2

ProtoType = MessageDescriptor | EnumDescriptor


@dataclass(frozen=True)
class DescriptorIndex:
    """Immutable lookup tables for one generation run.

    Attributes:
        types: Fully-qualified type name to message or enum.
        parent_file: Element full name to the file declaring it.
        comments: Element full name to its leading comment. Only services
            and methods carry comments.
        services: Fully-qualified service name to service.
    """

    types: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    parent_file: MappingProxyType = field(
        default_factory=lambda: MappingProxyType({})
    )
    comments: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    services: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(cls, files: Iterable[FileDescriptor]) -> 'DescriptorIndex':
        """Build the index from every file of the request."""
        types: dict[str, ProtoType] = {}
        parent_file: dict[str, FileDescriptor] = {}
        comments: dict[str, str] = {}
        services: dict[str, ServiceDescriptor] = {}

        for f in files:
            for m in f.messages:
                _add_message(types, parent_file, f, m)
            for e in f.enums:
                types[e.full_name] = e
                parent_file[e.full_name] = f
            for s in f.services:
                services[s.full_name] = s
                parent_file[s.full_name] = f
                for m in s.methods:
                    parent_file[m.full_name] = f

            for loc in f.locations:
                _add_comment(comments, f, loc.path, loc.leading_comments)

        logger.debug(
            'Indexed %d types and %d services', len(types), len(services)
        )
        return cls(
            types=MappingProxyType(types),
            parent_file=MappingProxyType(parent_file),
            comments=MappingProxyType(comments),
            services=MappingProxyType(services),
        )

    def type(self, name: str) -> ProtoType:
        """Look up a message or enum by fully-qualified name.

        Raises:
            TypeNotFoundError: If no file of the run declares ``name``.
        """
        try:
            return self.types[name]
        except KeyError:
            raise TypeNotFoundError(name) from None

    def message(self, name: str) -> MessageDescriptor:
        t = self.type(name)
        if not isinstance(t, MessageDescriptor):
            raise TypeNotFoundError(name)
        return t

    def file_of(self, element: Element) -> FileDescriptor:
        """Return the file declaring ``element``.

        Raises:
            ImportResolutionError: If the element was not part of the run.
        """
        name = element_name(element)
        try:
            return self.parent_file[name]
        except KeyError:
            raise ImportResolutionError(name, "can't find parent file") from None

    def import_spec(self, element: Element) -> ImportSpec:
        """Return the Go import of the package declaring ``element``."""
        return resolve_import(self.file_of(element))

    def comment(self, element: Element) -> str:
        return self.comments.get(element_name(element), '')


def _add_message(
    types: dict[str, ProtoType],
    parent_file: dict[str, FileDescriptor],
    f: FileDescriptor,
    msg: MessageDescriptor,
) -> None:
    types[msg.full_name] = msg
    parent_file[msg.full_name] = f
    for nested in msg.nested_messages:
        _add_message(types, parent_file, f, nested)
    for e in msg.nested_enums:
        types[e.full_name] = e
        parent_file[e.full_name] = f


def _add_comment(
    comments: dict[str, str], f: FileDescriptor, path: tuple[int, ...], text: str
) -> None:
    # A path is [f1, i1, f2, i2, ...]: field number, then index into that
    # repeated field. [6, x] is the xth service, [6, x, 2, y] its yth method.
    match path:
        case (n, s) if n == SERVICE_FIELD_NUMBER:
            if 0 <= s < len(f.services):
                comments[f.services[s].full_name] = text
        case (n, s, mn, m) if n == SERVICE_FIELD_NUMBER and mn == METHOD_FIELD_NUMBER:
            if 0 <= s < len(f.services) and 0 <= m < len(f.services[s].methods):
                comments[f.services[s].methods[m].full_name] = text
        case _:
            pass
