"""Call-shape classification of RPC methods.

Every method is assigned exactly one :class:`CallShape`, which selects the
generator that emits its client method. Long-running operations are
recognized by output type alone, pagination by the structure of the request
and response messages, and the remaining shapes by the streaming flags.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from gapicgen.codegen.imports import ImportSpec
from gapicgen.codegen.index import DescriptorIndex
from gapicgen.codegen.utils import upper_first
from gapicgen.descriptors import (
    FieldDescriptor,
    FieldKind,
    MessageDescriptor,
    MethodDescriptor,
    go_type_name,
)
from gapicgen.exceptions import PagingShapeError, UnsupportedFeatureError

logger = logging.getLogger(__name__)

__all__ = [
    'EMPTY_TYPE',
    'LRO_TYPE',
    'CallShape',
    'Classification',
    'IterType',
    'classify',
    'is_empty_response',
    'iter_type_of',
    'paging_field',
]

LRO_TYPE = '.google.longrunning.Operation'
EMPTY_TYPE = '.google.protobuf.Empty'

PRIMITIVE_GO_TYPES: dict[FieldKind, str] = {
    FieldKind.DOUBLE: 'float64',
    FieldKind.FLOAT: 'float32',
    FieldKind.INT64: 'int64',
    FieldKind.UINT64: 'uint64',
    FieldKind.INT32: 'int32',
    FieldKind.FIXED64: 'uint64',
    FieldKind.FIXED32: 'uint32',
    FieldKind.BOOL: 'bool',
    FieldKind.STRING: 'string',
    FieldKind.BYTES: '[]byte',
    FieldKind.UINT32: 'uint32',
    FieldKind.SFIXED32: 'int32',
    FieldKind.SFIXED64: 'int64',
    FieldKind.SINT32: 'int32',
    FieldKind.SINT64: 'int64',
}


class CallShape(Enum):
    UNARY = 'unary'
    SERVER_STREAMING = 'server_streaming'
    CLIENT_STREAMING = 'client_streaming'
    BIDI_STREAMING = 'bidi_streaming'
    PAGED_UNARY = 'paged_unary'
    LONG_RUNNING = 'long_running'

    @property
    def is_streaming(self) -> bool:
        return self in (
            CallShape.SERVER_STREAMING,
            CallShape.CLIENT_STREAMING,
            CallShape.BIDI_STREAMING,
        )


@dataclass(frozen=True)
class Classification:
    """The call shape of a method.

    Attributes:
        shape: The assigned call shape.
        paging_field: For PAGED_UNARY, the repeated response field iterated
            over. None for every other shape.
    """

    shape: CallShape
    paging_field: FieldDescriptor | None = None


@dataclass
class IterType:
    """Iterator type returned by a paging method.

    Attributes:
        iter_type_name: Go name of the iterator (``BookIterator``).
        elem_type_name: Go type of one element (``*librarypb.Book``).
        elem_imports: Imports the element type needs; empty for primitives.
    """

    iter_type_name: str
    elem_type_name: str
    elem_imports: list[ImportSpec] = field(default_factory=list)


def _has_field(msg: MessageDescriptor, name: str, kind: FieldKind) -> bool:
    f = msg.field(name)
    return f is not None and f.kind == kind


def paging_field(
    method: MethodDescriptor,
    input_type: MessageDescriptor,
    output_type: MessageDescriptor,
) -> FieldDescriptor | None:
    """Report the resource field iterated over by a paging method.

    A method pages when its request has ``page_size`` (int32) and
    ``page_token`` (string) and its response has ``next_page_token``
    (string).

    Returns:
        The single repeated field of the response, or None when the method
        does not page.

    Raises:
        PagingShapeError: If the method pages but the response has zero or
            several repeated fields.
    """
    if not (
        _has_field(input_type, 'page_size', FieldKind.INT32)
        and _has_field(input_type, 'page_token', FieldKind.STRING)
        and _has_field(output_type, 'next_page_token', FieldKind.STRING)
    ):
        return None

    elem_fields = output_type.repeated_fields
    if not elem_fields:
        raise PagingShapeError(
            method.name, output_type.name, "can't find repeated field"
        )
    if len(elem_fields) > 1:
        raise PagingShapeError(
            method.name, output_type.name, 'too many repeated fields'
        )
    return elem_fields[0]


def classify(
    method: MethodDescriptor,
    input_type: MessageDescriptor,
    output_type: MessageDescriptor,
) -> Classification:
    """Assign a call shape to ``method``.

    The first matching rule wins: long-running output type, then paging
    structure, then the streaming flags.
    """
    if method.output_type == LRO_TYPE:
        return Classification(CallShape.LONG_RUNNING)

    pf = paging_field(method, input_type, output_type)
    if pf is not None:
        return Classification(CallShape.PAGED_UNARY, paging_field=pf)

    if method.client_streaming and method.server_streaming:
        return Classification(CallShape.BIDI_STREAMING)
    if method.server_streaming:
        return Classification(CallShape.SERVER_STREAMING)
    if method.client_streaming:
        return Classification(CallShape.CLIENT_STREAMING)
    return Classification(CallShape.UNARY)


def is_empty_response(method: MethodDescriptor) -> bool:
    return method.output_type == EMPTY_TYPE


def iter_type_of(elem_field: FieldDescriptor, index: DescriptorIndex) -> IterType:
    """Deduce the iterator type for the resource field of a paging method.

    Raises:
        UnsupportedFeatureError: For enum elements and unknown field kinds.
    """
    match elem_field.kind:
        case FieldKind.MESSAGE:
            elem = index.message(elem_field.type_name)
            imp = index.import_spec(elem)
            name = go_type_name(elem)
            return IterType(
                iter_type_name=f'{name}Iterator',
                elem_type_name=f'*{imp.name}.{name}',
                elem_imports=[imp],
            )
        case FieldKind.ENUM:
            raise UnsupportedFeatureError('iterating enum not supported yet')
        case FieldKind.BYTES:
            return IterType(iter_type_name='BytesIterator', elem_type_name='[]byte')
        case kind if kind in PRIMITIVE_GO_TYPES:
            go_type = PRIMITIVE_GO_TYPES[kind]
            return IterType(
                iter_type_name=f'{upper_first(go_type)}Iterator',
                elem_type_name=go_type,
            )
        case kind:
            raise UnsupportedFeatureError(f'unrecognized field type: {kind!r}')
