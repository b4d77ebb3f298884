"""Typed descriptor model consumed by the generator.

The protoc request carries raw ``descriptor_pb2`` messages. They are converted
once, by :mod:`gapicgen.descriptor_loader`, into the immutable dataclasses
below so the rest of the generator never touches protobuf reflection or
extension lookups. Annotations are exposed as plain optional attributes:
``method.http is None`` means the method has no HTTP binding.

Fully-qualified names keep protoc's convention of a leading dot
(``.google.example.library.v1.Book``).
"""

from dataclasses import dataclass
from enum import IntEnum


class FieldKind(IntEnum):
    """Protobuf field types, numbered as in ``FieldDescriptorProto.Type``."""

    DOUBLE = 1
    FLOAT = 2
    INT64 = 3
    UINT64 = 4
    INT32 = 5
    FIXED64 = 6
    FIXED32 = 7
    BOOL = 8
    STRING = 9
    GROUP = 10
    MESSAGE = 11
    BYTES = 12
    UINT32 = 13
    ENUM = 14
    SFIXED32 = 15
    SFIXED64 = 16
    SINT32 = 17
    SINT64 = 18


@dataclass(frozen=True)
class HttpRule:
    """The ``google.api.http`` binding of a method.

    Attributes:
        verb: Upper-case HTTP verb (``GET``, ``POST``, ...). Custom verbs keep
            the kind declared in the rule.
        path: The URL path template.
        body: The request field mapped to the HTTP body, if any.
        custom: Whether the binding is a ``custom`` pattern. Its verb is
            free-form and never matches a standard one.
    """

    verb: str
    path: str
    body: str = ''
    custom: bool = False


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    number: int
    kind: FieldKind
    repeated: bool = False
    type_name: str = ''


@dataclass(frozen=True)
class EnumDescriptor:
    name: str
    full_name: str
    values: tuple[str, ...] = ()
    go_name: str = ''

    def __post_init__(self):
        if not self.go_name:
            object.__setattr__(self, 'go_name', self.name)


@dataclass(frozen=True)
class MessageDescriptor:
    """A message type.

    Attributes:
        name: The short name, as declared.
        full_name: Fully-qualified name with a leading dot.
        fields: Fields in declaration order.
        nested_messages: Messages declared inside this one.
        nested_enums: Enums declared inside this one.
        go_name: Name of the generated Go type. Nested types join their
            parents with an underscore (``Outer_Inner``).
    """

    name: str
    full_name: str
    fields: tuple[FieldDescriptor, ...] = ()
    nested_messages: tuple['MessageDescriptor', ...] = ()
    nested_enums: tuple[EnumDescriptor, ...] = ()
    go_name: str = ''

    def __post_init__(self):
        if not self.go_name:
            object.__setattr__(self, 'go_name', self.name)

    def field(self, name: str) -> FieldDescriptor | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def repeated_fields(self) -> list[FieldDescriptor]:
        return [f for f in self.fields if f.repeated]


@dataclass(frozen=True)
class MethodDescriptor:
    name: str
    full_name: str
    input_type: str
    output_type: str
    client_streaming: bool = False
    server_streaming: bool = False
    http: HttpRule | None = None


@dataclass(frozen=True)
class ServiceDescriptor:
    """A service and its methods.

    Attributes:
        default_host: Value of ``google.api.default_host``, or None when the
            service is not annotated.
        oauth_scopes: Scopes listed by ``google.api.oauth_scopes``.
    """

    name: str
    full_name: str
    methods: tuple[MethodDescriptor, ...] = ()
    default_host: str | None = None
    oauth_scopes: tuple[str, ...] = ()


@dataclass(frozen=True)
class SourceLocation:
    """One ``SourceCodeInfo.Location`` entry that carries a leading comment."""

    path: tuple[int, ...]
    leading_comments: str


@dataclass(frozen=True)
class FileDescriptor:
    """A ``.proto`` file.

    Attributes:
        name: File name as given to protoc (``google/example/library.proto``).
        package: The protobuf package.
        go_package: Value of ``option go_package``; empty when unset.
        locations: Source locations with leading comments.
    """

    name: str
    package: str
    go_package: str = ''
    messages: tuple[MessageDescriptor, ...] = ()
    enums: tuple[EnumDescriptor, ...] = ()
    services: tuple[ServiceDescriptor, ...] = ()
    locations: tuple[SourceLocation, ...] = ()


Element = (
    MessageDescriptor
    | EnumDescriptor
    | ServiceDescriptor
    | MethodDescriptor
    | FieldDescriptor
)


def element_name(element: Element) -> str:
    """Return the name used to key and report an element."""
    match element:
        case (
            MessageDescriptor()
            | EnumDescriptor()
            | ServiceDescriptor()
            | MethodDescriptor()
        ):
            return element.full_name
        case FieldDescriptor():
            return element.name
        case _:
            raise TypeError(f'not a descriptor element: {element!r}')


def go_type_name(element: MessageDescriptor | EnumDescriptor) -> str:
    """Return the Go type name generated for a message or enum."""
    match element:
        case MessageDescriptor() | EnumDescriptor():
            return element.go_name or element.name
        case _:
            raise TypeError(f'{element!r} does not name a Go type')
