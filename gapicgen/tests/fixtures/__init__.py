"""Test fixtures for gapicgen tests.

This module provides a small library API, both as the typed descriptor model
and as the ``descriptor_pb2`` protos protoc would send, plus helpers to build
variations of it.
"""

from google.api import annotations_pb2, client_pb2
from google.protobuf import descriptor_pb2

from gapicgen.codegen.generator import Generator
from gapicgen.codegen.index import DescriptorIndex
from gapicgen.config import GeneratorConfig, GeneratorSettings
from gapicgen.descriptors import (
    FieldDescriptor,
    FieldKind,
    FileDescriptor,
    HttpRule,
    MessageDescriptor,
    MethodDescriptor,
    ServiceDescriptor,
    SourceLocation,
)

LIBRARY_PACKAGE = 'google.example.library.v1'
LIBRARY_GO_PACKAGE = 'google.golang.org/genproto/googleapis/example/library/v1'
LIBRARY_HOST = 'library.googleapis.com'
LIBRARY_SCOPES = (
    'https://www.googleapis.com/auth/cloud-platform',
    'https://www.googleapis.com/auth/library.readonly',
)
PARAMETER = 'cloud.google.com/go/library/apiv1;library'


def field(
    name: str,
    number: int,
    kind: FieldKind,
    repeated: bool = False,
    type_name: str = '',
) -> FieldDescriptor:
    return FieldDescriptor(
        name=name, number=number, kind=kind, repeated=repeated, type_name=type_name
    )


def message(
    name: str, *fields: FieldDescriptor, package: str = LIBRARY_PACKAGE
) -> MessageDescriptor:
    return MessageDescriptor(name=name, full_name=f'.{package}.{name}', fields=fields)


def _qualify(type_name: str) -> str:
    if type_name.startswith('.'):
        return type_name
    return f'.{LIBRARY_PACKAGE}.{type_name}'


def method(
    name: str,
    input_type: str,
    output_type: str,
    http: HttpRule | None = None,
    client_streaming: bool = False,
    server_streaming: bool = False,
    service: str = 'LibraryService',
) -> MethodDescriptor:
    return MethodDescriptor(
        name=name,
        full_name=f'.{LIBRARY_PACKAGE}.{service}.{name}',
        input_type=_qualify(input_type),
        output_type=_qualify(output_type),
        client_streaming=client_streaming,
        server_streaming=server_streaming,
        http=http,
    )


BOOK = message(
    'Book',
    field('name', 1, FieldKind.STRING),
    field('title', 2, FieldKind.STRING),
)
GET_BOOK_REQUEST = message('GetBookRequest', field('name', 1, FieldKind.STRING))
LIST_BOOKS_REQUEST = message(
    'ListBooksRequest',
    field('parent', 1, FieldKind.STRING),
    field('page_size', 2, FieldKind.INT32),
    field('page_token', 3, FieldKind.STRING),
)
LIST_BOOKS_RESPONSE = message(
    'ListBooksResponse',
    field('books', 1, FieldKind.MESSAGE, repeated=True, type_name=BOOK.full_name),
    field('next_page_token', 2, FieldKind.STRING),
)
DELETE_BOOK_REQUEST = message('DeleteBookRequest', field('name', 1, FieldKind.STRING))
WATCH_REQUEST = message('WatchRequest', field('name', 1, FieldKind.STRING))
WATCH_RESPONSE = message(
    'WatchResponse', field('book', 1, FieldKind.MESSAGE, type_name=BOOK.full_name)
)
EXPORT_BOOKS_REQUEST = message(
    'ExportBooksRequest', field('parent', 1, FieldKind.STRING)
)

EMPTY = message('Empty', package='google.protobuf')
OPERATION = message(
    'Operation', field('name', 1, FieldKind.STRING), package='google.longrunning'
)

GET_BOOK = method(
    'GetBook', 'GetBookRequest', 'Book', http=HttpRule('GET', '/v1/{name=shelves/*/books/*}')
)
LIST_BOOKS = method(
    'ListBooks',
    'ListBooksRequest',
    'ListBooksResponse',
    http=HttpRule('GET', '/v1/{parent=shelves/*}/books'),
)
DELETE_BOOK = method(
    'DeleteBook',
    'DeleteBookRequest',
    '.google.protobuf.Empty',
    http=HttpRule('DELETE', '/v1/{name=shelves/*/books/*}'),
)
WATCH = method(
    'Watch',
    'WatchRequest',
    'WatchResponse',
    http=HttpRule('GET', '/v1/{name=shelves/*/books/*}:watch'),
    server_streaming=True,
)
CHAT = method(
    'Chat', 'WatchRequest', 'WatchResponse', client_streaming=True, server_streaming=True
)
UPLOAD_BOOKS = method('UploadBooks', 'Book', 'Book', client_streaming=True)
EXPORT_BOOKS = method(
    'ExportBooks',
    'ExportBooksRequest',
    '.google.longrunning.Operation',
    http=HttpRule('POST', '/v1/{parent=shelves/*}:export', body='*'),
)

LIBRARY_SERVICE = ServiceDescriptor(
    name='LibraryService',
    full_name=f'.{LIBRARY_PACKAGE}.LibraryService',
    methods=(GET_BOOK, LIST_BOOKS, DELETE_BOOK, WATCH, CHAT, UPLOAD_BOOKS, EXPORT_BOOKS),
    default_host=LIBRARY_HOST,
    oauth_scopes=LIBRARY_SCOPES,
)

LIBRARY_FILE = FileDescriptor(
    name='google/example/library/v1/library.proto',
    package=LIBRARY_PACKAGE,
    go_package=LIBRARY_GO_PACKAGE,
    messages=(
        BOOK,
        GET_BOOK_REQUEST,
        LIST_BOOKS_REQUEST,
        LIST_BOOKS_RESPONSE,
        DELETE_BOOK_REQUEST,
        WATCH_REQUEST,
        WATCH_RESPONSE,
        EXPORT_BOOKS_REQUEST,
    ),
    services=(LIBRARY_SERVICE,),
    locations=(
        SourceLocation(path=(6, 0), leading_comments=' Manages a collection of books.\n'),
        SourceLocation(path=(6, 0, 2, 0), leading_comments=' Gets a book.\n'),
        SourceLocation(path=(6, 0, 2, 1), leading_comments=' Lists books in a shelf.\n'),
    ),
)

EMPTY_FILE = FileDescriptor(
    name='google/protobuf/empty.proto',
    package='google.protobuf',
    go_package='google.golang.org/protobuf/types/known/emptypb',
    messages=(EMPTY,),
)

OPERATIONS_FILE = FileDescriptor(
    name='google/longrunning/operations.proto',
    package='google.longrunning',
    go_package='cloud.google.com/go/longrunning/autogen/longrunningpb;longrunning',
    messages=(OPERATION,),
)

ALL_FILES = (EMPTY_FILE, OPERATIONS_FILE, LIBRARY_FILE)


def library_file(*methods: MethodDescriptor, messages=None, **service_kwargs) -> FileDescriptor:
    """The library file with its service replaced by one with ``methods``."""
    service = ServiceDescriptor(
        name=service_kwargs.pop('name', 'LibraryService'),
        full_name=f'.{LIBRARY_PACKAGE}.LibraryService',
        methods=methods,
        default_host=service_kwargs.pop('default_host', LIBRARY_HOST),
        **service_kwargs,
    )
    return FileDescriptor(
        name=LIBRARY_FILE.name,
        package=LIBRARY_PACKAGE,
        go_package=LIBRARY_GO_PACKAGE,
        messages=LIBRARY_FILE.messages if messages is None else messages,
        services=(service,),
    )


# descriptor_pb2 form, as protoc sends it


def _pb_field(msg, name, number, type_, label=1, type_name=''):
    f = msg.field.add(name=name, number=number, type=type_, label=label)
    if type_name:
        f.type_name = type_name
    return f


def empty_proto() -> descriptor_pb2.FileDescriptorProto:
    f = descriptor_pb2.FileDescriptorProto(
        name='google/protobuf/empty.proto', package='google.protobuf', syntax='proto3'
    )
    f.options.go_package = 'google.golang.org/protobuf/types/known/emptypb'
    f.message_type.add(name='Empty')
    return f


def operations_proto() -> descriptor_pb2.FileDescriptorProto:
    f = descriptor_pb2.FileDescriptorProto(
        name='google/longrunning/operations.proto',
        package='google.longrunning',
        syntax='proto3',
    )
    f.options.go_package = (
        'cloud.google.com/go/longrunning/autogen/longrunningpb;longrunning'
    )
    op = f.message_type.add(name='Operation')
    _pb_field(op, 'name', 1, descriptor_pb2.FieldDescriptorProto.TYPE_STRING)
    return f


def library_proto(
    default_host: str | None = LIBRARY_HOST,
    go_package: str = LIBRARY_GO_PACKAGE,
) -> descriptor_pb2.FileDescriptorProto:
    """The library API as a ``FileDescriptorProto`` with google.api annotations."""
    T = descriptor_pb2.FieldDescriptorProto
    REPEATED = T.LABEL_REPEATED

    f = descriptor_pb2.FileDescriptorProto(
        name='google/example/library/v1/library.proto',
        package=LIBRARY_PACKAGE,
        syntax='proto3',
        dependency=['google/protobuf/empty.proto', 'google/longrunning/operations.proto'],
    )
    if go_package:
        f.options.go_package = go_package

    book = f.message_type.add(name='Book')
    _pb_field(book, 'name', 1, T.TYPE_STRING)
    _pb_field(book, 'title', 2, T.TYPE_STRING)
    kind = book.enum_type.add(name='Kind')
    kind.value.add(name='KIND_UNSPECIFIED', number=0)
    kind.value.add(name='NOVEL', number=1)
    page = book.nested_type.add(name='Page')
    _pb_field(page, 'number', 1, T.TYPE_INT32)

    req = f.message_type.add(name='GetBookRequest')
    _pb_field(req, 'name', 1, T.TYPE_STRING)

    req = f.message_type.add(name='ListBooksRequest')
    _pb_field(req, 'parent', 1, T.TYPE_STRING)
    _pb_field(req, 'page_size', 2, T.TYPE_INT32)
    _pb_field(req, 'page_token', 3, T.TYPE_STRING)

    resp = f.message_type.add(name='ListBooksResponse')
    _pb_field(resp, 'books', 1, T.TYPE_MESSAGE, REPEATED, f'.{LIBRARY_PACKAGE}.Book')
    _pb_field(resp, 'next_page_token', 2, T.TYPE_STRING)

    req = f.message_type.add(name='DeleteBookRequest')
    _pb_field(req, 'name', 1, T.TYPE_STRING)

    service = f.service.add(name='LibraryService')
    if default_host is not None:
        service.options.Extensions[client_pb2.default_host] = default_host
    service.options.Extensions[client_pb2.oauth_scopes] = ','.join(LIBRARY_SCOPES)

    m = service.method.add(
        name='GetBook',
        input_type=f'.{LIBRARY_PACKAGE}.GetBookRequest',
        output_type=f'.{LIBRARY_PACKAGE}.Book',
    )
    m.options.Extensions[annotations_pb2.http].get = '/v1/{name=shelves/*/books/*}'

    m = service.method.add(
        name='ListBooks',
        input_type=f'.{LIBRARY_PACKAGE}.ListBooksRequest',
        output_type=f'.{LIBRARY_PACKAGE}.ListBooksResponse',
    )
    m.options.Extensions[annotations_pb2.http].get = '/v1/{parent=shelves/*}/books'

    m = service.method.add(
        name='DeleteBook',
        input_type=f'.{LIBRARY_PACKAGE}.DeleteBookRequest',
        output_type='.google.protobuf.Empty',
    )
    m.options.Extensions[annotations_pb2.http].delete = '/v1/{name=shelves/*/books/*}'

    m = service.method.add(
        name='ExportBooks',
        input_type=f'.{LIBRARY_PACKAGE}.ListBooksRequest',
        output_type='.google.longrunning.Operation',
    )
    rule = m.options.Extensions[annotations_pb2.http]
    rule.custom.kind = 'EXPORT'
    rule.custom.path = '/v1/{parent=shelves/*}:export'

    service.method.add(
        name='Watch',
        input_type=f'.{LIBRARY_PACKAGE}.GetBookRequest',
        output_type=f'.{LIBRARY_PACKAGE}.Book',
        server_streaming=True,
    )

    loc = f.source_code_info.location.add(path=[6, 0])
    loc.leading_comments = ' Manages a collection of books.\n'
    loc = f.source_code_info.location.add(path=[6, 0, 2, 1])
    loc.leading_comments = ' Lists books in a shelf.\n'
    # No leading comment; must be skipped.
    f.source_code_info.location.add(path=[4, 0])
    return f


def library_protos(**kwargs) -> list[descriptor_pb2.FileDescriptorProto]:
    """Every file of the library request, in dependency order."""
    return [empty_proto(), operations_proto(), library_proto(**kwargs)]


def make_generator(files=ALL_FILES, parameter: str = PARAMETER) -> Generator:
    """A generator over ``files`` with a fixed license year."""
    return Generator(
        DescriptorIndex.build(files),
        GeneratorConfig.from_parameter(parameter),
        GeneratorSettings(license_year=2024),
    )
