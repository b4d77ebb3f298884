"""Test the generation driver."""

import dataclasses
import datetime

import pytest

from gapicgen.codegen.generator import APACHE_LICENSE, GeneratedFile, Generator
from gapicgen.codegen.index import DescriptorIndex
from gapicgen.config import GeneratorConfig, GeneratorSettings
from gapicgen.descriptors import FieldKind, MethodDescriptor, ServiceDescriptor
from gapicgen.exceptions import (
    MethodGenerationError,
    PagingShapeError,
    TypeNotFoundError,
)

from .fixtures import (
    ALL_FILES,
    BOOK,
    EMPTY_FILE,
    GET_BOOK,
    LIBRARY_FILE,
    LIBRARY_SERVICE,
    LIST_BOOKS,
    LIST_BOOKS_REQUEST,
    OPERATIONS_FILE,
    PARAMETER,
    field,
    library_file,
    make_generator,
    message,
    method,
)


@pytest.fixture
def generator():
    return make_generator(files=ALL_FILES)


class TestGenerateService:
    """Tests for Generator.generate_service."""

    def test_named_header_then_unnamed_body(self, generator):
        files = generator.generate_service(LIBRARY_FILE, LIBRARY_SERVICE)
        assert len(files) == 2
        header, body = files
        assert isinstance(header, GeneratedFile)
        assert header.name == 'cloud.google.com/go/library/apiv1/library_client.go'
        assert body.name is None

    def test_header(self, generator):
        header, _ = generator.generate_service(LIBRARY_FILE, LIBRARY_SERVICE)
        assert header.content.startswith('// Copyright 2024 Google LLC\n')
        assert '// Code generated by protoc-gen-gogapic. DO NOT EDIT.\n' in header.content
        assert '\npackage library\n\nimport (\n\t"context"\n\t"math"\n\t"time"\n\n' in (
            header.content
        )
        assert header.content.endswith(')\n\n')

    def test_imports_are_sorted(self, generator):
        header, _ = generator.generate_service(LIBRARY_FILE, LIBRARY_SERVICE)
        content = header.content
        order = [
            '"cloud.google.com/go/longrunning"',
            'lroauto "cloud.google.com/go/longrunning/autogen"',
            'longrunningpb "cloud.google.com/go/longrunning/autogen/longrunningpb"',
            'gax "github.com/googleapis/gax-go/v2"',
            '"google.golang.org/api/iterator"',
            '"google.golang.org/api/option"',
            '"google.golang.org/api/transport"',
            'librarypb "google.golang.org/genproto/googleapis/example/library"',
            '"google.golang.org/grpc"',
            '"google.golang.org/grpc/codes"',
            '"google.golang.org/grpc/metadata"',
            '"google.golang.org/protobuf/proto"',
        ]
        positions = [content.index(f'\t{spec}\n') for spec in order]
        assert positions == sorted(positions)

    def test_body_ends_with_single_newline(self, generator):
        _, body = generator.generate_service(LIBRARY_FILE, LIBRARY_SERVICE)
        assert body.content.endswith('}\n')
        assert not body.content.endswith('\n\n')

    def test_state_is_reset_between_services(self, generator):
        generator.generate_service(LIBRARY_FILE, LIBRARY_SERVICE)
        smaller = dataclasses.replace(LIBRARY_SERVICE, methods=(GET_BOOK,))
        header, body = generator.generate_service(LIBRARY_FILE, smaller)
        assert 'longrunning' not in header.content
        assert body.content.count('type Client struct {') == 1
        assert 'ListBooks' not in body.content

    def test_output_file_name_keeps_service_name(self):
        """The file is named after the service even when the type is just Client."""
        g = make_generator(parameter='cloud.google.com/go/logging/apiv2;logging')
        service = ServiceDescriptor(name='LoggingServiceV2', full_name='.g.LoggingServiceV2')
        assert g.output_file_name(service) == 'cloud.google.com/go/logging/apiv2/logging_client.go'

    def test_output_file_name_without_import_path(self):
        g = make_generator(parameter=';library')
        assert g.output_file_name(LIBRARY_SERVICE) == 'library_client.go'


class TestErrors:
    """Tests for errors raised while generating a service."""

    def test_paging_shape_error_is_wrapped(self):
        response = message(
            'ListBooksResponse',
            field('books', 1, FieldKind.MESSAGE, repeated=True, type_name=BOOK.full_name),
            field('authors', 2, FieldKind.STRING, repeated=True),
            field('next_page_token', 3, FieldKind.STRING),
        )
        f = library_file(LIST_BOOKS, messages=(BOOK, LIST_BOOKS_REQUEST, response))
        g = make_generator(files=(EMPTY_FILE, OPERATIONS_FILE, f))

        with pytest.raises(MethodGenerationError) as exc_info:
            g.generate_service(f, f.services[0])

        error = exc_info.value
        assert error.service == 'LibraryService'
        assert error.method == 'ListBooks'
        assert isinstance(error.cause, PagingShapeError)
        assert 'ListBooks looks like paging method, but too many repeated fields' in str(
            error
        )

    def test_unknown_type_is_wrapped(self):
        f = library_file(method('GetShelf', 'GetShelfRequest', 'Book'))
        g = make_generator(files=(EMPTY_FILE, OPERATIONS_FILE, f))

        with pytest.raises(MethodGenerationError) as exc_info:
            g.generate_service(f, f.services[0])
        assert isinstance(exc_info.value.cause, TypeNotFoundError)
        assert exc_info.value.context == 'LibraryService.GetShelf'


class TestHelpers:
    """Tests for smaller Generator helpers."""

    def test_has_lro(self, generator):
        assert generator.has_lro(LIBRARY_SERVICE)
        assert not generator.has_lro(library_file(GET_BOOK).services[0])

    def test_license_year_defaults_to_current_year(self, monkeypatch):
        monkeypatch.delenv('GAPICGEN_LICENSE_YEAR', raising=False)
        g = Generator(
            DescriptorIndex.build(ALL_FILES), GeneratorConfig.from_parameter(PARAMETER)
        )
        assert g.license_year == datetime.date.today().year

    def test_license_holder(self):
        g = Generator(
            DescriptorIndex.build(ALL_FILES),
            GeneratorConfig.from_parameter(PARAMETER),
            GeneratorSettings(license_year=2019, license_holder='Example Authors'),
        )
        assert g.header().startswith('// Copyright 2019 Example Authors\n')

    def test_header_without_imports(self, generator):
        assert generator.header() == APACHE_LICENSE % (2024, 'Google LLC') + (
            'package library\n\n'
        )

    def test_method_doc_lowers_first_letter(self, generator):
        generator.method_doc(GET_BOOK)
        assert generator.p.getvalue() == '// GetBook gets a book.\n'

    def test_method_doc_skipped_without_comment(self, generator):
        generator.method_doc(
            MethodDescriptor(
                name='Undocumented',
                full_name='.x.Undocumented',
                input_type='',
                output_type='',
            )
        )
        assert generator.p.getvalue() == ''
