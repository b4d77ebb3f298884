"""Test offline generation from requests stored on disk."""

import pytest
from google.protobuf import descriptor_pb2

from gapicgen.codegen.codegen import Codegen
from gapicgen.config import GeneratorSettings, RequestConfig
from gapicgen.exceptions import ConfigurationError, GapicGenError
from gapicgen.plugin import build_request

from .fixtures import PARAMETER, library_protos

CLIENT_FILE = 'cloud.google.com/go/library/apiv1/library_client.go'


@pytest.fixture
def settings():
    return GeneratorSettings(license_year=2024)


@pytest.fixture
def request_file(tmp_path):
    path = tmp_path / 'request.bin'
    # The stored parameter is replaced by the configured one.
    path.write_bytes(build_request(library_protos(), 'ignored;ignored').SerializeToString())
    return path


@pytest.fixture
def descriptor_set_file(tmp_path):
    path = tmp_path / 'library.pb'
    fds = descriptor_pb2.FileDescriptorSet(file=library_protos())
    path.write_bytes(fds.SerializeToString())
    return path


def _config(source, output, **kwargs):
    return RequestConfig(source=str(source), output=str(output), parameter=PARAMETER, **kwargs)


class TestLoadRequest:
    """Tests for Codegen.load_request."""

    def test_request_parameter_is_overridden(self, request_file, tmp_path, settings):
        request = Codegen(_config(request_file, tmp_path), settings).load_request()
        assert request.parameter == PARAMETER
        assert list(request.file_to_generate) == [
            'google/example/library/v1/library.proto'
        ]

    def test_request_files_to_generate_override(self, request_file, tmp_path, settings):
        config = _config(request_file, tmp_path, files_to_generate=[])
        request = Codegen(config, settings).load_request()
        assert list(request.file_to_generate) == []

    def test_descriptor_set(self, descriptor_set_file, tmp_path, settings):
        config = _config(descriptor_set_file, tmp_path, kind='descriptor_set')
        request = Codegen(config, settings).load_request()
        assert len(request.proto_file) == 3
        assert list(request.file_to_generate) == [
            'google/example/library/v1/library.proto'
        ]

    def test_missing_source(self, tmp_path, settings):
        config = _config(tmp_path / 'missing.bin', tmp_path)
        with pytest.raises(ConfigurationError) as exc_info:
            Codegen(config, settings).load_request()
        assert exc_info.value.field == 'source'

    def test_undecodable_source(self, tmp_path, settings):
        source = tmp_path / 'garbage.bin'
        source.write_bytes(b'\xff\xff\xff\xff')
        with pytest.raises(ConfigurationError, match='cannot decode request'):
            Codegen(_config(source, tmp_path), settings).load_request()


class TestGenerate:
    """Tests for Codegen.generate."""

    def test_writes_client_and_doc(self, request_file, tmp_path, settings):
        out = tmp_path / 'out'
        written = Codegen(_config(request_file, out), settings).generate()

        assert sorted(p.name for p in written) == ['doc.go', 'library_client.go']
        client = (out / CLIENT_FILE).read_text()
        assert client.startswith('// Copyright 2024 Google LLC\n')
        assert 'package library\n\nimport (\n' in client
        assert ')\n\n// CallOptions contains the retry settings' in client
        assert 'func NewClient(ctx context.Context' in client

    def test_generation_error(self, tmp_path, settings):
        source = tmp_path / 'request.bin'
        request = build_request(library_protos(default_host=None), PARAMETER)
        source.write_bytes(request.SerializeToString())

        with pytest.raises(GapicGenError, match='google.api.default_host'):
            Codegen(_config(source, tmp_path / 'out'), settings).generate()
        assert not (tmp_path / 'out').exists()

    def test_default_settings(self, request_file, tmp_path):
        codegen = Codegen(_config(request_file, tmp_path))
        assert isinstance(codegen.settings, GeneratorSettings)
