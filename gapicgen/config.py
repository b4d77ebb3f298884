import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gapicgen.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['gapicgen.yaml', 'gapicgen.yml']

PARAMETER_FORMAT = 'need parameter in format: client/import/path;packageName'


class GeneratorConfig(BaseModel):
    """Where the generated Go package lives.

    Built from the protoc plugin parameter ``<import/path>;<package>``.
    """

    import_path: str = Field(
        ..., description='Go import path of the generated client package.'
    )

    package_name: str = Field(
        ..., description='Go package name of the generated client package.'
    )

    @property
    def out_dir(self) -> str:
        """Output directory of the generated files, relative to protoc's out dir."""
        return self.import_path

    def join(self, file_name: str) -> str:
        if not self.out_dir:
            return file_name
        return f'{self.out_dir.rstrip("/")}/{file_name}'

    @classmethod
    def from_parameter(cls, parameter: str | None) -> 'GeneratorConfig':
        """Parse the plugin parameter.

        Raises:
            ConfigurationError: If the parameter is missing or has no ``;``.
        """
        if not parameter or ';' not in parameter:
            raise ConfigurationError(PARAMETER_FORMAT)
        import_path, _, package_name = parameter.partition(';')
        return cls(import_path=import_path, package_name=package_name)


class GeneratorSettings(BaseSettings):
    """Settings read from ``GAPICGEN_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix='GAPICGEN_')

    log_level: str = Field('WARNING', description='Level of the stderr log.')

    license_year: int | None = Field(
        None,
        description='Copyright year of the license header. Defaults to the current year.',
    )

    license_holder: str = Field(
        'Google LLC', description='Copyright holder of the license header.'
    )


class RequestConfig(BaseModel):
    """A serialized request to run the generator on, outside of protoc."""

    source: str = Field(
        ...,
        description='Path to a serialized CodeGeneratorRequest or FileDescriptorSet.',
    )

    output: str = Field(..., description='Output directory for the generated code.')

    parameter: str = Field(
        ..., description='Plugin parameter, in the form client/import/path;packageName.'
    )

    kind: Literal['request', 'descriptor_set'] = Field(
        'request', description='Encoding of the source file.'
    )

    files_to_generate: list[str] | None = Field(
        None,
        description='Files of a descriptor set to generate. Defaults to every file declaring a service.',
    )


class CodegenConfig(BaseSettings):
    requests: list[RequestConfig] = Field(
        ..., description='List of generation requests to process.'
    )


def load_yaml(path: str | Path) -> dict:
    import yaml

    return yaml.load(Path(path).read_text(), Loader=yaml.FullLoader)


def get_config(path: str | None = None) -> CodegenConfig:
    """Load configuration from a file or from the current directory."""
    if path:
        return CodegenConfig.model_validate(load_yaml(path))

    cwd = os.getcwd()

    for filename in DEFAULT_FILENAMES:
        path = Path(cwd) / filename
        if path.exists():
            return CodegenConfig.model_validate(load_yaml(path))

    path = Path(os.getcwd()) / 'pyproject.toml'

    if path.exists():
        import tomllib

        pyproject = tomllib.loads(path.read_text())
        tools = pyproject.get('tool', {})

        if 'gapicgen' in tools:
            return CodegenConfig.model_validate(tools['gapicgen'])

    raise ConfigurationError('config not found', config_path=cwd)
