from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from gapicgen.codegen.codegen import Codegen
from gapicgen.config import GeneratorSettings, RequestConfig, get_config
from gapicgen.exceptions import GapicGenError
from gapicgen.plugin import configure_logging

console = Console()
app = typer.Typer(
    name='gapicgen',
    help='Generate Go GAPIC clients from protobuf service descriptors',
    no_args_is_help=True,
)


@app.command()
def generate(
    config: Annotated[
        str | None,
        typer.Option('--config', '-c', help='Path to configuration file (YAML)'),
    ] = None,
    source: Annotated[
        str | None,
        typer.Option(
            '--source', '-s', help='Serialized CodeGeneratorRequest or FileDescriptorSet'
        ),
    ] = None,
    output: Annotated[
        str | None, typer.Option('--output', '-o', help='Output directory')
    ] = None,
    parameter: Annotated[
        str | None,
        typer.Option(
            '--parameter', '-p', help='Plugin parameter: client/import/path;packageName'
        ),
    ] = None,
    descriptor_set: Annotated[
        bool,
        typer.Option(
            '--descriptor-set', help='Read --source as a FileDescriptorSet'
        ),
    ] = False,
) -> None:
    """Generate Go clients outside of protoc.

    Either pass a single request on the command line, or describe several
    in a configuration file. Without both, default config files in the
    current directory are used.

    Examples:
        gapicgen generate
        gapicgen generate --config gapicgen.yaml
        gapicgen generate -s request.bin -o ./out -p 'example.com/library;library'
        gapicgen generate -s library.pb --descriptor-set -o ./out -p 'example.com/library;library'
    """
    settings = GeneratorSettings()
    configure_logging(settings.log_level)

    try:
        if source:
            if not output or not parameter:
                raise typer.BadParameter('--source requires --output and --parameter')
            requests = [
                RequestConfig(
                    source=source,
                    output=output,
                    parameter=parameter,
                    kind='descriptor_set' if descriptor_set else 'request',
                )
            ]
        else:
            requests = get_config(config).requests

        for request_config in requests:
            with Progress(
                SpinnerColumn(),
                TextColumn('[progress.description]{task.description}'),
                console=console,
            ) as progress:
                task = progress.add_task(
                    f'Generating clients for {request_config.source} in {request_config.output}...',
                    total=None,
                )

                written = Codegen(request_config, settings).generate()

                progress.update(
                    task,
                    description=f'Code generation completed for {request_config.source}!',
                )
            console.print('[dim]Generated files:[/dim]')
            for path in written:
                console.print(f'  - {path}')

        console.print('[green]Successfully generated code[/green]')

    except GapicGenError as e:
        console.print(f'[red]Error:[/red] {e.message}')
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show the version of gapicgen."""
    from gapicgen._version import version

    console.print(f'gapicgen version: {version}')


if __name__ == '__main__':
    app()
