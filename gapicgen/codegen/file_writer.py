"""File writing utilities for generated Go code.

Response entries follow the protoc convention: an entry without a name
continues the most recent named entry. The writer folds entries back into
whole files before writing them.
"""

from collections.abc import Iterable
from pathlib import Path

from upath import UPath

from gapicgen.codegen.generator import GeneratedFile
from gapicgen.exceptions import OutputError

__all__ = ['GoFileWriter', 'merge_entries']


def merge_entries(entries: Iterable[GeneratedFile]) -> dict[str, str]:
    """Fold response entries into file name to full content.

    Raises:
        OutputError: If the first entry has no name to append to.
    """
    files: dict[str, list[str]] = {}
    current: str | None = None
    for entry in entries:
        if entry.name is not None:
            current = entry.name
            files.setdefault(current, [])
        elif current is None:
            raise OutputError('<response>', ValueError('unnamed first file entry'))
        files[current].append(entry.content)
    return {name: ''.join(parts) for name, parts in files.items()}


class GoFileWriter:
    """Writes generated files below an output directory.

    Example:
        >>> writer = GoFileWriter('./out')
        >>> writer.write_all(files)
        [UPath('out/example.com/library/library_client.go'), ...]
    """

    def __init__(self, directory: UPath | Path | str):
        self.directory = UPath(directory)

    def write(self, name: str, content: str) -> UPath:
        """Write one file, creating parent directories as needed.

        Raises:
            OutputError: If the file cannot be written.
        """
        path = self.directory / name
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise OutputError(str(path), e) from e
        return path

    def write_all(self, entries: Iterable[GeneratedFile]) -> list[UPath]:
        return [
            self.write(name, content)
            for name, content in merge_entries(entries).items()
        ]
