"""Auto-indenting text emitter for generated Go source.

Every per-shape generator writes through a :class:`CodeEmitter`. The emitter
is line oriented: each :meth:`CodeEmitter.emit` call produces one line, and
indentation follows the curly braces found at the start and end of lines.
Generators may indent their templates freely for readability; leading and
trailing whitespace in a template is ignored.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from io import StringIO

__all__ = ['CodeEmitter']


class CodeEmitter:
    """Accumulates Go source text, tracking indentation from braces.

    Before a line is written, the indentation level drops by one for every
    leading ``}``; after it is written, the level rises by one for every
    trailing ``{``. This is a heuristic: braces inside string literals at
    the edges of a line will confuse it. Callers that hit such a case can
    adjust :attr:`indent` or use :meth:`write_raw`.

    One emitter serves exactly one output unit at a time and is not
    thread-safe.

    Example:
        >>> e = CodeEmitter()
        >>> e.emit('func (c *%sClient) Close() error {', 'Foo')
        >>> e.emit('return c.conn.Close()')
        >>> e.emit('}')
        >>> e.getvalue()
        'func (c *FooClient) Close() error {\\n\\treturn c.conn.Close()\\n}\\n'
    """

    def __init__(self, indent_unit: str = '\t'):
        self._buf = StringIO()
        self._indent_unit = indent_unit
        self.indent = 0

    def emit(self, line: str, *args) -> None:
        """Write one line, formatting it with ``%`` when args are given.

        Args:
            line: The line template. Surrounding whitespace is dropped.
            *args: Values interpolated into ``line`` with ``%``-formatting.
                Without args the line is written verbatim, so literal ``%``
                characters need no escaping.
        """
        line = line.strip()
        if not line:
            self._buf.write('\n')
            return

        # Braces are counted on the template, never on interpolated values.
        for ch in line:
            if ch != '}':
                break
            self.indent -= 1

        self._buf.write(self._indent_unit * max(self.indent, 0))
        self._buf.write(line % args if args else line)
        self._buf.write('\n')

        for ch in reversed(line):
            if ch != '{':
                break
            self.indent += 1

    def blank(self) -> None:
        self._buf.write('\n')

    @contextmanager
    def block(self, header: str, *args, closer: str = '}') -> Iterator[None]:
        """Emit ``header``, run the body, then emit ``closer``.

        ``header`` is expected to end with ``{``; the closer dedents it.
        """
        self.emit(header, *args)
        yield
        self.emit(closer)

    def comment(self, text: str) -> None:
        """Emit ``text`` as ``//`` line comments.

        Blank lines inside the text become bare ``//`` lines. Empty text
        emits nothing.
        """
        text = text.strip()
        if not text:
            return
        for line in text.split('\n'):
            if line.strip():
                self.emit('// %s', line.strip())
            else:
                self.emit('//')

    def write_raw(self, text: str) -> None:
        """Write ``text`` to the buffer without indentation or formatting."""
        self._buf.write(text)

    def getvalue(self) -> str:
        return self._buf.getvalue()

    def __len__(self) -> int:
        return len(self._buf.getvalue())

    def reset(self) -> None:
        """Discard all output and return to indentation level zero."""
        self._buf = StringIO()
        self.indent = 0
