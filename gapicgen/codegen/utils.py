import json
import re

__all__ = (
    'camel_to_snake',
    'go_quote',
    'grpc_client_field',
    'lower_first',
    'reduce_serv_name',
    'snake_to_camel',
    'spaces',
    'upper_first',
)

_TRAILING_VERSION = re.compile(r'V\d*$')


def upper_first(input_string: str) -> str:
    if not input_string:
        return ''
    return input_string[0].upper() + input_string[1:]


def lower_first(input_string: str) -> str:
    if not input_string:
        return ''
    return input_string[0].lower() + input_string[1:]


def camel_to_snake(name: str) -> str:
    """Convert CamelCase to snake_case, one underscore per upper-case letter.

    Consecutive capitals are not grouped, so ``ListHTTP`` becomes
    ``list_h_t_t_p``; generated file names rely on this exact behavior.
    """
    out = []
    for i, ch in enumerate(name):
        if ch.isupper() and i != 0:
            out.append('_')
        out.append(ch.lower())
    return ''.join(out)


def snake_to_camel(name: str) -> str:
    """Convert a protobuf field name to the Go field name protoc-gen-go uses.

    An underscore is dropped only before a lower-case letter, and a letter
    after a digit starts a new word, so ``items_2d`` becomes ``Items_2D``.
    A leading underscore becomes ``X``.
    """
    out = []
    i = 0
    while i < len(name):
        c = name[i]
        nxt = name[i + 1] if i + 1 < len(name) else ''
        if c == '.' and nxt.islower():
            pass
        elif c == '.':
            out.append('_')
        elif c == '_' and (i == 0 or name[i - 1] == '.'):
            out.append('X')
        elif c == '_' and nxt.islower():
            pass
        elif c.isdigit():
            out.append(c)
        else:
            out.append(c.upper())
            while i + 1 < len(name) and name[i + 1].islower():
                i += 1
                out.append(name[i])
        i += 1
    return ''.join(out)


def reduce_serv_name(svc: str, pkg: str) -> str:
    """Remove redundant components from a service name.

    ``FooServiceV2`` becomes ``Foo``. The result is used as a prefix of
    longer names like ``FooClient``. If the reduced name equals the Go
    package name it is dropped entirely, so callers get ``foo.Client``
    rather than ``foo.FooClient``.
    """
    p = svc.rfind('V')
    if p >= 0 and _TRAILING_VERSION.fullmatch(svc[p:]):
        svc = svc[:p]

    svc = svc.removesuffix('Service')
    if svc.lower() == pkg.lower():
        svc = ''
    return svc


def grpc_client_field(reduced_serv_name: str) -> str:
    """Name of the struct field holding the raw gRPC client.

    When the service name reduced to the empty string the field is the
    unexported ``client``.
    """
    return lower_first(reduced_serv_name + 'Client')


def go_quote(s: str) -> str:
    """Render ``s`` as a double-quoted Go string literal."""
    return json.dumps(s, ensure_ascii=False)


def spaces(n: int) -> str:
    return ' ' * max(n, 0)
