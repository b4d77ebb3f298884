"""Conversion of ``descriptor_pb2`` messages into the descriptor model.

The ``google.api`` annotation modules are imported here so that their
extensions are registered before any request is parsed; options parsed
without them keep the annotations as unknown fields.
"""

import logging
from collections.abc import Iterable

from google.api import annotations_pb2, client_pb2, http_pb2
from google.protobuf import descriptor_pb2

from gapicgen.descriptors import (
    EnumDescriptor,
    FieldDescriptor,
    FieldKind,
    FileDescriptor,
    HttpRule,
    MessageDescriptor,
    MethodDescriptor,
    ServiceDescriptor,
    SourceLocation,
)
from gapicgen.exceptions import UnsupportedFeatureError

logger = logging.getLogger(__name__)

__all__ = ['http_rule', 'load_file', 'load_files']

_LABEL_REPEATED = descriptor_pb2.FieldDescriptorProto.LABEL_REPEATED


def http_rule(options: descriptor_pb2.MethodOptions) -> HttpRule | None:
    """Read the ``google.api.http`` binding of a method, if any."""
    if not options.HasExtension(annotations_pb2.http):
        return None
    rule: http_pb2.HttpRule = options.Extensions[annotations_pb2.http]
    pattern = rule.WhichOneof('pattern')
    match pattern:
        case None:
            return None
        case 'custom':
            return HttpRule(
                verb=rule.custom.kind,
                path=rule.custom.path,
                body=rule.body,
                custom=True,
            )
        case _:
            return HttpRule(
                verb=pattern.upper(), path=getattr(rule, pattern), body=rule.body
            )


def _default_host(options: descriptor_pb2.ServiceOptions) -> str | None:
    if not options.HasExtension(client_pb2.default_host):
        return None
    return options.Extensions[client_pb2.default_host] or None


def _oauth_scopes(options: descriptor_pb2.ServiceOptions) -> tuple[str, ...]:
    if not options.HasExtension(client_pb2.oauth_scopes):
        return ()
    scopes = options.Extensions[client_pb2.oauth_scopes]
    return tuple(s.strip() for s in scopes.split(',') if s.strip())


def _field_kind(field: descriptor_pb2.FieldDescriptorProto) -> FieldKind:
    try:
        return FieldKind(field.type)
    except ValueError:
        raise UnsupportedFeatureError(
            f'unrecognized type {field.type} of field {field.name!r}'
        ) from None


def _load_field(field: descriptor_pb2.FieldDescriptorProto) -> FieldDescriptor:
    return FieldDescriptor(
        name=field.name,
        number=field.number,
        kind=_field_kind(field),
        repeated=field.label == _LABEL_REPEATED,
        type_name=field.type_name,
    )


def _load_enum(
    enum: descriptor_pb2.EnumDescriptorProto, scope: str, go_prefix: str
) -> EnumDescriptor:
    return EnumDescriptor(
        name=enum.name,
        full_name=f'{scope}.{enum.name}',
        values=tuple(v.name for v in enum.value),
        go_name=go_prefix + enum.name,
    )


def _load_message(
    msg: descriptor_pb2.DescriptorProto, scope: str, go_prefix: str = ''
) -> MessageDescriptor:
    full_name = f'{scope}.{msg.name}'
    go_name = go_prefix + msg.name
    nested_prefix = go_name + '_'
    return MessageDescriptor(
        name=msg.name,
        full_name=full_name,
        fields=tuple(_load_field(f) for f in msg.field),
        # Map entries are synthesized by protoc and never named by users.
        nested_messages=tuple(
            _load_message(m, full_name, nested_prefix)
            for m in msg.nested_type
            if not m.options.map_entry
        ),
        nested_enums=tuple(
            _load_enum(e, full_name, nested_prefix) for e in msg.enum_type
        ),
        go_name=go_name,
    )


def _load_service(
    serv: descriptor_pb2.ServiceDescriptorProto, scope: str
) -> ServiceDescriptor:
    full_name = f'{scope}.{serv.name}'
    methods = tuple(
        MethodDescriptor(
            name=m.name,
            full_name=f'{full_name}.{m.name}',
            input_type=m.input_type,
            output_type=m.output_type,
            client_streaming=m.client_streaming,
            server_streaming=m.server_streaming,
            http=http_rule(m.options),
        )
        for m in serv.method
    )
    return ServiceDescriptor(
        name=serv.name,
        full_name=full_name,
        methods=methods,
        default_host=_default_host(serv.options),
        oauth_scopes=_oauth_scopes(serv.options),
    )


def load_file(proto: descriptor_pb2.FileDescriptorProto) -> FileDescriptor:
    """Convert one ``FileDescriptorProto``.

    Raises:
        UnsupportedFeatureError: If a field has a type unknown to this
            generator.
    """
    # In descriptors, a leading dot marks a fully-qualified name.
    scope = f'.{proto.package}' if proto.package else ''
    locations = tuple(
        SourceLocation(path=tuple(loc.path), leading_comments=loc.leading_comments)
        for loc in proto.source_code_info.location
        if loc.HasField('leading_comments')
    )
    file = FileDescriptor(
        name=proto.name,
        package=proto.package,
        go_package=proto.options.go_package,
        messages=tuple(_load_message(m, scope) for m in proto.message_type),
        enums=tuple(_load_enum(e, scope, '') for e in proto.enum_type),
        services=tuple(_load_service(s, scope) for s in proto.service),
        locations=locations,
    )
    logger.debug(
        'Loaded %s: %d messages, %d services',
        file.name,
        len(file.messages),
        len(file.services),
    )
    return file


def load_files(
    protos: Iterable[descriptor_pb2.FileDescriptorProto],
) -> list[FileDescriptor]:
    return [load_file(p) for p in protos]
