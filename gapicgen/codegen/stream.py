"""Streaming call generators.

Streaming methods hand the raw gRPC stream back to the caller; sending and
receiving on it is the caller's business. The stream is opened through
``gax.Invoke`` like every other call, but never carries a retry policy.
"""

from typing import TYPE_CHECKING

from gapicgen.codegen.calls import append_call_opts, insert_metadata
from gapicgen.codegen.utils import grpc_client_field
from gapicgen.descriptors import MethodDescriptor, ServiceDescriptor, go_type_name

if TYPE_CHECKING:
    from gapicgen.codegen.generator import Generator

__all__ = ['no_request_stream_call', 'server_stream_call']


def _stream_type(g: 'Generator', s: ServiceDescriptor, m: MethodDescriptor) -> str:
    serv_spec = g.index.import_spec(s)
    g.imports.add(serv_spec)
    return f'{serv_spec.name}.{s.name}_{m.name}Client'


def server_stream_call(
    g: 'Generator', serv_name: str, s: ServiceDescriptor, m: MethodDescriptor
) -> None:
    in_type = g.index.message(m.input_type)
    in_spec = g.index.import_spec(in_type)
    g.imports.add(in_spec)
    ret_typ = _stream_type(g, s, m)

    p = g.p.emit
    p('func (c *%sClient) %s(ctx context.Context, req *%s.%s, opts ...gax.CallOption) (%s, error) {',
      serv_name, m.name, in_spec.name, go_type_name(in_type), ret_typ)
    insert_metadata(g)
    append_call_opts(g, m)
    p('var resp %s', ret_typ)
    p('err := gax.Invoke(ctx, func(ctx context.Context, settings gax.CallSettings) error {')
    p('var err error')
    p('resp, err = c.%s.%s(ctx, req, settings.GRPC...)', grpc_client_field(serv_name), m.name)
    p('return err')
    p('}, opts...)')
    p('if err != nil {')
    p('return nil, err')
    p('}')
    p('return resp, nil')
    p('}')
    p('')


def no_request_stream_call(
    g: 'Generator', serv_name: str, s: ServiceDescriptor, m: MethodDescriptor
) -> None:
    """Emit a client-streaming or bidi-streaming call.

    Requests are sent on the returned stream, so the method takes none.
    """
    ret_typ = _stream_type(g, s, m)

    p = g.p.emit
    p('func (c *%sClient) %s(ctx context.Context, opts ...gax.CallOption) (%s, error) {',
      serv_name, m.name, ret_typ)
    insert_metadata(g)
    append_call_opts(g, m)
    p('var resp %s', ret_typ)
    p('err := gax.Invoke(ctx, func(ctx context.Context, settings gax.CallSettings) error {')
    p('var err error')
    p('resp, err = c.%s.%s(ctx, settings.GRPC...)', grpc_client_field(serv_name), m.name)
    p('return err')
    p('}, opts...)')
    p('if err != nil {')
    p('return nil, err')
    p('}')
    p('return resp, nil')
    p('}')
    p('')
