"""Unary and long-running call generators."""

from typing import TYPE_CHECKING

from gapicgen.codegen import imports as imp
from gapicgen.codegen.utils import grpc_client_field
from gapicgen.descriptors import MethodDescriptor, go_type_name

if TYPE_CHECKING:
    from gapicgen.codegen.generator import Generator

__all__ = [
    'append_call_opts',
    'empty_unary_call',
    'grpc_client_call',
    'insert_metadata',
    'lro_call',
    'unary_call',
]


def grpc_client_call(serv_name: str, method_name: str) -> str:
    return f'c.{grpc_client_field(serv_name)}.{method_name}(ctx, req, settings.GRPC...)'


def insert_metadata(g: 'Generator') -> None:
    g.p.emit('ctx = insertMetadata(ctx, c.xGoogMetadata)')


def append_call_opts(g: 'Generator', m: MethodDescriptor) -> None:
    # Reslicing caps the capacity so appending never writes into the shared defaults.
    opts = f'c.CallOptions.{m.name}'
    g.p.emit('opts = append(%s[0:len(%s):len(%s)], opts...)', opts, opts, opts)


def unary_call(g: 'Generator', serv_name: str, m: MethodDescriptor) -> None:
    in_type = g.index.message(m.input_type)
    out_type = g.index.message(m.output_type)
    in_spec = g.index.import_spec(in_type)
    out_spec = g.index.import_spec(out_type)

    p = g.p.emit
    p('func (c *%sClient) %s(ctx context.Context, req *%s.%s, opts ...gax.CallOption) (*%s.%s, error) {',
      serv_name, m.name, in_spec.name, go_type_name(in_type),
      out_spec.name, go_type_name(out_type))
    insert_metadata(g)
    append_call_opts(g, m)
    p('var resp *%s.%s', out_spec.name, go_type_name(out_type))
    p('err := gax.Invoke(ctx, func(ctx context.Context, settings gax.CallSettings) error {')
    p('var err error')
    p('resp, err = %s', grpc_client_call(serv_name, m.name))
    p('return err')
    p('}, opts...)')
    p('if err != nil {')
    p('return nil, err')
    p('}')
    p('return resp, nil')
    p('}')
    p('')

    g.imports.update([in_spec, out_spec])


def empty_unary_call(g: 'Generator', serv_name: str, m: MethodDescriptor) -> None:
    """Emit a unary call whose response carries nothing but the error."""
    in_type = g.index.message(m.input_type)
    in_spec = g.index.import_spec(in_type)

    p = g.p.emit
    p('func (c *%sClient) %s(ctx context.Context, req *%s.%s, opts ...gax.CallOption) error {',
      serv_name, m.name, in_spec.name, go_type_name(in_type))
    insert_metadata(g)
    append_call_opts(g, m)
    p('err := gax.Invoke(ctx, func(ctx context.Context, settings gax.CallSettings) error {')
    p('var err error')
    p('_, err = %s', grpc_client_call(serv_name, m.name))
    p('return err')
    p('}, opts...)')
    p('return err')
    p('}')
    p('')

    g.imports.add(in_spec)


def lro_call(g: 'Generator', serv_name: str, m: MethodDescriptor) -> None:
    """Emit a call that starts a long-running operation.

    The generated method returns the operation handle as soon as the server
    accepts the request. Waiting for completion is left to the caller, via
    the ``longrunning.Operation`` methods.
    """
    in_type = g.index.message(m.input_type)
    out_type = g.index.message(m.output_type)
    in_spec = g.index.import_spec(in_type)
    out_spec = g.index.import_spec(out_type)

    p = g.p.emit
    p('func (c *%sClient) %s(ctx context.Context, req *%s.%s, opts ...gax.CallOption) (*longrunning.Operation, error) {',
      serv_name, m.name, in_spec.name, go_type_name(in_type))
    insert_metadata(g)
    append_call_opts(g, m)
    p('var resp *%s.%s', out_spec.name, go_type_name(out_type))
    p('err := gax.Invoke(ctx, func(ctx context.Context, settings gax.CallSettings) error {')
    p('var err error')
    p('resp, err = %s', grpc_client_call(serv_name, m.name))
    p('return err')
    p('}, opts...)')
    p('if err != nil {')
    p('return nil, err')
    p('}')
    p('return longrunning.InternalNewOperation(c.LROClient, resp), nil')
    p('}')
    p('')

    g.imports.update([imp.LONGRUNNING, in_spec, out_spec])
