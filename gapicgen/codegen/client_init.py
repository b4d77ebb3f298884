"""Client scaffolding emitted once per service.

Regardless of which call shapes a service mixes, every client gets a call
options struct with its default retry settings, the default dial options, the
client struct and constructor, ``Connection``, ``Close`` and the helper that
composes the ``x-goog-api-client`` metadata header.
"""

from typing import TYPE_CHECKING

from gapicgen.codegen import imports as imp
from gapicgen.codegen.retry import RetryPolicy
from gapicgen.codegen.utils import (
    camel_to_snake,
    go_quote,
    grpc_client_field,
    spaces,
)
from gapicgen.descriptors import ServiceDescriptor
from gapicgen.exceptions import MissingAnnotationError

if TYPE_CHECKING:
    from gapicgen.codegen.generator import Generator

__all__ = ['client_init', 'client_options']


def client_options(
    g: 'Generator',
    serv: ServiceDescriptor,
    serv_name: str,
    policies: dict[str, RetryPolicy],
) -> None:
    """Emit ``<Serv>CallOptions`` and its defaults.

    Raises:
        MissingAnnotationError: If the service has no default host, since a
            client cannot be dialed without an endpoint.
    """
    p = g.p.emit

    # CallOptions struct
    max_name_len = max((len(m.name) for m in serv.methods), default=0)
    p('// %sCallOptions contains the retry settings for each method of %sClient.',
      serv_name, serv_name)
    p('type %sCallOptions struct {', serv_name)
    for m in serv.methods:
        p('%s%s[]gax.CallOption', m.name, spaces(max_name_len - len(m.name) + 1))
    p('}')
    p('')
    g.imports.add(imp.GAX)

    # defaultClientOptions
    if not serv.default_host:
        raise MissingAnnotationError(serv.name, 'google.api.default_host')

    p('func default%sClientOptions() []option.ClientOption {', serv_name)
    p('return []option.ClientOption{')
    p('option.WithEndpoint(%s),', go_quote(f'{serv.default_host}:443'))
    p('option.WithScopes(DefaultAuthScopes()...),')
    p('}')
    p('}')
    p('')
    g.imports.add(imp.API_OPTION)

    # defaultCallOptions
    retryables = [m.name for m in serv.methods if m.name in policies]
    p('func default%sCallOptions() *%sCallOptions {', serv_name, serv_name)
    if retryables:
        _retry_block(g, policies[retryables[0]])
    p('return &%sCallOptions{', serv_name)
    for name in retryables:
        p('%s: retry,', name)
    p('}')
    p('}')
    p('')


def _retry_block(g: 'Generator', policy: RetryPolicy) -> None:
    p = g.p.emit
    p('retry := []gax.CallOption{')
    p('gax.WithRetry(func() gax.Retryer {')
    p('return gax.OnCodes([]codes.Code{')
    for code in policy.codes:
        p('codes.%s,', code)
    p('}, gax.Backoff{')
    p('Initial:    %s,', policy.initial)
    p('Max:        %s,', policy.max)
    p('Multiplier: %s,', policy.multiplier)
    p('})')
    p('}),')
    p('}')
    p('')
    g.imports.add(imp.TIME)
    g.imports.add(imp.GRPC_CODES)


def client_init(g: 'Generator', serv: ServiceDescriptor, serv_name: str) -> None:
    """Emit the client struct, its constructor and connection helpers."""
    p = g.p.emit
    has_lro = g.has_lro(serv)
    serv_spec = g.index.import_spec(serv)
    field = grpc_client_field(serv_name)

    # client struct
    p('// %sClient is a client for interacting with %s API.', serv_name, serv.name)
    p('//')
    p('// Methods, except Close, may be called concurrently. However, fields must not be modified concurrently with method calls.')
    p('type %sClient struct {', serv_name)
    p('// The connection to the service.')
    p('conn *grpc.ClientConn')
    p('')
    p('// The gRPC API client.')
    p('%s %s.%sClient', field, serv_spec.name, serv.name)
    p('')
    if has_lro:
        p('// LROClient is used internally to handle longrunning operations.')
        p('// It is exposed so that its CallOptions can be modified if required.')
        p('// Users should not Close this client.')
        p('LROClient *lroauto.OperationsClient')
        p('')
        g.imports.add(imp.LRO_AUTO)
    p('// The call options for this service.')
    p('CallOptions *%sCallOptions', serv_name)
    p('')
    p('// The x-goog-* metadata to be sent with each request.')
    p('xGoogMetadata metadata.MD')
    p('}')
    p('')
    g.imports.update([imp.GRPC, imp.GRPC_METADATA, serv_spec])

    # Client constructor
    client_name = camel_to_snake(serv.name).replace('_', ' ')
    p('// New%sClient creates a new %s client.', serv_name, client_name)
    com = g.index.comment(serv)
    if com.strip():
        p('//')
        g.p.comment(com)
    p('func New%sClient(ctx context.Context, opts ...option.ClientOption) (*%sClient, error) {',
      serv_name, serv_name)
    p('conn, err := transport.DialGRPC(ctx, append(default%sClientOptions(), opts...)...)', serv_name)
    p('if err != nil {')
    p('return nil, err')
    p('}')
    p('c := &%sClient{', serv_name)
    p('conn:        conn,')
    p('CallOptions: default%sCallOptions(),', serv_name)
    p('')
    p('%s: %s.New%sClient(conn),', field, serv_spec.name, serv.name)
    p('}')
    p('c.setGoogleClientInfo()')
    p('')
    if has_lro:
        p('c.LROClient, err = lroauto.NewOperationsClient(ctx, option.WithGRPCConn(conn))')
        p('if err != nil {')
        p('// This error "should not happen", since we are just reusing old connection')
        p('// and never actually need to dial.')
        p('// If this does happen, we could leak conn. However, we cannot close conn:')
        p('// If the user invoked the function with option.WithGRPCConn,')
        p('// we would close a connection that\'s still in use.')
        p('return nil, err')
        p('}')
    p('return c, nil')
    p('}')
    p('')
    g.imports.update([imp.API_TRANSPORT, imp.CONTEXT])

    # Connection()
    p('// Connection returns the client\'s connection to the API service.')
    p('func (c *%sClient) Connection() *grpc.ClientConn {', serv_name)
    p('return c.conn')
    p('}')
    p('')

    # Close()
    p('// Close closes the connection to the API service. The user should invoke this when')
    p('// the client is no longer required.')
    p('func (c *%sClient) Close() error {', serv_name)
    p('return c.conn.Close()')
    p('}')
    p('')

    # setGoogleClientInfo
    p('// setGoogleClientInfo sets the name and version of the application in')
    p('// the `x-goog-api-client` header passed on each request. Intended for')
    p('// use by Google-written clients.')
    p('func (c *%sClient) setGoogleClientInfo(keyval ...string) {', serv_name)
    p('kv := append([]string{"gl-go", versionGo()}, keyval...)')
    p('kv = append(kv, "gapic", versionClient, "gax", gax.Version, "grpc", grpc.Version)')
    p('c.xGoogMetadata = metadata.Pairs("x-goog-api-client", gax.XGoogHeader(kv...))')
    p('}')
    p('')
