"""Package documentation file generator.

``doc.go`` carries the package comment and canonical import path of the
generated package, plus the helpers every client file relies on:
``insertMetadata``, ``DefaultAuthScopes``, ``versionGo`` and the
``versionClient`` constant reported in the ``x-goog-api-client`` header.
Since it is the only file that needs the package documentation it does not
go through :meth:`Generator.commit`.
"""

import logging
from collections.abc import Sequence

from gapicgen._version import __version__
from gapicgen.codegen import imports as imp
from gapicgen.codegen.emitter import CodeEmitter
from gapicgen.codegen.generator import APACHE_LICENSE, GeneratedFile, Generator
from gapicgen.codegen.utils import go_quote, reduce_serv_name
from gapicgen.descriptors import ServiceDescriptor

logger = logging.getLogger(__name__)

__all__ = ['DOC_FILE_NAME', 'gen_doc_file', 'oauth_scopes']

DOC_FILE_NAME = 'doc.go'

_STRINGS = imp.ImportSpec(path='strings')
_UNICODE = imp.ImportSpec(path='unicode')

_CLIENT_SNIPPET = '''\
//\tctx := context.Background()
//\tc, err := %s.New%sClient(ctx)
//\tif err != nil {
//\t\t// TODO: Handle error.
//\t}
//\tdefer c.Close()
'''


def oauth_scopes(services: Sequence[ServiceDescriptor]) -> list[str]:
    """Collect the OAuth scopes of ``services``, deduplicated and sorted."""
    return sorted({scope for s in services for scope in s.oauth_scopes})


def gen_doc_file(
    g: Generator, services: Sequence[ServiceDescriptor]
) -> GeneratedFile | None:
    """Generate ``doc.go`` for the services of the run.

    Returns:
        The file, or None when there are no services to document.
    """
    if not services:
        logger.debug('No services generated, skipping %s', DOC_FILE_NAME)
        return None

    g.reset()
    preamble = CodeEmitter()
    _package_doc(preamble, g, services)

    _helpers(g, services)
    g.imports.update(
        [imp.CONTEXT, imp.RUNTIME, _STRINGS, _UNICODE, imp.GRPC_METADATA]
    )

    content = ''.join(
        [
            APACHE_LICENSE % (g.license_year, g.settings.license_holder),
            preamble.getvalue(),
            '\n',
            g.imports.render(),
            g.p.getvalue().rstrip('\n') + '\n',
        ]
    )
    name = g.config.join(DOC_FILE_NAME)
    logger.info('Generated %s for %d services', name, len(services))
    return GeneratedFile(name=name, content=content)


def _package_doc(
    p: CodeEmitter, g: Generator, services: Sequence[ServiceDescriptor]
) -> None:
    pkg = g.config.package_name
    api = ', '.join(s.name for s in services)
    p.emit('// Package %s is an auto-generated package for the', pkg)
    p.emit('// %s API.', api)
    p.emit('//')
    p.emit('// Example usage')
    p.emit('//')
    p.emit('// To get started with this package, create a client.')
    p.emit('//')
    client = reduce_serv_name(services[0].name, pkg)
    # The snippet ends lines with braces, which must not move the indentation.
    p.write_raw(_CLIENT_SNIPPET % (pkg, client))
    p.emit('//')
    p.emit('// The client will use your default application credentials. Clients should be reused instead of created as needed.')
    p.emit('// The methods of Client are safe for concurrent use by multiple goroutines.')
    p.emit('// The returned client must be Closed when it is done being used.')
    p.emit('//')
    p.emit('// Use of Context')
    p.emit('//')
    p.emit('// The ctx passed to NewClient is used for authentication requests and')
    p.emit('// for creating the underlying connection, but is not used for subsequent calls.')
    p.emit('// Individual methods on the client use the ctx given to them.')
    p.emit('//')
    p.emit('// To close the open connection, use the Close() method.')
    p.emit('package %s // import %s', pkg, go_quote(g.config.import_path))


def _helpers(g: Generator, services: Sequence[ServiceDescriptor]) -> None:
    p = g.p.emit

    with g.p.block('func insertMetadata(ctx context.Context, mds ...metadata.MD) context.Context {'):
        p('out, _ := metadata.FromOutgoingContext(ctx)')
        p('out = out.Copy()')
        with g.p.block('for _, md := range mds {'):
            with g.p.block('for k, v := range md {'):
                p('out[k] = append(out[k], v...)')
        p('return metadata.NewOutgoingContext(ctx, out)')
    p('')

    p('// DefaultAuthScopes reports the default set of authentication scopes to use with this package.')
    p('func DefaultAuthScopes() []string {')
    p('return []string{')
    for scope in oauth_scopes(services):
        p('%s,', go_quote(scope))
    p('}')
    p('}')
    p('')

    p('// versionGo returns the Go runtime version. The returned string')
    p('// has no whitespace, suitable for reporting in header.')
    p('func versionGo() string {')
    p('const develPrefix = "devel +"')
    p('')
    p('s := runtime.Version()')
    p('if strings.HasPrefix(s, develPrefix) {')
    p('s = s[len(develPrefix):]')
    p('if p := strings.IndexFunc(s, unicode.IsSpace); p >= 0 {')
    p('s = s[:p]')
    p('}')
    p('return s')
    p('}')
    p('')
    p('notSemverRune := func(r rune) bool {')
    p('return !strings.ContainsRune("0123456789.", r)')
    p('}')
    p('')
    p('if strings.HasPrefix(s, "go1") {')
    p('s = s[2:]')
    p('var prerelease string')
    p('if p := strings.IndexFunc(s, notSemverRune); p >= 0 {')
    p('s, prerelease = s[:p], s[p:]')
    p('}')
    p('if strings.HasSuffix(s, ".") {')
    p('s += "0"')
    p('} else if strings.Count(s, ".") < 2 {')
    p('s += ".0"')
    p('}')
    p('if prerelease != "" {')
    p('s += "-" + prerelease')
    p('}')
    p('return s')
    p('}')
    p('return "UNKNOWN"')
    p('}')
    p('')

    p('const versionClient = %s', go_quote(__version__))
