"""Paging call and iterator generators.

A paging method returns an iterator instead of a single response. The
iterator is driven by ``google.golang.org/api/iterator``: ``PageInfo``
calls back into ``InternalFetch`` whenever the buffer runs dry, and ``Next``
returns ``iterator.Done`` once the last page (empty ``next_page_token``) has
been drained. Iterator types are keyed by name, so every paging method over
the same element type shares one definition.
"""

from typing import TYPE_CHECKING

from gapicgen.codegen import imports as imp
from gapicgen.codegen.calls import append_call_opts, grpc_client_call, insert_metadata
from gapicgen.codegen.classifier import IterType
from gapicgen.codegen.utils import snake_to_camel
from gapicgen.descriptors import FieldDescriptor, MethodDescriptor, go_type_name

if TYPE_CHECKING:
    from gapicgen.codegen.generator import Generator

__all__ = ['paging_call', 'paging_iter']


def paging_call(
    g: 'Generator',
    serv_name: str,
    m: MethodDescriptor,
    elem_field: FieldDescriptor,
    pt: IterType,
) -> None:
    """Emit the client method of a paging RPC.

    Args:
        g: The generator owning the output unit.
        serv_name: Reduced service name.
        m: The paging method.
        elem_field: The repeated response field being iterated over.
        pt: The iterator type returned by the method.
    """
    in_type = g.index.message(m.input_type)
    out_type = g.index.message(m.output_type)
    in_spec = g.index.import_spec(in_type)
    out_spec = g.index.import_spec(out_type)
    in_name = go_type_name(in_type)

    p = g.p.emit
    p('func (c *%sClient) %s(ctx context.Context, req *%s.%s, opts ...gax.CallOption) *%s {',
      serv_name, m.name, in_spec.name, in_name, pt.iter_type_name)
    insert_metadata(g)
    append_call_opts(g, m)

    p('it := &%s{}', pt.iter_type_name)
    p('req = proto.Clone(req).(*%s.%s)', in_spec.name, in_name)
    p('it.InternalFetch = func(pageSize int, pageToken string) ([]%s, string, error) {',
      pt.elem_type_name)
    p('var resp *%s.%s', out_spec.name, go_type_name(out_type))
    p('req.PageToken = pageToken')
    p('if pageSize > math.MaxInt32 {')
    p('req.PageSize = math.MaxInt32')
    p('} else {')
    p('req.PageSize = int32(pageSize)')
    p('}')
    p('err := gax.Invoke(ctx, func(ctx context.Context, settings gax.CallSettings) error {')
    p('var err error')
    p('resp, err = %s', grpc_client_call(serv_name, m.name))
    p('return err')
    p('}, opts...)')
    p('if err != nil {')
    p('return nil, "", err')
    p('}')
    p('return resp.%s, resp.NextPageToken, nil', snake_to_camel(elem_field.name))
    p('}')

    p('fetch := func(pageSize int, pageToken string) (string, error) {')
    p('items, nextPageToken, err := it.InternalFetch(pageSize, pageToken)')
    p('if err != nil {')
    p('return "", err')
    p('}')
    p('it.items = append(it.items, items...)')
    p('return nextPageToken, nil')
    p('}')

    p('it.pageInfo, it.nextFunc = iterator.NewPageInfo(fetch, it.bufLen, it.takeBuf)')
    p('it.pageInfo.MaxSize = int(req.PageSize)')
    p('return it')
    p('}')
    p('')

    g.imports.update([imp.MATH, imp.PROTO, imp.API_ITERATOR, in_spec, out_spec])
    g.imports.update(pt.elem_imports)


def paging_iter(g: 'Generator', pt: IterType) -> None:
    """Emit the iterator type ``pt`` with its ``PageInfo`` and ``Next`` methods."""
    p = g.p.emit

    p('// %s manages a stream of %s.', pt.iter_type_name, pt.elem_type_name)
    p('type %s struct {', pt.iter_type_name)
    p('items    []%s', pt.elem_type_name)
    p('pageInfo *iterator.PageInfo')
    p('nextFunc func() error')
    p('')
    p('// InternalFetch is for use by the Google Cloud Libraries only.')
    p('// It is not part of the stable interface of this package.')
    p('//')
    p('// InternalFetch returns results from a single call to the underlying RPC.')
    p('// The number of results is no greater than pageSize.')
    p('// If there are no more results, nextPageToken is empty and err is nil.')
    p('InternalFetch func(pageSize int, pageToken string) (results []%s, nextPageToken string, err error)',
      pt.elem_type_name)
    p('}')
    p('')

    p('// PageInfo supports pagination. See the google.golang.org/api/iterator package for details.')
    p('func (it *%s) PageInfo() *iterator.PageInfo {', pt.iter_type_name)
    p('return it.pageInfo')
    p('}')
    p('')

    p('// Next returns the next result. Its second return value is iterator.Done if there are no more')
    p('// results. Once Next returns Done, all subsequent calls will return Done.')
    p('func (it *%s) Next() (%s, error) {', pt.iter_type_name, pt.elem_type_name)
    p('var item %s', pt.elem_type_name)
    p('if err := it.nextFunc(); err != nil {')
    p('return item, err')
    p('}')
    p('item = it.items[0]')
    p('it.items = it.items[1:]')
    p('return item, nil')
    p('}')
    p('')

    p('func (it *%s) bufLen() int {', pt.iter_type_name)
    p('return len(it.items)')
    p('}')
    p('')

    p('func (it *%s) takeBuf() interface{} {', pt.iter_type_name)
    p('b := it.items')
    p('it.items = nil')
    p('return b')
    p('}')
    p('')

    g.imports.add(imp.API_ITERATOR)
    g.imports.update(pt.elem_imports)
