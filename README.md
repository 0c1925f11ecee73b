# apiflow

Small, dependency-free building blocks for writing HTTP APIs in Python.

## Installation

```
pip install apiflow
```

To run the test suite:

```
pip install "apiflow[test]"
pytest
```

## Modules

- `apiflow.context`: the abstract `Context` that handlers use to read a request
  (`param`, `query`, `header`, `each_header`, `body_reader`, and the `method`,
  `host`, `url`, `remote_addr` and `operation` properties) and to write a
  response (`set_status`, `set_header`, `append_header`, `body_writer`,
  `status`). `SimpleContext` is an in-memory implementation; its
  `response_headers()` returns what was set. `with_value(ctx, key, value)` and
  `with_context(ctx, values)` return a `SubContext` that carries different
  request-scoped `values()` while delegating everything else.
- `apiflow.formats`: `Format` pairs a marshal and an unmarshal function.
  `Formats` picks one by content type: `unmarshal` accepts values such as
  `application/json; charset=utf-8` and `my/format+json`, and treats an empty
  content type as JSON; `marshal` tries the full type, then the part after `+`.
  `transform` runs response transformers in order, and `content_types()` lists
  the supported types with the default first. `default_formats()` provides JSON
  (`json_marshal`, `json_unmarshal`). An unknown type raises
  `UnknownContentTypeError`.
- `apiflow.chain`: `Middlewares` is a list of `fn(ctx, next)` functions;
  `handler(endpoint)` composes them so the first added runs first.
- `apiflow.casing`: `split`, `join`, `merge_numbers`, `camel`, `lower_camel`,
  `snake` and `kebab` convert between naming styles; `initialism` and
  `identity` are transforms to pass to them.
- `apiflow.cookie`: `read_cookie(ctx, name)`, `read_cookies(ctx)` and
  `parse_cookies(lines, name_filter)` read `Cookie` request headers into
  `Cookie` objects, skipping malformed entries. A missing cookie raises
  `NoCookieError`.
- `apiflow.autoconfig`: `AutoConfig` and `AutoConfigVar` dataclasses describe
  client auto-configuration for an `x-cli-config` extension; `to_dict()` gives
  their JSON form.
- `apiflow.flow`: `Mux` is a compact router working on in-memory `Request` and
  `ResponseRecorder` objects. It supports named parameters (`:id`),
  regular-expression constraints (`:id|^[0-9]+$`), trailing wildcards (`/...`),
  middleware (`use`), groups (`group`), automatic `HEAD`, `OPTIONS` and `405`
  handling with an `Allow` header, and replaceable `not_found`,
  `method_not_allowed` and `options` handlers. `param(request.context, name)`
  reads matched values; `http_error` writes a plain-text error.
- `apiflow.conditional`: `Params` evaluates `If-Match`, `If-None-Match`,
  `If-Modified-Since` and `If-Unmodified-Since`. After `resolve(ctx)`,
  `precondition_failed(etag, modified)` returns `None` when the conditions hold,
  and otherwise raises a `StatusError`: 304 on reads, 412 on writes (`POST`,
  `PUT`, `PATCH`, `DELETE`) with one `ErrorDetail` per failed condition.

## Example

```python
from apiflow.flow import Mux, Request, ResponseRecorder, param

mux = Mux()

def hello(writer, request):
    writer.write(b"Hello, " + param(request.context, "name").encode())

mux.handle_func("/hello/:name", hello, "GET")

rec = ResponseRecorder()
mux.serve_http(rec, Request("GET", "/hello/world"))
assert rec.text() == "Hello, world"
```

```python
from apiflow import casing

casing.snake("HTTPServer2020")                    # "http_server2020"
casing.camel("platform-api", casing.initialism)   # "PlatformAPI"
```

## What it does not do

- It does not listen on a network socket: `Mux.serve_http` dispatches an
  in-memory `Request` to a `ResponseRecorder`, and connecting it to a real
  server is left to you.
- It does not generate or serve an OpenAPI document, documentation pages or
  JSON schemas, and it does not validate request bodies against schemas.
- It does not register typed operations or turn handler inputs and outputs into
  parameters, headers and bodies; handlers work with a `Context` directly.
- It does not generate PATCH operations or apply JSON Patch or merge patches.