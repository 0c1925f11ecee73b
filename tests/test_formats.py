import io

import pytest

from apiflow.context import SimpleContext
from apiflow.formats import (
    DEFAULT_JSON_FORMAT,
    Format,
    Formats,
    UnknownContentTypeError,
    default_formats,
    json_marshal,
    json_unmarshal,
)


def test_json_marshal_is_compact_with_newline():
    buf = io.BytesIO()
    json_marshal(buf, {"a": 1})
    assert buf.getvalue() == b'{"a":1}\n'


def test_json_marshal_escapes_html():
    buf = io.BytesIO()
    json_marshal(buf, "<a&b>")
    assert buf.getvalue() == b'"\\u003ca\\u0026b\\u003e"\n'


def test_json_marshal_rejects_nan():
    with pytest.raises(ValueError):
        json_marshal(io.BytesIO(), float("nan"))


def test_json_round_trip():
    value = {"name": "Über", "items": [1, 2.5, None, True], "nested": {"k": "<v>"}}
    buf = io.BytesIO()
    json_marshal(buf, value)
    assert json_unmarshal(buf.getvalue()) == value


def test_json_unmarshal_invalid():
    with pytest.raises(ValueError):
        json_unmarshal(b"{")


def test_default_formats_are_fresh():
    first = default_formats()
    first.pop("json")
    second = default_formats()
    assert set(second) == {"application/json", "json"}
    assert second["json"] is DEFAULT_JSON_FORMAT


def test_unmarshal_with_charset():
    f = Formats(default_formats())
    assert f.unmarshal("application/json; charset=utf-8", b'{"x":[1,2]}') == {"x": [1, 2]}


def test_unmarshal_with_suffix():
    f = Formats(default_formats())
    assert f.unmarshal("application/my-format+json", b'{"ok":true}') == {"ok": True}


def test_unmarshal_empty_content_type_defaults_to_json():
    f = Formats(default_formats())
    assert f.unmarshal("", b"[1]") == [1]


def test_unmarshal_unknown_content_type():
    f = Formats(default_formats())
    with pytest.raises(UnknownContentTypeError) as info:
        f.unmarshal("text/plain", b"hi")
    assert str(info.value) == "unknown content type: text/plain"
    assert info.value.content_type == "text/plain"


def test_marshal_falls_back_to_suffix():
    f = Formats(default_formats())
    buf = io.BytesIO()
    value = {"openapi": "3.1.0"}
    f.marshal(buf, "application/vnd.oai.openapi+json", value)
    assert json_unmarshal(buf.getvalue()) == value


def test_marshal_unknown_content_type():
    f = Formats(default_formats())
    with pytest.raises(UnknownContentTypeError):
        f.marshal(io.BytesIO(), "application/xml", {})


def test_content_types_default_first():
    f = Formats(default_formats())
    keys = f.content_types()
    assert keys[0] == "application/json"
    assert set(keys) == {"application/json", "json"}
    assert f.default_format == "application/json"


def test_content_types_explicit_default():
    custom = Format(marshal=lambda w, v: w.write(b"x"), unmarshal=lambda d: d)
    f = Formats({"application/cbor": custom, **default_formats()}, default_format="application/cbor")
    assert f.content_types()[0] == "application/cbor"


def test_content_types_without_json_has_no_default():
    custom = Format(marshal=lambda w, v: w.write(b"x"), unmarshal=lambda d: d)
    f = Formats({"text/csv": custom})
    assert f.default_format == ""
    assert f.content_types() == ["text/csv"]


def test_custom_format_used():
    custom = Format(marshal=lambda w, v: w.write(str(v).encode()), unmarshal=lambda d: d.decode())
    f = Formats({"text/plain": custom})
    buf = io.BytesIO()
    f.marshal(buf, "text/plain", "hello")
    assert buf.getvalue() == b"hello"
    assert f.unmarshal("text/plain", b"hello") == "hello"


def test_transform_runs_in_order():
    ctx = SimpleContext()

    def first(c, status, v):
        return v + ["first:" + status]

    def second(c, status, v):
        return v + ["second:" + status]

    f = Formats(default_formats(), transformers=[first, second])
    assert f.transform(ctx, "200", []) == ["first:200", "second:200"]


def test_transform_without_transformers_returns_value():
    value = {"a": "b"}
    assert Formats().transform(SimpleContext(), "200", value) is value


def test_transform_error_propagates():
    def broken(c, status, v):
        raise RuntimeError("boom")

    f = Formats(transformers=[broken])
    with pytest.raises(RuntimeError, match="boom"):
        f.transform(SimpleContext(), "500", {})