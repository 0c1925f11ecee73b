from apiflow.chain import Middlewares
from apiflow.context import SimpleContext, with_value


def test_empty_chain_returns_endpoint():
    def endpoint(ctx):
        ctx.set_status(200)

    assert Middlewares().handler(endpoint) is endpoint


def test_middlewares_run_in_order():
    calls = []

    def first(ctx, nxt):
        calls.append("first-before")
        nxt(ctx)
        calls.append("first-after")

    def second(ctx, nxt):
        calls.append("second-before")
        nxt(ctx)
        calls.append("second-after")

    def endpoint(ctx):
        calls.append("endpoint")
        ctx.set_status(204)

    ctx = SimpleContext()
    handler = Middlewares([first, second]).handler(endpoint)
    handler(ctx)
    assert calls == ["first-before", "second-before", "endpoint", "second-after", "first-after"]
    assert ctx.status == 204


def test_middleware_can_short_circuit():
    called = []

    def deny(ctx, nxt):
        ctx.set_status(401)

    def endpoint(ctx):
        called.append(True)

    ctx = SimpleContext()
    Middlewares([deny]).handler(endpoint)(ctx)
    assert called == []
    assert ctx.status == 401


def test_middleware_can_replace_context():
    seen = []

    def authenticate(ctx, nxt):
        nxt(with_value(ctx, "user", "alice"))

    def endpoint(ctx):
        seen.append(ctx.values().get("user"))

    ctx = SimpleContext()
    Middlewares([authenticate]).handler(endpoint)(ctx)
    assert seen == ["alice"]
    assert "user" not in ctx.values()


def test_handler_is_fixed_when_built():
    calls = []

    def record(name):
        def middleware(ctx, nxt):
            calls.append(name)
            nxt(ctx)

        return middleware

    chain = Middlewares([record("a")])
    handler = chain.handler(lambda ctx: calls.append("end"))
    chain.append(record("b"))
    handler(SimpleContext())
    assert calls == ["a", "end"]
    assert len(chain) == 2