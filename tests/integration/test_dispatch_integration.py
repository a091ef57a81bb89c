"""Integration tests for the full ASGI pipeline.

Each test registers routes on a Router, serves it through Starlette's
TestClient (the same client FastAPI re-exports) and checks the HTTP
responses the hosting server would write.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response

from exact_routing import Router, RouterFrozenError, bearer_auth, logging_middleware


async def hello(request: Request) -> Response:
    return PlainTextResponse("Hello, world!")


async def echo(request: Request) -> Response:
    body = await request.body()
    return PlainTextResponse(body, status_code=201, headers={"X-Method": request.method})


# ---------------------------------------------------------------------------
# 1. Exact-match routing
# ---------------------------------------------------------------------------


class TestExactMatch:
    """Verify dispatch on the literal (method, path) pair."""

    def test_registered_route_is_served(self) -> None:
        router = Router()
        router.get("/hello", hello)

        response = TestClient(router).get("/hello")

        assert response.status_code == 200
        assert response.text == "Hello, world!"

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("POST", "/hello"),
            ("GET", "/hello/"),
            ("GET", "/hell"),
            ("GET", "/HELLO"),
            ("GET", "/nope"),
        ],
    )
    def test_anything_else_is_not_found(self, method: str, path: str) -> None:
        router = Router()
        router.get("/hello", hello)

        response = TestClient(router).request(method, path)

        assert response.status_code == 404
        assert response.text == "Not Found"

    def test_query_string_is_not_part_of_the_key(self) -> None:
        router = Router()
        router.get("/hello", hello)

        assert TestClient(router).get("/hello?name=x").status_code == 200

    def test_body_reaches_handler(self) -> None:
        router = Router()
        router.post("/echo", echo)

        response = TestClient(router).post("/echo", content=b"payload")

        assert response.status_code == 201
        assert response.content == b"payload"
        assert response.headers["X-Method"] == "POST"

    def test_each_verb_routes_independently(self) -> None:
        router = Router()
        for verb in ("get", "post", "put", "delete", "patch", "options"):
            getattr(router, verb)("/thing", echo)

        client = TestClient(router)
        for method in ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"):
            response = client.request(method, "/thing")
            assert response.headers["X-Method"] == method

    def test_overwrite_keeps_only_second_handler(self) -> None:
        async def first(request: Request) -> Response:
            return PlainTextResponse("first")

        async def second(request: Request) -> Response:
            return PlainTextResponse("second")

        router = Router()
        router.get("/x", first)
        router.get("/x", second)

        assert TestClient(router).get("/x").text == "second"


# ---------------------------------------------------------------------------
# 2. Middleware through the pipeline
# ---------------------------------------------------------------------------


class TestMiddlewarePipeline:
    def test_middleware_order_visible_in_headers(self) -> None:
        def stamp(name: str):
            def transform(next_handler):
                async def wrapped(request: Request) -> Response:
                    response = await next_handler(request)
                    order = response.headers.get("X-Order", "")
                    response.headers["X-Order"] = f"{order}{name},"
                    return response

                return wrapped

            return transform

        router = Router()
        router.get("/", hello, stamp("outer"), stamp("inner"))

        response = TestClient(router).get("/")

        # Exit order is innermost first
        assert response.headers["X-Order"] == "inner,outer,"

    def test_logging_then_auth(self, secret: str, make_token, caplog) -> None:
        caplog.set_level("INFO", logger="exact_routing.middleware.logging")

        async def whoami(request: Request) -> Response:
            return JSONResponse({"sub": request.state.claims["sub"]})

        router = Router()
        router.get("/me", whoami, logging_middleware, bearer_auth(secret))
        client = TestClient(router)

        denied = client.get("/me")
        allowed = client.get("/me", headers={"Authorization": f"Bearer {make_token({'sub': 'ana'})}"})

        assert denied.status_code == 401
        assert denied.text == "Unauthorized"
        assert allowed.json() == {"sub": "ana"}
        # Logging is outermost, so both requests are logged
        logged = [
            (r.method, r.url)  # type: ignore[attr-defined]
            for r in caplog.records
            if r.name == "exact_routing.middleware.logging"
        ]
        assert logged == [("GET", "http://testserver/me")] * 2


# ---------------------------------------------------------------------------
# 3. Serving lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_first_request_freezes_registration(self) -> None:
        router = Router()
        router.get("/hello", hello)

        TestClient(router).get("/hello")

        with pytest.raises(RouterFrozenError, match="GET /late"):
            router.get("/late", hello)

    def test_lifespan_startup_freezes_registration(self) -> None:
        router = Router()
        router.get("/hello", hello)

        with TestClient(router) as client:
            assert router.table.frozen
            assert client.get("/hello").status_code == 200

    def test_mounted_in_fastapi(self) -> None:
        router = Router()
        router.get("/hello", hello)

        app = FastAPI()

        @app.get("/health")
        async def health() -> dict[str, str]:
            return {"status": "ok"}

        app.mount("/", router)
        client = TestClient(app)

        assert client.get("/health").json() == {"status": "ok"}
        assert client.get("/hello").text == "Hello, world!"
        assert client.get("/missing").status_code == 404
