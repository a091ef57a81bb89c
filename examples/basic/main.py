"""Basic example for exact-routing.

Run with: uvicorn main:router --reload

    curl -i localhost:8000/hello
    curl -i -H "Authorization: Bearer $TOKEN" localhost:8000/private
"""
import logging

from starlette.responses import PlainTextResponse

from exact_routing import Router, jwt_middleware, logging_middleware

logging.basicConfig(level=logging.INFO)


async def hello(request):
    return PlainTextResponse("¡Hola, mundo!")


async def private(request):
    return PlainTextResponse(f"Hello, {request.state.claims.get('sub', 'anonymous')}")


router = Router()
router.get("/hello", hello, logging_middleware)
router.get("/private", private, logging_middleware, jwt_middleware)
