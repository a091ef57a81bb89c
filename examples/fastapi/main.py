"""Mounting an exact-routing Router inside a FastAPI app.

FastAPI routes are matched first; everything else falls through to the
router mounted at "/".

Run with: uvicorn main:app --reload
"""
from fastapi import FastAPI
from starlette.responses import JSONResponse

from exact_routing import Router, bearer_auth, call_next_middleware


async def served_by_header(request, call_next):
    response = await call_next(request)
    response.headers["X-Served-By"] = "exact-routing"
    return response


async def list_items(request):
    return JSONResponse({"items": [], "user": request.state.claims["sub"]})


router = Router()
router.get(
    "/items",
    list_items,
    call_next_middleware(served_by_header),
    bearer_auth(lambda header: "example-secret-change-me-please-0123456789"),
)

app = FastAPI(title="Exact routing example")


@app.get("/health")
async def health():
    return {"status": "ok"}


app.mount("/", router)
