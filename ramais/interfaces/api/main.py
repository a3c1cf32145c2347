# ramais/interfaces/api/main.py
from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ramais.infrastructure.config import Settings, get_settings
from ramais.infrastructure.log import log
from ramais.interfaces.api.context import AppContext, build_context
from ramais.interfaces.api.middleware.rate_limit import RateLimitMiddleware
from ramais.interfaces.api.routes.admin_routes import router as admin_router
from ramais.interfaces.api.routes.export_routes import router as export_router
from ramais.interfaces.api.routes.ops_routes import probes as probes_router
from ramais.interfaces.api.routes.ops_routes import router as ops_router
from ramais.interfaces.api.routes.setor_routes import router as setor_router
from ramais.interfaces.api.routes.stats_routes import router as stats_router


def _erro(status_code: int, mensagem: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": mensagem}, headers=headers)


def _operacao(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "name", None) or f"{request.method} {request.url.path}"


def create_app(settings: Settings | None = None, context: AppContext | None = None) -> FastAPI:
    """Monta a aplicacao. Sem `context`, o diretorio e carregado no startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if getattr(app.state, "context", None) is None:
            app.state.context = build_context(settings or get_settings())
        yield

    cors_origins = (settings or get_settings()).cors_origins
    app = FastAPI(
        title="Lista de Ramais API",
        debug=False,  # NUNCA True em producao
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url=None,
    )
    app.state.context = context

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next: object) -> Response:
        response = await call_next(request)  # type: ignore[operator]
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response  # type: ignore[no-any-return]

    app.add_middleware(RateLimitMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins),
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _erro(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        primeiro = exc.errors()[0] if exc.errors() else {}
        campo = ".".join(str(p) for p in primeiro.get("loc", ()) if p != "body")
        mensagem = primeiro.get("msg", "Requisicao invalida")
        return _erro(400, f"{campo}: {mensagem}" if campo else mensagem)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        log(f"Erro inesperado em {_operacao(request)}: {exc!r}")
        return _erro(500, "Erro interno")

    # export/import ANTES de setor (path conflict: /setores/export vs /setores/{id_ou_slug})
    app.include_router(export_router, prefix="/api")
    app.include_router(setor_router, prefix="/api")
    app.include_router(stats_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")
    app.include_router(ops_router, prefix="/api")
    app.include_router(probes_router)

    return app


app = create_app()


if __name__ == "__main__":
    # Producao: uvicorn ramais.interfaces.api.main:app --host 0.0.0.0 --port 8000
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
