import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from rsutax.api.capital_gains import router as capital_gains_router
from rsutax.api.dividends import router as dividends_router
from rsutax.api.exchange_rates import router as exchange_rates_router
from rsutax.api.reports import router as reports_router
from rsutax.api.tax import router as tax_router
from rsutax.container import Container
from rsutax.exceptions import UsageError

logger = logging.getLogger("rsutax.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = Container()
    app.state.container = container
    yield
    await container.http_client().close()
    engine = container.engine()
    await engine.dispose()


app = FastAPI(title="rsutax", version="0.1.0", lifespan=lifespan)


@app.exception_handler(UsageError)
async def usage_error_handler(request: Request, exc: UsageError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("Unhandled error on %s %s:\n%s", request.method, request.url.path, "".join(tb))
    return JSONResponse(status_code=500, content={"detail": str(exc)})


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(capital_gains_router)
app.include_router(dividends_router)
app.include_router(exchange_rates_router)
app.include_router(tax_router)
app.include_router(reports_router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
