from fastapi import FastAPI
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware

from querydesk.common.settings import settings
from querydesk.common.sandbox import SandboxManager
from .container import Container
from .routes import cluster, health, warehouse


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tests may pre-populate the container with stub backends.
    if getattr(app.state, "container", None) is None:
        app.state.container = Container()
    yield
    SandboxManager.shutdown()


app = FastAPI(
    title="querydesk API",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(warehouse.router, prefix="/api")
app.include_router(cluster.router, prefix="/api")
app.include_router(health.router, prefix="/api")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
