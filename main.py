from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from dotenv import load_dotenv

from accesslog import __version__, from_settings
from accesslog.config import settings
from accesslog.metrics import get_metrics_snapshot

load_dotenv()


app = FastAPI(
    title="Access Log Demo",
    version=__version__,
)


@app.get("/")
async def root():
    return {
        "service": "accesslog-demo",
        "version": __version__,
        "status": "running",
        "format": settings.FORMAT,
    }


@app.get("/ping")
async def ping():
    return PlainTextResponse("pong")


@app.get("/health")
async def health():
    return {"status": "healthy", "service": "accesslog-demo"}


@app.get("/metrics")
async def metrics():
    return get_metrics_snapshot()


# Apply middleware
app = from_settings(app, settings)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8001,
        reload=True,
        # uvicorn's own access log would duplicate ours
        access_log=False,
        log_level="info"
    )
