import logging

from fastapi import FastAPI

from .config import LOG_LEVEL
from .routers import webhook

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=LOG_LEVEL,
)
logging.getLogger("httpx").setLevel(logging.WARNING)

app = FastAPI(title="GeoPal")

@app.get("/")
async def root():
    return {"message": "GeoPal is running"}

app.include_router(webhook.router)

@app.on_event("shutdown")
async def on_shutdown():
    await webhook.get_notifier().aclose()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("geopal.main:app", host="0.0.0.0", port=8000, log_level=LOG_LEVEL.lower())
