from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deep_research.api.routes import research
from deep_research.config import settings

app = FastAPI(
    title="Deep Research",
    description="Multi-stage research pipeline: queries, sources, dated key points, summary",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(research.router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "service": "deep-research"}
