"""
Server entry point: FastAPI app setup and route configuration.
Exposes site analysis and the stored-analysis views used by the
extension popup and full report.
"""

from __future__ import annotations

import dotenv
import pydantic
import uvicorn
from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dataguardian import config as config_mod
from dataguardian.analysis import report
from dataguardian.pipeline import analysis_pipeline
from dataguardian.settings import storage as storage_mod
from dataguardian.utils import errors, serialization
from dataguardian.utils.logger import create_logger

dotenv.load_dotenv()

log = create_logger("Server")


class AnalyzeRequest(pydantic.BaseModel):
    """Body of ``POST /api/sites/analyze``."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    url: str
    simplified_policy: str | None = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def create_app(
    config: config_mod.DataGuardianConfig | None = None,
    storage: storage_mod.KeyValueStorage | None = None,
    detect_fn: analysis_pipeline.DetectFn | None = None,
    summarize_fn: analysis_pipeline.SummarizeFn | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Storage defaults to a JSON file when ``settings_path`` is
    configured, otherwise to process memory.
    """
    cfg = config or config_mod.DataGuardianConfig()
    if storage is None:
        storage = (
            storage_mod.JsonFileStorage(cfg.settings_path)
            if cfg.settings_path
            else storage_mod.MemoryStorage()
        )
    repository = analysis_pipeline.SiteRepository(storage)

    application = FastAPI(title="DataGuardian Server")

    # ========================================================================
    # Middleware
    # ========================================================================

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ========================================================================
    # API Routes
    # ========================================================================

    @application.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = ", ".join(".".join(str(part) for part in error["loc"][1:]) for error in exc.errors())
        return _error(400, f"Invalid request: {fields or 'malformed body'}")

    @application.post("/api/sites/analyze", status_code=201)
    async def analyze_endpoint(body: AnalyzeRequest) -> JSONResponse:
        """Analyse a site and store the result."""
        if not body.url.startswith(("http://", "https://")):
            return _error(400, "url must be an absolute http(s) URL")
        try:
            site = await analysis_pipeline.analyze_site(
                body.url,
                body.simplified_policy,
                repository,
                cfg,
                detect_fn=detect_fn,
                summarize_fn=summarize_fn,
            )
        except Exception as exc:
            log.error("Analysis failed", {"url": body.url, "error": errors.get_error_message(exc)})
            return _error(500, errors.get_error_message(exc))

        return JSONResponse(
            status_code=201,
            content={
                "success": True,
                "message": "Site analyzed successfully",
                "site": analysis_pipeline.site_payload(site),
            },
        )

    @application.get("/api/sites")
    async def list_sites_endpoint() -> JSONResponse:
        sites = await repository.list_all()
        return JSONResponse(content=[analysis_pipeline.site_payload(site) for site in sites])

    @application.get("/api/sites/site")
    async def get_site_endpoint(url: str = Query(..., description="The analysed URL")) -> JSONResponse:
        site = await repository.get(url)
        if site is None:
            return _error(404, "Site not found")
        return JSONResponse(content=analysis_pipeline.site_payload(site))

    @application.get("/api/sites/network-graph")
    async def network_graph_endpoint(url: str = Query(..., description="The analysed URL")) -> JSONResponse:
        site = await repository.get(url)
        if site is None:
            return _error(404, "Site not found")
        graph = report.build_network_graph(site)
        return JSONResponse(content=graph.model_dump(mode="json", by_alias=True))

    @application.get("/api/sites/ai-summary")
    async def ai_summary_endpoint(url: str = Query(..., description="The analysed URL")) -> JSONResponse:
        site = await repository.get(url)
        if site is None:
            return _error(404, "Site not found")
        if site.ai_summary is None:
            return _error(404, "AI summary not available for this site")
        return JSONResponse(
            content={
                "url": site.url,
                "aiSummary": site.ai_summary.model_dump(mode="json", by_alias=True),
                "lastAnalyzed": site.last_analyzed.isoformat(),
                "trackerCount": len(site.trackers),
            }
        )

    return application


app = create_app()


# ============================================================================
# Start Server
# ============================================================================


def main() -> None:
    """Entry point for running the server."""
    cfg = config_mod.DataGuardianConfig()
    log.section("DataGuardian Server Started")
    log.success(f"Server listening on {cfg.host}:{cfg.port}")
    log.info("Environment", {"env": "production" if cfg.is_production else "development"})

    uvicorn.run(
        "dataguardian.app:app",
        host=cfg.host,
        port=cfg.port,
        reload=not cfg.is_production,
    )


if __name__ == "__main__":
    main()
