"""
HealthLens HTTP API: skin analysis, mental-health feed and health check.

Run with:
    healthlens-server
    uvicorn healthlens.presentation.api:app --reload --port 5000
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from healthlens.application.errors import MissingImageError, NoRecordsFoundError
from healthlens.application.ports import DocumentStorePort, PredictorPort
from healthlens.application.schemas import ErrorResponse, HealthResponse, SkinAnalysisRequest
from healthlens.application.use_cases import HealthCheckUseCase, MentalHealthFeedUseCase, SkinAnalysisUseCase
from healthlens.domain.models import ResponseEnvelope
from healthlens.domain.rules import utc_timestamp
from healthlens.infrastructure.config import Settings
from healthlens.infrastructure.prediction.mock_predictor import MockSkinPredictor


logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    """Describe field errors by name; errors on the body itself mean it was not an object."""
    field_errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        if loc:
            field_errors.append(f"{'.'.join(loc)}: {err.get('msg', 'invalid value')}")
    if field_errors:
        return "; ".join(field_errors)
    return "Request body must be a JSON object"


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[DocumentStorePort] = None,
    predictor: Optional[PredictorPort] = None,
) -> FastAPI:
    """
    Build the app. When no store is given, one is built at startup from
    settings.store_backend: an in-memory store seeded from the bundled
    datasets, or a MongoDB store that is closed again at shutdown.
    """
    settings = settings or Settings()
    predictor = predictor or MockSkinPredictor()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = None
        if app.state.store is None and settings.store_backend == "memory":
            from healthlens.infrastructure.catalog.importer import seed_memory_store

            logger.info("Using in-memory store seeded from bundled data")
            _wire(app, seed_memory_store(settings))
        elif app.state.store is None:
            from healthlens.infrastructure.store.mongo_store import MongoDocumentStore

            owned = MongoDocumentStore(settings=settings)
            try:
                owned.connect()
            except Exception as e:
                logger.error("Starting without a database connection: %s", e)
            _wire(app, owned)

        yield

        if owned is not None:
            owned.close()

    def _wire(app: FastAPI, s: DocumentStorePort) -> None:
        app.state.store = s
        app.state.skin_analysis = SkinAnalysisUseCase(
            predictor=predictor,
            store=s,
            collection=settings.skin_diseases_collection,
            lookup_timeout=settings.lookup_timeout,
        )
        app.state.mental_health = MentalHealthFeedUseCase(
            store=s,
            collection=settings.mental_health_collection,
            limit=settings.feed_limit,
        )
        app.state.health = HealthCheckUseCase(store=s)

    app = FastAPI(title="HealthLens API", lifespan=lifespan)
    app.state.store = None
    if store is not None:
        _wire(app, store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "message": _validation_message(exc)},
        )

    @app.post(
        "/api/skin-analysis",
        response_model=ResponseEnvelope,
        # stored catalog fields come back exactly as stored
        response_model_exclude_unset=True,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    def skin_analysis(body: SkinAnalysisRequest, request: Request):
        try:
            return request.app.state.skin_analysis.analyze(body.image)
        except MissingImageError as e:
            return JSONResponse(status_code=400, content={"error": str(e)})
        except Exception as e:
            logger.exception("Error processing skin analysis: %s", e)
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Failed to process image",
                    "message": str(e) or "Unknown error",
                    "timestamp": utc_timestamp(),
                },
            )

    @app.get("/api/mental-health", responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
    def mental_health(request: Request):
        try:
            return request.app.state.mental_health.fetch()
        except NoRecordsFoundError as e:
            return JSONResponse(
                status_code=404,
                content={"error": "No mental health data found", "message": str(e)},
            )
        except Exception as e:
            logger.exception("Error fetching mental health data: %s", e)
            return JSONResponse(
                status_code=500,
                content={"error": "Failed to fetch mental health data", "message": str(e)},
            )

    @app.get("/api/health", response_model=HealthResponse)
    def health(request: Request):
        return request.app.state.health.status()

    return app


app = create_app()


def main():
    import uvicorn

    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    settings = Settings()
    logger.info("Server running on port %s", settings.port)
    logger.info("Health check available at http://localhost:%s/api/health", settings.port)
    uvicorn.run("healthlens.presentation.api:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
