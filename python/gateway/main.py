"""
FastAPI gateway for prerequisite graph analysis
Exposes cycle detection, chain enumeration, popularity ranking and reports over HTTP
"""

import logging
import time
from datetime import datetime
from typing import Callable, TypeVar

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from neo4j.exceptions import DriverError, Neo4jError
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

from graph_analysis.analysis_service import PrerequisiteAnalysisService
from graph_analysis.exceptions import CourseNotFoundError
from graph_analysis.models import ChainSet, CircularDependencyReport, PopularityList
from graph_analysis.settings import Settings, configure_logging

from . import dependencies
from .dependencies import get_analysis_service
from .models import CourseListResponse, CourseRelationshipsResponse, ErrorDetail, HealthResponse

settings = Settings.from_env()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

T = TypeVar("T")

# Record store failures map to 503; anything else is a 500
STORE_ERRORS = (DriverError, Neo4jError, ConnectionError)

# HTTP request counter metric for observability
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests by method, path template, and status',
    ['method', 'route', 'status']
)

app = FastAPI(
    title="Prerequisite Graph Analyzer",
    description="Structural analysis of course prerequisite relationships",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.middleware("http")
async def http_request_counter_middleware(request, call_next):
    """Count all HTTP requests with method, route template, and status labels"""
    response = await call_next(request)

    route = request.url.path
    if request.scope.get("route"):
        route = request.scope["route"].path

    http_requests_total.labels(
        method=request.method,
        route=route,
        status=str(response.status_code)
    ).inc()

    return response


@app.on_event("startup")
def startup_event():
    """Initialize services on startup"""
    logger.info("Initializing Prerequisite Graph Analyzer gateway...")
    dependencies.init_services(settings)


@app.on_event("shutdown")
def shutdown_event():
    logger.info("Shutting down Prerequisite Graph Analyzer gateway...")
    dependencies.close_services()
    logger.info("Shutdown complete")


@app.exception_handler(CourseNotFoundError)
async def course_not_found_handler(request, exc: CourseNotFoundError):
    return JSONResponse(
        status_code=404,
        content={
            "success": False,
            "error": ErrorDetail(
                code="COURSE_NOT_FOUND",
                message=str(exc),
                details={"course": exc.course_name}
            ).model_dump()
        }
    )


def _analyze(operation: str, fn: Callable[..., T], *args) -> T:
    """Run an analysis call, turning record store failures into 503s"""
    start_time = time.time()
    try:
        result = fn(*args)
    except STORE_ERRORS as e:
        logger.exception(f"{operation} failed: {e}")
        raise HTTPException(
            status_code=503,
            detail=ErrorDetail(
                code="RECORD_STORE_ERROR",
                message=f"{operation} failed",
                details={"error": str(e)}
            ).model_dump()
        )
    logger.info(f"{operation} completed in {int((time.time() - start_time) * 1000)}ms")
    return result


@app.get("/health", response_model=HealthResponse)
def health_check():
    """Health check endpoint"""
    store = dependencies.get_record_store()
    services = {}
    overall_status = "healthy"

    if store is None:
        services["record_store"] = False
        overall_status = "unhealthy"
    else:
        try:
            check = getattr(store, "health_check", None)
            if check is not None:
                check()
            services["record_store"] = True
        except Exception:
            services["record_store"] = False
            overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        services=services,
        timestamp=datetime.utcnow().isoformat()
    )


@app.get("/metrics")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/courses/no-prerequisites", response_model=CourseListResponse)
def courses_without_prerequisites(svc: PrerequisiteAnalysisService = Depends(get_analysis_service)):
    courses = _analyze("No-prerequisite listing", svc.find_courses_with_no_prerequisites)
    return CourseListResponse(courses=courses, count=len(courses))


@app.get("/courses/{name}/prerequisites", response_model=CourseRelationshipsResponse)
def course_prerequisites(name: str, svc: PrerequisiteAnalysisService = Depends(get_analysis_service)):
    edges = _analyze("Prerequisite lookup", svc.get_prerequisites_for_course, name)
    return CourseRelationshipsResponse(course=name, relationships=edges)


@app.get("/courses/{name}/dependents", response_model=CourseRelationshipsResponse)
def course_dependents(name: str, svc: PrerequisiteAnalysisService = Depends(get_analysis_service)):
    edges = _analyze("Dependent lookup", svc.get_courses_requiring_prerequisite, name)
    return CourseRelationshipsResponse(course=name, relationships=edges)


@app.get("/courses/{name}/chains", response_model=ChainSet)
def course_chains(name: str, svc: PrerequisiteAnalysisService = Depends(get_analysis_service)):
    return _analyze("Chain enumeration", svc.find_prerequisite_chains, name)


@app.get("/prerequisites/popular", response_model=PopularityList)
def popular_prerequisites(
    min_count: int = Query(default=settings.popular_prerequisite_threshold, ge=1),
    svc: PrerequisiteAnalysisService = Depends(get_analysis_service)
):
    return _analyze("Popularity ranking", svc.find_popular_prerequisites, min_count)


@app.get("/analysis/cycles", response_model=CircularDependencyReport)
def circular_dependencies(svc: PrerequisiteAnalysisService = Depends(get_analysis_service)):
    return _analyze("Cycle detection", svc.find_circular_dependencies)


@app.get("/analysis/report", response_class=PlainTextResponse)
def prerequisite_report(svc: PrerequisiteAnalysisService = Depends(get_analysis_service)):
    return PlainTextResponse(_analyze("Report generation", svc.generate_prerequisite_report))


def run():
    import uvicorn
    uvicorn.run("gateway.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
