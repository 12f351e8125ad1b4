"""
FastAPI dependencies to avoid circular imports
"""
import logging
from typing import Optional

from fastapi import HTTPException

from graph_analysis.analysis_service import PrerequisiteAnalysisService
from graph_analysis.neo4j_store import Neo4jRecordStore
from graph_analysis.record_store import InMemoryRecordStore, RecordStore
from graph_analysis.settings import Settings

logger = logging.getLogger(__name__)

record_store: Optional[RecordStore] = None
analysis_service: Optional[PrerequisiteAnalysisService] = None


def init_services(settings: Settings) -> None:
    """Create the record store and analysis service for this process"""
    global record_store, analysis_service

    if settings.use_in_memory_store:
        logger.warning("USE_IN_MEMORY_STORE enabled, serving an empty in-memory record store")
        record_store = InMemoryRecordStore()
    else:
        record_store = Neo4jRecordStore.from_settings(settings)
        try:
            record_store.health_check()
            record_store.ensure_schema()
        except Exception as e:
            # requests will fail with 503 until Neo4j is reachable
            logger.warning(f"Neo4j not reachable at startup: {e}")

    analysis_service = PrerequisiteAnalysisService(record_store)


def close_services() -> None:
    global record_store, analysis_service
    if record_store is not None:
        try:
            record_store.close()
            logger.info("Record store connections closed")
        except Exception as e:
            logger.error(f"Error closing record store: {e}")
    record_store = None
    analysis_service = None


def get_record_store() -> Optional[RecordStore]:
    return record_store


def get_analysis_service() -> PrerequisiteAnalysisService:
    """Dependency to get the analysis service instance"""
    if analysis_service is None:
        raise HTTPException(
            status_code=503,
            detail="Analysis service not available"
        )
    return analysis_service
