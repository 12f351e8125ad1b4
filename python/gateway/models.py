"""
Pydantic models for the gateway request/response cycle.
Analysis payloads reuse the graph_analysis models directly.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel

from graph_analysis.models import Course, PrerequisiteEdge


class ErrorDetail(BaseModel):
    """Error detail for API responses"""
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    """Health check response"""
    status: Literal["healthy", "degraded", "unhealthy"]
    services: Dict[str, bool] = {}
    version: str = "1.0.0"
    timestamp: str


class CourseRelationshipsResponse(BaseModel):
    """Direct relationships of one course"""
    course: str
    relationships: List[PrerequisiteEdge]


class CourseListResponse(BaseModel):
    courses: List[Course]
    count: int
