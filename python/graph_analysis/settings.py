"""
Runtime configuration read from environment variables.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Settings:
    """Neo4j connection and analysis defaults"""
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_username: str = "neo4j"
    neo4j_password: str = "password"
    neo4j_database: Optional[str] = None
    neo4j_max_pool_size: int = 10
    neo4j_connection_timeout: float = 30.0
    neo4j_max_connection_lifetime: int = 1800
    log_level: str = "INFO"
    use_in_memory_store: bool = False
    popular_prerequisite_threshold: int = 2

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            neo4j_uri=os.getenv("NEO4J_URI", "bolt://localhost:7687"),
            neo4j_username=os.getenv("NEO4J_USERNAME", "neo4j"),
            neo4j_password=os.getenv("NEO4J_PASSWORD", "password"),
            neo4j_database=os.getenv("NEO4J_DATABASE") or None,
            neo4j_max_pool_size=int(os.getenv("NEO4J_MAX_POOL_SIZE", "10")),
            neo4j_connection_timeout=float(os.getenv("NEO4J_CONNECTION_TIMEOUT", "30")),
            neo4j_max_connection_lifetime=int(os.getenv("NEO4J_MAX_CONNECTION_LIFETIME", "1800")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            use_in_memory_store=_env_bool("USE_IN_MEMORY_STORE"),
            popular_prerequisite_threshold=int(os.getenv("POPULAR_PREREQUISITE_THRESHOLD", "2")),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
