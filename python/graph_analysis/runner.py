#!/usr/bin/env python3
"""
Command-line runner for prerequisite analysis.

    prereq-graph import data/courses.csv
    prereq-graph report
    prereq-graph chains "Calculus 2"
    prereq-graph --in-memory demo data/courses.csv
"""

import argparse
import logging
import sys
from typing import List, Optional

from data_ingestion.csv_importer import CsvImporter

from .analysis_service import PrerequisiteAnalysisService
from .exceptions import CourseNotFoundError
from .neo4j_store import Neo4jRecordStore
from .record_store import InMemoryRecordStore, RecordStore
from .settings import Settings, configure_logging

logger = logging.getLogger(__name__)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Course prerequisite graph analysis")
    parser.add_argument("--in-memory", action="store_true",
                        help="Use an empty in-memory store instead of Neo4j (useful with 'demo')")

    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Import courses and prerequisites from CSV")
    import_parser.add_argument("csv_path", help="CSV file: CourseName,PrereqCourseName,CreditHours,MajorType,Description")

    subparsers.add_parser("report", help="Print the prerequisite relationship report")
    subparsers.add_parser("cycles", help="List circular dependencies")

    chains_parser = subparsers.add_parser("chains", help="List prerequisite chains for a course")
    chains_parser.add_argument("course", help="Course name")

    popular_parser = subparsers.add_parser("popular", help="List prerequisites required by many courses")
    popular_parser.add_argument("--min-count", type=int, default=settings.popular_prerequisite_threshold,
                                help="Minimum number of dependent courses")

    subparsers.add_parser("no-prereqs", help="List courses with no prerequisites")

    demo_parser = subparsers.add_parser("demo", help="Import a CSV then run every analysis")
    demo_parser.add_argument("csv_path", help="CSV file to import first")

    return parser


def open_store(settings: Settings, in_memory: bool) -> RecordStore:
    if in_memory or settings.use_in_memory_store:
        logger.info("Using in-memory record store")
        return InMemoryRecordStore()

    store = Neo4jRecordStore.from_settings(settings)
    store.health_check()
    store.ensure_schema()
    logger.info(f"Connected to Neo4j at {settings.neo4j_uri}")
    return store


def import_csv(store: RecordStore, csv_path: str) -> None:
    result = CsvImporter(store, show_progress=True).import_from_csv(csv_path)
    logger.info(f"Import completed: {result}")
    if result.has_errors:
        logger.warning(f"Import had {len(result.errors)} errors:")
        for error in result.errors:
            logger.warning(f"  - {error}")


def run_demo(service: PrerequisiteAnalysisService) -> None:
    summary = service.run_full_analysis()
    logger.info(f"Found {summary.relationship_count} prerequisite relationships")
    print(summary.report)

    if summary.circular_dependencies.has_cycles:
        logger.warning("Circular dependencies found:")
        for cycle in summary.circular_dependencies.cycles:
            logger.warning(f"  - {cycle}")
    else:
        logger.info("No circular dependencies found")

    if summary.popular_prerequisites.prerequisites:
        logger.info("Popular prerequisites (required by 2+ courses):")
        for name in summary.popular_prerequisites.names():
            logger.info(f"  - {name}")

    logger.info(f"Courses with no prerequisites: {len(summary.courses_without_prerequisites)}")
    for course in summary.courses_without_prerequisites:
        logger.info(f"  - {course.name}")


def run_command(args: argparse.Namespace, store: RecordStore) -> None:
    service = PrerequisiteAnalysisService(store)

    if args.command == "import":
        import_csv(store, args.csv_path)
    elif args.command == "report":
        print(service.generate_prerequisite_report())
    elif args.command == "cycles":
        report = service.find_circular_dependencies()
        for cycle in report.cycles:
            print(cycle)
        if not report.has_cycles:
            print("No circular dependencies found")
    elif args.command == "chains":
        for chain in service.find_prerequisite_chains(args.course).chains:
            print(" -> ".join(chain))
    elif args.command == "popular":
        for entry in service.find_popular_prerequisites(args.min_count).prerequisites:
            print(f"{entry.course.name} (required by {entry.dependent_count} courses)")
    elif args.command == "no-prereqs":
        for course in service.find_courses_with_no_prerequisites():
            print(course.name)
    elif args.command == "demo":
        import_csv(store, args.csv_path)
        run_demo(service)


def main(argv: Optional[List[str]] = None) -> int:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    args = build_parser(settings).parse_args(argv)

    try:
        store = open_store(settings, args.in_memory)
    except Exception as e:
        logger.error(f"Record store unavailable: {e}")
        return 1

    try:
        run_command(args, store)
    except CourseNotFoundError as e:
        logger.error(str(e))
        return 1
    except FileNotFoundError as e:
        logger.error(f"CSV file not found: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Analysis failed: {e}")
        return 1
    finally:
        store.close()
        logger.info("Application shutdown complete")

    return 0


if __name__ == "__main__":
    sys.exit(main())
