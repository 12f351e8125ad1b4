"""
CSV import of courses and prerequisite relationships into a record store.

Expected row format (no header):
    CourseName,PrereqCourseName,CreditHours,MajorType,Description

Malformed rows are recorded as per-line errors and skipped; the import
continues with the next row.
"""

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Union

from tqdm import tqdm

from graph_analysis.models import Course, MajorType, PrerequisiteEdge
from graph_analysis.record_store import RecordStore

logger = logging.getLogger(__name__)

EXPECTED_FIELDS = 5
PREREQUISITE_ONLY_DESCRIPTION = "Imported as prerequisite"

MAJOR_TYPE_ALIASES = {
    "M1": MajorType.MAJOR1,
    "MAJOR1": MajorType.MAJOR1,
    "M2": MajorType.MAJOR2,
    "MAJOR2": MajorType.MAJOR2,
    "GE": MajorType.GENERAL_EDUCATION,
    "GENERALEDUCATION": MajorType.GENERAL_EDUCATION,
    "M": MajorType.MINOR,
    "MINOR": MajorType.MINOR,
}


def parse_major_type(value: str) -> MajorType:
    """Map CSV major type codes to MajorType; unknown codes fall back to Major1"""
    return MAJOR_TYPE_ALIASES.get(value.strip().upper(), MajorType.MAJOR1)


@dataclass
class ImportResult:
    courses_imported: int = 0
    prerequisites_imported: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def __str__(self) -> str:
        return (
            f"ImportResult(courses={self.courses_imported}, "
            f"prerequisites={self.prerequisites_imported}, errors={len(self.errors)})"
        )


class CsvImporter:
    """Loads course/prerequisite rows into a record store, deduplicating courses by name"""

    def __init__(self, store: RecordStore, show_progress: bool = False):
        self.store = store
        self.show_progress = show_progress

    def import_from_csv(self, file_path: Union[str, Path]) -> ImportResult:
        file_path = Path(file_path)
        logger.info(f"Starting CSV import from: {file_path}")

        result = ImportResult()
        # course name -> id for this run
        course_ids: Dict[str, int] = {}

        with open(file_path, "r", encoding="utf-8", newline="") as f:
            # quoted fields may follow ", " and contain commas
            reader = csv.reader(f, skipinitialspace=True)
            rows = tqdm(reader, desc="Importing rows", disable=not self.show_progress)
            for line_number, fields in enumerate(rows, start=1):
                try:
                    self._import_row(fields, line_number, course_ids, result)
                except Exception as e:
                    result.errors.append(f"Line {line_number}: {e}")
                    logger.warning(f"Error processing line {line_number}: {e}")

        logger.info(
            f"CSV import completed. Courses: {result.courses_imported}, "
            f"Prerequisites: {result.prerequisites_imported}, Errors: {len(result.errors)}"
        )
        return result

    def _import_row(
        self,
        fields: List[str],
        line_number: int,
        course_ids: Dict[str, int],
        result: ImportResult
    ) -> None:
        fields = [f.strip() for f in fields]
        if len(fields) < EXPECTED_FIELDS:
            result.errors.append(f"Line {line_number}: Insufficient fields")
            return

        course_name, prerequisite_name = fields[0], fields[1]
        credit_hours = int(fields[2])
        major_type = parse_major_type(fields[3])
        description = fields[4]

        if course_name not in course_ids:
            course = Course(
                name=course_name,
                credit_hours=credit_hours,
                major_type=major_type,
                description=description,
            )
            course_ids[course_name] = self._get_or_insert(course, result)

        if not prerequisite_name or prerequisite_name == course_name:
            return

        if prerequisite_name not in course_ids:
            placeholder = Course(
                name=prerequisite_name,
                credit_hours=0,
                major_type=MajorType.MAJOR1,
                description=PREREQUISITE_ONLY_DESCRIPTION,
            )
            course_ids[prerequisite_name] = self._get_or_insert(placeholder, result)

        course_id = course_ids[course_name]
        prerequisite_id = course_ids[prerequisite_name]
        if self.store.prerequisite_exists(course_id, prerequisite_id):
            return

        self.store.insert_prerequisite(PrerequisiteEdge(
            course_id=course_id,
            prerequisite_course_id=prerequisite_id,
            required=True,
        ))
        result.prerequisites_imported += 1
        logger.debug(f"Created prerequisite: {prerequisite_name} -> {course_name}")

    def _get_or_insert(self, course: Course, result: ImportResult) -> int:
        """Reuse a course already in the store, otherwise insert it"""
        existing = self.store.find_course_by_name(course.name)
        if existing is not None:
            return existing.id

        course_id = self.store.insert_course(course)
        result.courses_imported += 1
        logger.debug(f"Imported course: {course.name} with ID: {course_id}")
        return course_id
