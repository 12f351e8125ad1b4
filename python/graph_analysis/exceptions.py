"""
Errors raised by the prerequisite analysis engine and its record stores.

Record store driver errors are not wrapped here; they propagate unchanged.
"""


class PrerequisiteGraphError(Exception):
    """Base class for prerequisite graph errors"""


class CourseNotFoundError(PrerequisiteGraphError):
    """A course name was looked up and does not exist"""

    def __init__(self, course_name: str):
        self.course_name = course_name
        super().__init__(f"Course not found: {course_name}")


class DuplicateCourseError(PrerequisiteGraphError):
    """A course with the same name already exists in the store"""

    def __init__(self, course_name: str):
        self.course_name = course_name
        super().__init__(f"Course already exists: {course_name}")
