"""Course repository."""

from typing import Optional

from magnolia.schemas import Course, CoursePatch, MaterialPatch, merge_material
from magnolia.storage import COURSES_KEY

from .base import JsonCollection


class CourseRepository(JsonCollection[Course]):
    key = COURSES_KEY
    model = Course
    id_prefix = "course-"

    def update_material(
        self, course_id: str, index: int, patch: MaterialPatch
    ) -> Optional[Course]:
        """
        Patch a single material in place.

        Returns None when the course or the material index does not exist.
        """
        course = self.get(course_id)
        if course is None or not 0 <= index < len(course.materials):
            return None
        materials = list(course.materials)
        materials[index] = merge_material(materials[index], patch)
        return self.update(course_id, CoursePatch(materials=materials))

    def mark_completed(self, course_id: str, completion_date: str) -> Optional[Course]:
        return self.update(
            course_id, CoursePatch(completed=True, completion_date=completion_date)
        )
