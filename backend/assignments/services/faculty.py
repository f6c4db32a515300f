import logging
from typing import Optional

from academics.utils import normalize_course_code
from assignments.models import Assignment, FacultyConfig

logger = logging.getLogger(__name__)


def resolve_script_url(assignment: Assignment) -> Optional[str]:
    """Find the submission script URL for an assignment.

    Lookup order: the faculty's config for the assignment's course, then any
    config of that faculty that has a URL, then the assignment's own
    `script_url`.
    """
    faculty_name = assignment.faculty_name
    if faculty_name:
        configs = list(FacultyConfig.objects.filter(faculty_name=faculty_name))
        wanted = normalize_course_code(assignment.target_course)
        for cfg in configs:
            if cfg.script_url and normalize_course_code(cfg.course) == wanted:
                return cfg.script_url
        for cfg in configs:
            if cfg.script_url:
                return cfg.script_url

    if assignment.script_url:
        return assignment.script_url

    logger.warning('No script URL for assignment=%s faculty=%r course=%r', assignment.pk, faculty_name, assignment.target_course)
    return None
