from classweave.models.class_group import Batch, ClassGroup  # noqa: F401
from classweave.models.classroom import Classroom  # noqa: F401
from classweave.models.subject import Subject  # noqa: F401
from classweave.models.teacher import Teacher  # noqa: F401
from classweave.models.timetable import Lesson, Timetable  # noqa: F401
from classweave.models.timing import TimeSlot, Timing  # noqa: F401
from classweave.models.year import AcademicYear  # noqa: F401
