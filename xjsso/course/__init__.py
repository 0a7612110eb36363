from .models import Batch, CapacityInfo, CourseError, CourseInfo, CourseType, GenderLimit, TeachingClass  # noqa: F401
from .session import CourseSession, get_batch_list  # noqa: F401
