from .errors import EmptyCatalogError, InvalidInputError, ScheduleError, ScheduleInputError, ScheduleStateError
from .generate_schedule import generate_schedule
from .models import Course, GenerationResult, Metrics, Preferences, Schedule, Section, Student
from .schedule_store import ScheduleStore
from .schedule_validator import validate_schedule

__version__ = "0.1.0"
