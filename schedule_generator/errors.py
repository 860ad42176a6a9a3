class ScheduleError(Exception):
    """Base class for everything the generator raises on purpose."""


class ScheduleInputError(ScheduleError):
    """Input documents cannot support a generation run."""


class InvalidInputError(ScheduleInputError, ValueError):
    """A field is malformed or outside its allowed range."""


class EmptyCatalogError(ScheduleInputError):
    """No usable course is left once the catalog and offering are merged."""


class ScheduleStateError(ScheduleError):
    """A lifecycle transition was requested that the schedule's status forbids."""
