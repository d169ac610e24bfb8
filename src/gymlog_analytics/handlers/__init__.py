# Import all handlers so they register themselves.
from . import summary  # noqa: F401
from . import distribution  # noqa: F401
from . import exercise_history  # noqa: F401
from . import muscle_groups  # noqa: F401
from . import personal_records  # noqa: F401
from . import weekly_progress  # noqa: F401
