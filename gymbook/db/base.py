# Garante o registro de TODAS as models no mesmo registry
from gymbook.db.base_class import Base  # noqa
from gymbook.models.coach import Coach  # noqa
from gymbook.models.feedback import CoachFeedback, Feedback  # noqa
from gymbook.models.workout import Workout  # noqa
