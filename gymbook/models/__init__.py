from gymbook.models.coach import Coach
from gymbook.models.feedback import CoachFeedback, Feedback
from gymbook.models.workout import Workout, WorkoutStatus

__all__ = ["Coach", "CoachFeedback", "Feedback", "Workout", "WorkoutStatus"]
