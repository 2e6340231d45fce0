from ptstudio.models.category import Category
from ptstudio.models.exercise import Exercise, ExerciseVariable
from ptstudio.models.photo import Photo, PhotoModel
from ptstudio.models.program import (
    Template,
    TemplateExercise,
    TemplateExerciseSetVariable,
    Training,
    TrainingExercise,
    TrainingExerciseSetVariable,
)
from ptstudio.models.user import User, UserDetails, UserRole, UserStatus

__all__ = [
    "Category",
    "Exercise",
    "ExerciseVariable",
    "Photo",
    "PhotoModel",
    "Template",
    "TemplateExercise",
    "TemplateExerciseSetVariable",
    "Training",
    "TrainingExercise",
    "TrainingExerciseSetVariable",
    "User",
    "UserDetails",
    "UserRole",
    "UserStatus",
]
