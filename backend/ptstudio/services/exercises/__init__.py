from .dto import (
    ExerciseCreateIn,
    ExerciseListIn,
    ExerciseOut,
    ExerciseUpdateIn,
    ExerciseVariableCreateIn,
    ExerciseVariableOut,
    ExerciseVariableUpdateIn,
)
from .service import ExerciseService, ExerciseVariableService, exercise_to_out, variable_to_out

__all__ = [
    "ExerciseService",
    "ExerciseVariableService",
    "exercise_to_out",
    "variable_to_out",
    "ExerciseCreateIn",
    "ExerciseListIn",
    "ExerciseOut",
    "ExerciseUpdateIn",
    "ExerciseVariableCreateIn",
    "ExerciseVariableOut",
    "ExerciseVariableUpdateIn",
]
