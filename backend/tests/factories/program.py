"""Factory Boy definitions for templates and trainings."""

from __future__ import annotations

import factory

from ptstudio.models import (
    Template,
    Training,
    TrainingExercise,
    TrainingExerciseSetVariable,
)
from tests.factories import BaseFactory
from tests.factories.catalog import ExerciseFactory, ExerciseVariableFactory
from tests.factories.user import ClientFactory, TrainerFactory


class TemplateFactory(BaseFactory):
    class Meta:
        model = Template

    id = None
    name = factory.Sequence(lambda n: f"Template {n}")
    description = None
    created_by = factory.LazyFunction(lambda: TrainerFactory().id)


class TrainingFactory(BaseFactory):
    """Training whose target is a client of the same trainer."""

    class Meta:
        model = Training

    id = None
    name = factory.Sequence(lambda n: f"Training {n}")
    description = None
    created_by = factory.LazyFunction(lambda: TrainerFactory().id)
    training_target_id = factory.LazyAttribute(lambda o: ClientFactory(created_by=o.created_by).id)


class TrainingExerciseFactory(BaseFactory):
    class Meta:
        model = TrainingExercise

    id = None
    training_id = factory.LazyFunction(lambda: TrainingFactory().id)
    exercise_id = factory.LazyFunction(lambda: ExerciseFactory().id)
    order_position = factory.Sequence(lambda n: n + 1)


class TrainingExerciseSetVariableFactory(BaseFactory):
    class Meta:
        model = TrainingExerciseSetVariable

    id = None
    training_exercise_id = factory.LazyFunction(lambda: TrainingExerciseFactory().id)
    set_number = 1
    exercise_variable_id = factory.LazyFunction(lambda: ExerciseVariableFactory().id)
    target_value = None
