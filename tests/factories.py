"""
Test data factories for generating test objects.

This module provides Factory Boy factories for users and for the checklist
payloads exchanged between Gemini, the code check flow and Todoist.
"""

import factory

from app.core.security import hash_password
from models import User

DEFAULT_PASSWORD = "password123"


class UserFactory(factory.Factory):
    """Factory for creating User test instances.

    ``build()`` returns an unsaved user; add it to a session to persist it.
    """

    class Meta:
        model = User

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    name = factory.Faker("name")
    password = factory.LazyFunction(lambda: hash_password(DEFAULT_PASSWORD))
    google_id = None


class ChecklistItemFactory(factory.DictFactory):
    """One checklist entry as Gemini returns it."""

    itemDescription = factory.Sequence(lambda n: f"Requirement {n} is implemented")
    isCompleted = False


class SimplifiedChecklistFactory(factory.DictFactory):
    """A Gemini verdict: a summary plus checklist items."""

    summary = factory.Faker("sentence", nb_words=8)
    checklist = factory.LazyFunction(lambda: ChecklistItemFactory.build_batch(3))


class TaskCreatePayloadFactory(factory.DictFactory):
    """Body of ``POST /api/todoist/create``."""

    message = factory.Faker("sentence", nb_words=6)
    simplifiedChecklist = factory.SubFactory(SimplifiedChecklistFactory)


class TodoistTaskFactory(factory.DictFactory):
    """A task as the Todoist REST API returns it."""

    id = factory.Sequence(lambda n: str(2000 + n))
    content = factory.Faker("sentence", nb_words=4)
    description = ""
    parent_id = None
    is_completed = False
