"""
Factory Boy factories for roadmap models.
"""

import factory

from authentication.tests.factories import UserFactory
from roadmaps.models import RoadmapTask, SkillRoadmap, UserRoadmap, UserTaskProgress


class SkillRoadmapFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = SkillRoadmap

    name = factory.Sequence(lambda n: f"Roadmap {n}")
    description = factory.Faker("sentence")
    category = "frontend"
    estimated_duration = "4-6 months"
    difficulty = SkillRoadmap.Difficulty.BEGINNER


class RoadmapTaskFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = RoadmapTask

    roadmap = factory.SubFactory(SkillRoadmapFactory)
    title = factory.Sequence(lambda n: f"Task {n}")
    order_index = factory.Sequence(lambda n: n + 1)
    estimated_hours = 10
    resources = factory.LazyFunction(lambda: ["MDN"])


class UserRoadmapFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = UserRoadmap

    user = factory.SubFactory(UserFactory)
    roadmap = factory.SubFactory(SkillRoadmapFactory)


class UserTaskProgressFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = UserTaskProgress

    user_roadmap = factory.SubFactory(UserRoadmapFactory)
    user = factory.SelfAttribute("user_roadmap.user")
    task = factory.SubFactory(RoadmapTaskFactory, roadmap=factory.SelfAttribute("..user_roadmap.roadmap"))
