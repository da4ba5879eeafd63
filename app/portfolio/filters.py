import django_filters as filters

from portfolio.models import Project, Skill


class ProjectFilter(filters.FilterSet):
    class Meta:
        model = Project
        fields = ["status"]


class SkillFilter(filters.FilterSet):
    category = filters.CharFilter(field_name="category", lookup_expr="iexact")

    class Meta:
        model = Skill
        fields = ["category", "level"]
