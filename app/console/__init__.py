"""
Admin console API.

User management, roadmap and task authoring, a skills overview and
dashboard statistics for accounts with the admin role.
"""
