"""
OpenAPI schema customizations for drf-spectacular.

Tag naming follows the pattern: [App Name] - [Group Name]
Examples:
- Auth - Profile
- Portfolio - Projects
- Chat
- Roadmaps - Progress
- Admin - Roadmaps
"""

# Natural language summaries for dj-rest-auth / simplejwt endpoints
AUTH_SUMMARIES = {
    "auth_token_refresh_create": (
        "Refresh access token",
        "Get a new access token using a valid refresh token.",
    ),
    "auth_google_create": (
        "Sign in with Google",
        "Exchange a Google authorization code or access token for JWT tokens.",
    ),
}

TAG_DESCRIPTIONS = [
    ("Auth", "Registration, login, token refresh and Google sign-in."),
    ("Auth - Profile", "Current user profile, picture and password."),
    ("Auth - Users", "User search and public profiles."),
    ("Portfolio - Projects", "Project CRUD and cover images."),
    ("Portfolio - Skills", "Skill CRUD and category grouping."),
    ("Connections", "Connection requests and the connections graph."),
    ("Chat", "Direct conversations, message history, read receipts and unread counts."),
    ("Files", "Object storage uploads and presigned URLs."),
    ("Roadmaps", "Skill roadmap catalogue."),
    ("Roadmaps - Progress", "Per-user roadmap progress, certificates and projects."),
    ("Admin", "Admin console: users, skills overview and statistics."),
    ("Admin - Roadmaps", "Admin console roadmap and task authoring."),
]


def group_auth_endpoints(result, generator, request, public):
    """
    Postprocessing hook that tags third-party auth endpoints.

    Views in this project set tags= in @extend_schema; only the endpoints
    provided by simplejwt and dj-rest-auth need grouping here.
    """
    paths = result.get("paths", {})

    for path, methods in paths.items():
        for method, operation in methods.items():
            if not isinstance(operation, dict):
                continue

            operation_id = operation.get("operationId", "")

            if operation_id in AUTH_SUMMARIES:
                summary, description = AUTH_SUMMARIES[operation_id]
                operation["summary"] = summary
                operation["description"] = description

            if operation_id.startswith("auth_") and not operation.get("tags"):
                operation["tags"] = ["Auth"]

    result["tags"] = [
        {"name": name, "description": description}
        for name, description in TAG_DESCRIPTIONS
    ]
    return result
