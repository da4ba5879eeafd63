"""
Authentication application.

User accounts with local (username + password) and Google sign-in, JWT
sessions, profile editing, profile pictures, user search and the public
contact form.

Key components:
    - User model: single identity record with role and picture fields
    - AuthService / ProfileService / GoogleIdentityService: business logic
    - Adapters: allauth hooks for the Google flow

Usage:
    from authentication.models import User
    from authentication.services import AuthService
"""
