"""
WebSocket URL routing for the chat application.

URL Patterns:
    ws/chat/ - Single realtime connection per client

Authentication:
    JWT access token as ?token=<jwt> or the ``jwt, <token>`` subprotocol.
    JWTAuthMiddleware attaches the user to the consumer's scope.
"""

from django.urls import path

from chat import consumers

websocket_urlpatterns = [
    path("ws/chat/", consumers.ChatConsumer.as_asgi()),
]
