"""
Chat app for direct messaging.

This app handles:
- One conversation per pair of users
- Message sending and history
- WebSocket realtime delivery, typing indicators and read receipts
- Online presence for connected users

WebSocket Support:
    Uses Django Channels for realtime communication.
    See consumers.py for WebSocket handlers.
    See routing.py for WebSocket URL patterns.
"""
