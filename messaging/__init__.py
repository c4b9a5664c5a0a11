"""Messaging app initialization.

The messaging app provides 1‑to‑1 direct messages between users, with a
REST history API and a realtime WebSocket relay.
"""
