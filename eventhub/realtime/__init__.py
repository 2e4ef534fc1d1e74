"""Realtime infrastructure (Socket.IO).

Holds the notification hub that event rooms and global broadcasts go through,
plus the Socket.IO connection handlers that feed it subscriptions.
"""
