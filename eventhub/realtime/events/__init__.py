"""Publishers that turn event changes into hub broadcasts.

Each helper builds a payload and hands it to a ``NotificationHub``. Server
setup and connection handling stay in ``eventhub.realtime.socketio``.
"""
