"""Publishers that turn catalog and enrollment changes into socket messages.

Each module builds a JSON payload and hands it to the emit helpers in
``campus_events.realtime.socketio``; failures are logged and swallowed.
"""
