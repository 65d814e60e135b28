"""Realtime infrastructure (Socket.IO).

One socket server is shared by every feature that pushes updates to the
frontend: catalog broadcasts and admin enrollment alerts.
"""
