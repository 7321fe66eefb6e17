"""
relay_invoker.relay

Relay client package.

Responsibilities:
- Endpoint resolution, channels, channel factories and the invocation runner.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Callers should depend on `relay.runner` (not on channels or httpx directly).
