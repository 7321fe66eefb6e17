"""
relay_invoker.auth

Authentication package.

Responsibilities:
- Token providers that turn a shared key into short-lived relay credentials.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package talks to the network; tokens are computed locally.
