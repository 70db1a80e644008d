"""Falcon ASGI surface for webhook deliveries.

Public API
----------
create_app
    Build the Falcon app around an existing dispatcher.
WebhookAppBuilder
    Register handlers for a secret and build the app in one chain.
"""

from hubhook.api.app import WebhookAppBuilder, create_app

__all__ = ["WebhookAppBuilder", "create_app"]
