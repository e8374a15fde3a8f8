"""Identity provider webhook reconciliation service.

Receives MFA and email-verification change events from Auth0 and Keycloak and
applies them to local user records exactly once per event.
"""

__version__ = "0.1.0"
