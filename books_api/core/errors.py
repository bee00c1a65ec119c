"""
Failures reported by the Supabase gateways.

Services raise these; routes turn them into HTTP responses.
"""


class GatewayError(Exception):
    """A call to Supabase failed. ``message`` is the provider's text."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class IdentityProviderError(GatewayError):
    pass


class InvalidCredentialsError(GatewayError):
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class StoreError(GatewayError):
    pass
