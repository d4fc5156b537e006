"""
connectors — outbound provider integrations.

Provides:
  • OAuthTokenCache: client-credentials bearer tokens, refreshed before expiry
  • PaymentsClient: payment intents & checkout sessions (Tilled)
  • ShippingClient: shipper-account registration (OAuth2 bearer)
  • UpstreamAuthError / ProviderError
"""
