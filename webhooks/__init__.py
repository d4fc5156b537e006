"""
webhooks — signed callbacks from the payments provider.

Provides:
  • ``verify_signature`` — timestamped HMAC-SHA256 header verification
  • Merchant-status and payment-intent webhook routes
"""
