"""payments — payment-intent and checkout-session proxy routes."""
