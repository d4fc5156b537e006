"""shipping — shipper-account registration proxy routes."""
