"""Rule-based support responder for the CrustData people-search API."""
