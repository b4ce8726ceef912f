"""Remote video platform integrations."""
