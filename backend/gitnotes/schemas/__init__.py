"""Request/response and upstream payload schemas."""
