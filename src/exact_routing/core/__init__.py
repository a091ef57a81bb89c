"""Route table and middleware composition, independent of the ASGI entry point."""
