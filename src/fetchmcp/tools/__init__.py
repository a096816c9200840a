"""Tools exposed by the server."""
