"""Framework-level API routers."""
