"""Framework-independent core: query resolution, headers, admission, middleware."""
