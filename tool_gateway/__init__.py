"""Tool gateway - authenticated routing of /tool/{name} calls to registered backends."""
