"""Framework-independent CRUD core: validator, repository and resource service."""
