"""TaskStore engine — errors, configuration, operation context, logging."""
