# Core package initialization
# Cross-cutting concerns: configuration, errors, security, logging, metrics.
