"""Core types, errors, configuration and rate limiting for the SciX client."""
