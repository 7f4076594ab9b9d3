class ConfigurationError(ValueError):
    """
    Raised while building joint controllers or loading rule files.

    This is the only error the analysis core raises on purpose; everything
    that happens per frame degrades to a default value instead.
    """
