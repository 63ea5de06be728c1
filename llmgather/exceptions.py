class GatherError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(GatherError):
    # errors related to configuration and profiles.
    pass

class DiscoveryError(GatherError):
    # errors during target resolution or traversal.
    pass

class TargetNotFoundError(DiscoveryError):
    # the requested target directory or file does not exist.
    pass

class OutputError(GatherError):
    # errors during output operations.
    pass
