class ConfigurationError(Exception):
    """Raised at startup when required security configuration is missing"""
