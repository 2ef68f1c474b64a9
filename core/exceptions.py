class RelayError(Exception):
    """Base error for the relay"""


class ConfigError(RelayError):
    """Secret files or settings are missing or malformed"""


class SlackLookupError(RelayError):
    """A Slack Web API lookup failed or returned no data"""
