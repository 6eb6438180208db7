"""Exceptions raised by map generation."""


class InvalidConfigurationError(ValueError):
    """A configuration value that cannot be used to generate a map."""


class EmptyColorRampError(ValueError):
    """A color lookup on a ramp without any steps."""
