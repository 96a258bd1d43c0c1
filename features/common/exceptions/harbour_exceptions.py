class HarbourDataError(Exception):
    """Base exception for harbour data errors."""
    pass

class FetchError(HarbourDataError):
    """Raised when no proxy or upstream responded with content."""
    pass

class ParseError(HarbourDataError):
    """Raised when markup has an unrecognised shape or yields no usable rows."""
    pass

class TideParseError(ParseError):
    """Raised when a tide page has no usable tide data."""
    pass

class WeatherParseError(ParseError):
    """Raised when the weather feed cannot be parsed."""
    pass

class WindWaveParseError(ParseError):
    """Raised when wind or wave readings cannot be parsed."""
    pass

class MissingBoundaryDataError(HarbourDataError):
    """Raised when an adjacent day needed to resolve last/next events is unavailable."""
    pass

class InvalidConfigurationError(HarbourDataError):
    """Raised when sailing settings fail validation."""
    pass
