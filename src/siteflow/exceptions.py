"""Custom exceptions for the siteflow CLI tool.

This module defines a hierarchy of custom exceptions for better error
categorization and handling throughout the application.
"""


class SiteflowError(Exception):
    """Base exception for all siteflow errors.

    Parameters
    ----------
    message : str
        Error message describing what went wrong.
    details : dict, optional
        Additional structured information about the error.

    Attributes
    ----------
    message : str
        The error message.
    details : dict
        Dictionary containing additional error context.
    """

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        """Format error message with optional details.

        Returns
        -------
        str
            Formatted error message.
        """
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigError(SiteflowError):
    """Configuration loading or validation error.

    Raised when:
    - Configuration files are invalid
    - Required configuration keys are missing (API token, site)
    - Configuration values are invalid
    """

    pass


class ValidationError(SiteflowError):
    """Input validation error.

    Raised when user-provided inputs (site names, workflow IDs) fail validation.
    """

    pass


class APIError(SiteflowError):
    """Error communicating with the platform API.

    Parameters
    ----------
    message : str
        Error message describing the API error.
    endpoint : str, optional
        API path that failed.
    status_code : int, optional
        HTTP status code from the API response.

    Attributes
    ----------
    endpoint : str or None
        API path that failed.
    status_code : int or None
        HTTP status code if available.
    """

    def __init__(self, message: str, endpoint: str = None, status_code: int = None):
        details = {}
        if endpoint:
            details["endpoint"] = endpoint
        if status_code:
            details["status_code"] = status_code

        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code


class ResourceNotFoundError(SiteflowError):
    """Requested resource not found.

    Raised when:
    - No workflow matches the requested ID
    - No recent workflow carries log output
    - A site name cannot be resolved
    """

    pass
