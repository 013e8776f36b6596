"""Centralized exit codes for the shelldoc CLI."""


class ExitCodes:
    """Standard exit codes for shelldoc CLI commands."""

    SUCCESS = 0

    VALIDATION_ERRORS = 1

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get human-readable description for an exit code."""
        descriptions = {
            cls.SUCCESS: "Success - No issues found",
            cls.VALIDATION_ERRORS: "Command sequence validation reported errors",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")
