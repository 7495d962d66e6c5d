"""Task management API over DynamoDB."""

__version__ = "0.1.0"
