"""configward - integrity guard for an agent platform's JSON5 config file."""

__version__ = "0.1.0"
