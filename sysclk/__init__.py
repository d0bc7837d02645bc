"""Clock profiles, configuration values, power-management helpers and a service client."""

__version__ = "0.1.0"