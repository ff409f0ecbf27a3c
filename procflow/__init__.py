"""Read, validate, template, index and publish YAML process definitions."""

__version__ = "0.1.0"