"""Generate C# models and services from OpenAPI / Swagger documents."""

__version__ = "0.1.0"
