"""bizrbac - authorization decision engine for multi-tenant business apps."""

__version__ = "0.1.0"
