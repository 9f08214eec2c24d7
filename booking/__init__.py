"""Home-service booking form: multi-step wizard, booking API and sheet store."""

__version__ = "0.1.0"
