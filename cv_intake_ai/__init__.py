"""CV Intake AI: CV upload, structuring, anonymization and review."""

__version__ = "0.1.0"
