"""Job Match AI: mock career recommendations plus a grounded career chat assistant."""

__version__ = "0.1.0"
