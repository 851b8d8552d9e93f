"""linkharvest: rule-driven link extraction and aria2 dispatch."""

__version__ = "0.1.0"
