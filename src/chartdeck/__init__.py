"""chartdeck -- keep a chart server catalog in sync and edit it safely."""

__version__ = "0.1.0"
