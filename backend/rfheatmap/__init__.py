"""RF signal-propagation heatmap engine."""

__version__ = "1.0.0"
