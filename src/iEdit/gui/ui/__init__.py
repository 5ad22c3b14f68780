"""Qt widgets, controllers and background tasks."""
