"""Input checks run before any estimation."""
