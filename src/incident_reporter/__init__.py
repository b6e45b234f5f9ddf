"""Public incident reporting service: submission API, media storage and review dashboard."""
