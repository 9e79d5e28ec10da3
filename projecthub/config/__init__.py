"""Settings and projects.yaml loading."""
