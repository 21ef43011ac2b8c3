"""Domain layer: business exceptions independent of infrastructure."""
