"""Command-line interface for the Spring Almanac."""
