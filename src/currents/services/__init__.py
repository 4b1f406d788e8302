"""Business logic for the post lifecycle, feed and profiles."""
