"""Board administration functions for the forum."""
