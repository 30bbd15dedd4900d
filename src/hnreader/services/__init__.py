"""Feed processing services for HN Reader."""
