"""HTTP surface for HN Reader."""
