"""Clients for the upstream feed and the article database."""
