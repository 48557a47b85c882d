"""Federated catalog resolution and search for the storefront."""
