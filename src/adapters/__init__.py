"""Adapters between the core and GitHub (REST API, webhooks, check runs)."""
