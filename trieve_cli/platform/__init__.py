"""Trieve platform integration: profiles, credential resolution, API client and commands."""
