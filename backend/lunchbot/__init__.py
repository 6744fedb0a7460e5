"""Slack lunch bot service."""
