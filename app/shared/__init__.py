"""Shared cross-cutting helpers: telemetry, ids and time. No business logic."""
