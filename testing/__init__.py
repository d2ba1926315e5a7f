"""Shared testing infrastructure for kompile.

This package provides reusable test doubles and factories for testing
across all kompile packages.

Modules:
    fixtures: In-memory backends, telemetry sinks and project factories

Usage:
    In your conftest.py:
        from testing.fixtures import RecordingJvmBackend, make_project
"""

from __future__ import annotations
