"""LMS chat relay: HTTP API, real-time relay and push notifications."""
