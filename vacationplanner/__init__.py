"""Vacation Planner: session authentication and access control."""
