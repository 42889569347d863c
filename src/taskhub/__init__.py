"""Taskhub — multi-tenant task tracking API.

Users belong to organizations, organizations own projects, and projects
own todos. Every request is authenticated with a signed token that binds
the caller to one organization and one role.
"""

__version__ = "0.1.0"
