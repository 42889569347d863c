"""Authentication and authorization.

Learn: One authentication path — username/email + password → signed JWT.
The token carries the caller's organization and role, so every request
resolves to an AuthContext without touching the database. That context
scopes every query by org_id and feeds the role gate.
"""
