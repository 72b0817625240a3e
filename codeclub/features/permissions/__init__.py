"""
Permission feature module.

Built-in roles (ADMIN, MEMBER, PENDING) plus admin-defined custom roles
carrying sets of permissions.
"""
