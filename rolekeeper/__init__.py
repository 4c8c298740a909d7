"""Startup validation and seeding of the user/role database."""
