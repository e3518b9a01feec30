"""Library System package.

Organized by feature modules (attendance, occupancy, users, settings, reports)
with a thin Flask controller layer over service/repository layers.
"""
