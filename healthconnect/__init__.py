"""
HealthConnect

A FastAPI backend for booking doctor appointments and managing medical
records, with role-based access control for patients, doctors and admins.
"""

__version__ = "1.0.0"
