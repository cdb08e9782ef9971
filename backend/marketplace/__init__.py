"""
Event marketplace: organizer submissions, admin approval, public catalog.
"""

__version__ = "1.0.0"
