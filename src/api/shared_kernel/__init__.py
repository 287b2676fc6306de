"""Shared Kernel module.

Components explicitly shared by the IAM and Reservations bounded contexts:
the error taxonomy, the role vocabulary and authorization protocols, the
reservation change feed port, session token validation, and the
observation context used by every probe.

Changes here affect both contexts and should be coordinated.
"""
