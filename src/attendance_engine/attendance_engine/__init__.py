"""Attendance reconciliation and overtime engine.

The package is organized by feature modules (sequencing, biometrics,
attendance, overtime, policies) with pure domain functions at the core and a
thin Flask controller layer around them.
"""
