"""
Scheduling Module.

Reconciles class schedules between the Student Information System (SIS) and
the HRMS backend, and drives teacher assignment, substitution and restore.
"""
