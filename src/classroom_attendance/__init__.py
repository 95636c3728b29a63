"""Classroom attendance package.

Organized by feature modules (semesters, schedules, attendance, sweep,
reports, ...) with a thin Flask action layer over service/repository layers.
"""
