"""HRMS attendance package.

Organized by feature modules (attendance, employees, ...) with a thin Flask
controller layer over service/repository layers.
"""
