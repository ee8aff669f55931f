"""Discharge pipeline application for the hospital back office.

This package contains the models, serializers, services, views and route
registrations that take an admitted patient through medical discharge,
billing, payment and bed release.
"""
