"""Clinic application for the SmartHealthcare API.

This package contains the identity and clinic record models, the token
and password services, the authentication layer, the real-time event
broadcaster and the REST endpoints built on top of them.
"""
