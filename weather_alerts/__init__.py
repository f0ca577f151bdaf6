"""Severe-weather alert polling and targeted push notifications."""
