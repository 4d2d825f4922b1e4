"""
Operational CLI for OSP Devices.
"""
