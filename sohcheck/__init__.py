"""
SoH Check
Battery State of Health from a single consumption trip
"""
__version__ = "0.1.0"
