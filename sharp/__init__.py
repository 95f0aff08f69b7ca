"""
SharpSuite application package.

Courts and bookings, fitness and nutrition logs, study focus and leagues,
reading tracker, usage limits and AI orchestration.
"""
