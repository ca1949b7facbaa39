"""
Utils package.

- All dates are represented as epoch timestamps (milliseconds since 1970-01-01T00:00:00Z).
- Calendar arithmetic is done on timezone-aware datetimes (see temporal_utils).
"""
