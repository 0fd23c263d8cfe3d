"""
Rate limiting configuration using slowapi.

Two tiers:
  • pipeline – 5/min  (a run hits every upstream provider)
  • default  – 60/min (everything else)

The limiter keys on client IP by default.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address, default_limits=["60/minute"])

# Named rate strings for use in @limiter.limit() decorators
PIPELINE = "5/minute"    # full fetch → diff → notify run
DEFAULT = "60/minute"    # general API
