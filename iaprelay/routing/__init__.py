"""iaprelay notification routing — fans a display payload out to chat destinations.

Destinations are a strategy table of pure formatting functions
(``iaprelay.routing.destinations``).  Delivery with rate-limit backoff is
shared (``iaprelay.routing.delivery``).  The DispatchCoordinator runs one
pipeline per enabled destination concurrently and records every outcome.
No delivery failure is silently dropped.
"""
