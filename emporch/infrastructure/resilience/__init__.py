"""API Resilience Implementations.

Contains services for handling upstream rate limits with exponential
backoff and for classifying upstream failures.
Bounded Context: API Resilience
"""
