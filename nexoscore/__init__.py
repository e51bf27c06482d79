"""
NexoScore - Merchant Credit Scoring Service

Computes a 0-1000 credit score for small merchants from the activity they
log through the messaging assistant, and serves it to risk partners.
"""

__version__ = "0.1.0"
