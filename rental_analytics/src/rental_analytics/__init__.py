"""
Rental Analytics - Reporting engine for a bike-rental dataset

Computes grouped, rolled-up and cubed revenue summaries, customer
segmentation and discounted pricing over an in-memory relational snapshot.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
