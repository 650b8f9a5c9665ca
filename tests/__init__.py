"""
Test suite for HealthConnect.

Unit tests for the authorization policy and availability calculator, plus
API tests that drive the FastAPI app against a SQLite database.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
