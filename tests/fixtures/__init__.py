"""
Test fixtures for the Conversation Classifier.

Contains sample data for testing:
- taxonomy_support.json: Small two-category taxonomy (billing, technical_support)
"""
