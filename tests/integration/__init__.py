"""
Integration tests for the Conversation Classifier.

Test components together:
- Full pipeline (conversation -> prompt -> mocked chat API -> validation -> result)
- Retry behavior across transport and validation failures
"""
