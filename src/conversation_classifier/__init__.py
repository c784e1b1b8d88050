"""
Conversation Classifier.

Sends a conversation transcript to an LLM chat API and classifies it into one
of a fixed set of topical categories (or proposes a new one). The result is a
structured object with:
- Chain-of-thought explanation
- Error flag (set when the conversation fits no existing category)
- A closed tagged union: one variant per category plus a new-category proposal

Architecture: prompt builder + structured completion (httpx LLM client and
multi-stage validation) + bounded retry loop
"""

__version__ = "0.1.0"
