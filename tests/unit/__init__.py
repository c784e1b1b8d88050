"""
Unit tests for the Conversation Classifier.

Test individual components in isolation:
- Data models (taxonomy, tagged-union result, error-flag invariant)
- Prompt builder (templates, normalization, truncation)
- LLM clients (OpenAI-compatible and Ollama, over httpx.MockTransport)
- Validation stages (each stage with positive/negative cases)
- Retry engine (attempt cap, propagation, exhaustion)
- CLI and settings
"""
