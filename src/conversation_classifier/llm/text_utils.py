"""
Text processing utilities for the LLM layer.

Prepares conversation text for the prompt: whitespace normalization and
truncation at sentence boundaries.
"""

import re


def normalize_conversation(text: str) -> str:
    """
    Strip surrounding whitespace and collapse runs of 3+ blank lines.
    
    Line structure inside the conversation is preserved since speaker turns
    are usually one per line.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n").strip()
    return re.sub(r"\n{3,}", "\n\n", text)


def truncate_at_sentence_boundary(text: str, max_chars: int) -> str:
    """
    Truncate text at the nearest sentence boundary before max_chars.
    
    Preserves complete sentences to maintain semantic coherence for the LLM.
    Looks for sentence-ending punctuation (. ! ?) followed by whitespace or end.
    
    Args:
        text: Text to truncate
        max_chars: Maximum character count
        
    Returns:
        Truncated text ending at a sentence boundary, or hard-truncated if
        no sentence boundary found within the limit.
        
    Examples:
        >>> truncate_at_sentence_boundary("Hello. World. Test.", 15)
        'Hello. World.'
    """
    if len(text) <= max_chars:
        return text
    
    truncated_segment = text[:max_chars]
    
    sentence_end_pattern = r'[.!?](?:\s|$)'
    matches = list(re.finditer(sentence_end_pattern, truncated_segment))
    
    if matches:
        cutoff = matches[-1].end()
        # Exclude the trailing whitespace matched after the punctuation
        if truncated_segment[cutoff - 1:cutoff].isspace():
            cutoff -= 1
        return text[:cutoff]
    
    # No sentence boundary: avoid cutting a word in half if we can
    last_space = truncated_segment.rfind(' ')
    if last_space > max_chars * 0.8:
        return text[:last_space]
    
    return text[:max_chars]
