"""Shared markdown-it token utilities"""


def heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def matching_close(tokens: list, start: int) -> int:
    """Return the index of the token closing the open token at start."""
    depth = 0
    for i in range(start, len(tokens)):
        depth += tokens[i].nesting
        if depth == 0:
            return i
    raise ValueError(f"Unbalanced token stream: {tokens[start].type} at {start} is never closed")


def plain_text(tokens: list) -> str:
    """Concatenate the literal text carried by inline tokens."""
    return ''.join(t.content for t in tokens if t.type in ('text', 'code_inline'))
