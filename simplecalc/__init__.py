"""simplecalc — interactive command-line calculator with per-user settings.

Evaluates one simple expression per line (a bare number, `sqrt a`, or
`a op b`), restricted to the operations the user's settings allow, and prints
the result at the configured precision.

Usage:
    python -m simplecalc                     # Interactive session
    python -m simplecalc calc 2 ^ 3          # One-shot evaluation
    python -m simplecalc settings            # Show current settings
"""
