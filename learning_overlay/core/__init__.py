"""Core data model and text utilities.

WHY: Parsers, the sync loop, renderers, and the vocabulary cache all share
the same few types (Segment, Token, VocabEntry) and the same text rules.
Keeping them here keeps every other package free of cross-imports.

HOW: ir.py defines the data structures, timestamps.py parses cue times,
text.py cleans and tokenizes subtitle text, colors.py maps vocabulary
status to display colors.

RULES:
- IR dataclasses are the contract; change with care
- Nothing in core performs I/O
"""
