"""
zkindex
=======

A live, narrowable index over a zettelkasten: list notes, narrow them with
stacked Focus (title) and Search (content) queries, sort them, and move a
cursor through the result.
"""

__version__ = "0.1.0"
