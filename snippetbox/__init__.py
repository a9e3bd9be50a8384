"""Snippetbox: share and review snippets of text."""
