"""Inkwell blog/CMS backend."""
