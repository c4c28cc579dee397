"""Guess processing helpers.

Every guess, whether it arrives over HTTP or from a script, is checked by the
same validator pipeline before the session is touched.
"""
