"""
BoxDB Shell
===========
Session, renderer and interactive REPL around BoxDatabase.
"""
