"""
Quiz engine: grading, delivery sequencing, rankings and achievement triggers.

Nothing in this package touches the database or the session store.
"""
