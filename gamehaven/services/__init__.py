"""
Services built on top of the repositories: change feed, live queries,
purchase recording, analytics, session state and first-run seeding.
"""
