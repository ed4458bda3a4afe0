"""
Use cases for the Taskboard API.

ProjectService runs the load/mutate/save cycle over the projects snapshot,
UserService answers lookups over the user directory, and enrichment fills
the derived fields returned on reads. Routers call these services instead of
touching the JSON documents directly.
"""
