"""
Skill roadmaps.

A roadmap is an admin-authored template of ordered learning tasks. Starting
a roadmap snapshots one progress row per task for the user; certificates and
projects attach to those rows, and a final project completes the roadmap.
"""
