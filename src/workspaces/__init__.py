"""Workspace ownership and access control.

Owner plus explicit per-user READ / WRITE / ADMIN grants, with bootstrap of
the DEFAULT, ROADMAP and GROUP_PROJECT workspaces for first-time owners.
"""
