"""Roadmap scheduling.

Distributes ordered roadmap steps across days under a daily hour budget and
files the result as an assignment in the owner's roadmap workspace.

Deterministic scheduling: no I/O in the scheduler itself.
"""
