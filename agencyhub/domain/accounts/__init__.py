"""Accounts domain - registration, sessions, whitelist and client profiles"""
