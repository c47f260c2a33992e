"""Representation domain - agent/client relationships, lifecycle and audit trail"""
